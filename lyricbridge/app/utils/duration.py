"""Duration parsing for catalog `interval` fields.

Upstream rows encode track length as raw seconds, "M:SS" strings, or CJK phrasing
such as "4分29秒". Everything is reduced to non-negative integer seconds; malformed
input degrades to 0 instead of raising.
"""
from __future__ import annotations

import math
import re
from typing import Any, Optional


_CJK_DURATION_RE = re.compile(
    r"^\s*(\d+)\s*(?:分钟?|min(?:utes?)?)\s*(?:(\d+)\s*(?:秒钟?|s(?:ec(?:onds?)?)?))?\s*$",
    re.IGNORECASE,
)


def _seconds_from_colon_str(s: str) -> Optional[int]:
    """Parse 'HH:MM:SS' or 'MM:SS' duration strings to seconds."""
    parts = s.strip().split(":")
    try:
        values = list(map(int, parts))
    except ValueError:
        return None
    if len(values) == 3:
        h, m, sec = values
        return h * 3600 + m * 60 + sec
    if len(values) == 2:
        m, sec = values
        return m * 60 + sec
    return None


def _from_number(value: float) -> int:
    if math.isnan(value) or math.isinf(value):
        return 0
    return max(0, int(value))


def parse_duration(raw: Any) -> int:
    """Convert a polymorphic interval value into integer seconds (never negative, 0 on failure)."""
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, (int, float)):
        return _from_number(raw)
    if not isinstance(raw, str):
        return 0

    text = raw.strip()
    if not text:
        return 0

    m = _CJK_DURATION_RE.match(text)
    if m:
        minutes = int(m.group(1))
        seconds = int(m.group(2) or 0)
        return minutes * 60 + seconds

    if ":" in text:
        parsed = _seconds_from_colon_str(text)
        return max(0, parsed) if parsed is not None else 0

    try:
        return _from_number(float(text))
    except ValueError:
        return 0
