"""
Lyric payload decoding.

Responsibilities:
- Pick the lyric variant from the provider `data` object (word-synced > line-synced > none)
- Extract the translation track independently of the primary variant
- Undo base64 transport encoding when the decoded text looks like lyrics; keep the raw
  string otherwise (a failed decode never empties existing content)
"""
from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class LyricVariant(str, Enum):
    word_synced = "word_synced"
    line_synced = "line_synced"
    translation = "translation"
    none = "none"


WORD_SYNCED_KEYS = ("yrc",)
LINE_SYNCED_KEYS = ("lyric", "lrc")
TRANSLATION_KEYS = ("trans", "tlrc", "klyric")

_LYRIC_STRUCTURE_PATTERNS = [
    re.compile(r"\[\d+:\d+(?:[.:]\d+)?\]"),  # LRC line tag
    re.compile(r"<\d+\.\d+\.\d+>"),  # word-level tag
    re.compile(r"\[\d+,\d+\]"),  # word-synced line tag (start,duration)
]
_TEXT_CONTENT_RE = re.compile(r"[A-Za-z぀-ヿ㐀-䶿一-鿿가-힯]")
_MIN_PERMISSIVE_LENGTH = 10


@dataclass(frozen=True)
class LyricPayload:
    variant: LyricVariant
    raw_content: str
    is_base64_encoded: bool
    translation: str = ""
    translation_is_base64_encoded: bool = False


def looks_like_lyric(content: Optional[str], permissive: bool = False) -> bool:
    """Structural check on decoded text: time tags, or (permissive) non-trivial text."""
    if not content:
        return False
    if any(p.search(content) for p in _LYRIC_STRUCTURE_PATTERNS):
        return True
    if permissive:
        stripped = content.strip()
        return len(stripped) >= _MIN_PERMISSIVE_LENGTH and bool(_TEXT_CONTENT_RE.search(stripped))
    return False


def maybe_decode_base64(raw: Optional[str], permissive: bool = False) -> Tuple[str, bool]:
    """
    Return (content, was_decoded).

    Content that already carries lyric time tags is returned as-is; otherwise a strict
    base64 decode is attempted and accepted only when the result looks like lyrics.
    """
    if not raw:
        return "", False
    if any(p.search(raw) for p in _LYRIC_STRUCTURE_PATTERNS):
        return raw, False

    compact = re.sub(r"\s+", "", raw)
    if not compact:
        return raw, False
    padded = compact + "=" * (-len(compact) % 4)
    try:
        decoded = base64.b64decode(padded, validate=True).decode("utf-8")
    except (binascii.Error, ValueError) as e:
        logger.debug("Base64 decode rejected (%s); keeping raw content", e)
        return raw, False

    if looks_like_lyric(decoded, permissive=permissive):
        return decoded, True
    logger.debug("Decoded payload does not look like lyrics; keeping raw content")
    return raw, False


def _first_text(data: Mapping[str, Any], keys: Sequence[str]) -> Tuple[Optional[str], str]:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return key, value
    return None, ""


def _unwrap(response: Any) -> Optional[Mapping[str, Any]]:
    """Accept either the provider `data` object or the full `{code, data}` envelope."""
    if not isinstance(response, Mapping):
        return None
    if "code" in response and "data" in response:
        if response.get("code") != 200:
            return None
        inner = response.get("data")
        return inner if isinstance(inner, Mapping) else None
    return response


def decode_lyric_payload(response: Any) -> LyricPayload:
    """Choose and decode the lyric variant; absent fields mean no lyrics, never an error."""
    data = _unwrap(response)
    if data is None:
        return LyricPayload(variant=LyricVariant.none, raw_content="", is_base64_encoded=False)

    translation, translation_b64 = "", False
    trans_key, trans_raw = _first_text(data, TRANSLATION_KEYS)
    if trans_key:
        translation, translation_b64 = maybe_decode_base64(trans_raw, permissive=True)

    variant = LyricVariant.none
    key, raw = _first_text(data, WORD_SYNCED_KEYS)
    if key:
        variant = LyricVariant.word_synced
    else:
        key, raw = _first_text(data, LINE_SYNCED_KEYS)
        if key:
            variant = LyricVariant.line_synced

    if variant is LyricVariant.none:
        logger.info("No lyric field in payload; available keys: %s", sorted(data.keys()))
        return LyricPayload(
            variant=variant,
            raw_content="",
            is_base64_encoded=False,
            translation=translation,
            translation_is_base64_encoded=translation_b64,
        )

    content, decoded = maybe_decode_base64(raw)
    logger.debug("Using %s lyric field %r (base64=%s)", variant.value, key, decoded)
    return LyricPayload(
        variant=variant,
        raw_content=content,
        is_base64_encoded=decoded,
        translation=translation,
        translation_is_base64_encoded=translation_b64,
    )
