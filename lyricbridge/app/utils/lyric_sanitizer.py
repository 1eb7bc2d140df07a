"""
Lyric markup sanitizing and plain-text extraction.

All functions are pure. Line structure is preserved: plain text keeps one output
line per non-empty input line, never a single space-joined blob.
"""
from __future__ import annotations

import re
from typing import List, Optional

_TAG_PATTERNS = [
    re.compile(r"\[\d+:\d+(?:[.:]\d+)?\]"),  # [mm:ss.xx] / [mm:ss]
    re.compile(r"<\d+(?:[.:,]\d+)+>"),  # <x.y.z> word tags, <mm:ss.xx> enhanced LRC
    re.compile(r"\[\d+,\d+\]"),  # [start,duration] word-synced line tag
    re.compile(r"\(\d+,\d+(?:,\d+)?\)"),  # (start,duration) word timing
    re.compile(r"\[[^\[\]]*\]"),  # [ti:..] [ar:..] [offset:..] and other bracket tags
]

_LEADING_TIME_TAG_RE = re.compile(r"^\[(\d+):(\d+)(?:[.:](\d+))?\]")
_ANY_TIME_TAG_RE = re.compile(r"\[(\d+):(\d+)(?:[.:](\d+))?\]")

_DISPLAY_TAG_RE = re.compile(r"^\[(?:ti|ar):.*\]$", re.IGNORECASE)
_METADATA_TAG_RE = re.compile(r"^\[[A-Za-z_]+:.*\]$")
_TIMED_COMMENT_RE = re.compile(r"^(?:\[\d+:\d+(?:[.:]\d+)?\])+\s*//\s*$")
_BOILERPLATE_RES = [
    re.compile(r"^(?:\[\d+:\d+(?:[.:]\d+)?\])*\s*(?:TME|QQ音乐)享有本翻译作品的著作权\s*$"),
    re.compile(r"^(?:\[\d+:\d+(?:[.:]\d+)?\])*\s*以下歌词翻译由文曲大模型提供\s*$"),
]


def strip_tags(line: str) -> str:
    """Remove every time/markup tag from one line; repeats until nothing changes."""
    previous = None
    current = line
    while current != previous:
        previous = current
        for pattern in _TAG_PATTERNS:
            current = pattern.sub("", current)
    return current.strip()


def extract_plain_text(content: Optional[str]) -> str:
    """Untagged transcript, newline-separated, empty lines dropped. Idempotent."""
    if not content:
        return ""
    lines = (strip_tags(line) for line in content.splitlines())
    return "\n".join(line for line in lines if line)


def _is_noise_line(line: str, keep_display_tags: bool) -> bool:
    if line in ("", "//"):
        return True
    if _TIMED_COMMENT_RE.match(line):
        return True
    if any(p.match(line) for p in _BOILERPLATE_RES):
        return True
    if _DISPLAY_TAG_RE.match(line):
        return not keep_display_tags
    if _METADATA_TAG_RE.match(line):
        return True
    # Timestamp-only lines and bare bracket lines carry no lyric text
    return not strip_tags(line)


def sanitize_metadata_lines(content: Optional[str], keep_display_tags: bool = True) -> str:
    """
    Drop metadata/boilerplate lines from tagged lyrics, keeping lyric lines with their tags.

    With keep_display_tags the [ti:] and [ar:] lines survive for display purposes.
    """
    if not content:
        return ""
    kept: List[str] = []
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not _is_noise_line(line, keep_display_tags):
            kept.append(line)
    return "\n".join(kept)


def _tag_seconds(minutes: str, seconds: str, fraction: Optional[str]) -> float:
    value = int(minutes) * 60 + int(seconds)
    if fraction:
        value += int(fraction) / (10 ** len(fraction))
    return value


def format_time_tag(seconds: float) -> str:
    """Format seconds as an LRC [mm:ss.xx] tag."""
    total_cs = max(0, int(round(seconds * 100)))
    minutes, rem = divmod(total_cs, 6000)
    secs, cs = divmod(rem, 100)
    return f"[{minutes:02d}:{secs:02d}.{cs:02d}]"


def _line_stamps(line: str) -> List[float]:
    return [_tag_seconds(*m) for m in _ANY_TIME_TAG_RE.findall(line)]


def closing_time_tag(content: Optional[str]) -> Optional[str]:
    """The trailing timestamp-only line of a transcript (its end boundary), if there is one."""
    if not content:
        return None
    lines = [line.strip() for line in content.splitlines() if line.strip()]
    if not lines:
        return None
    last = lines[-1]
    if not _LEADING_TIME_TAG_RE.match(last) or strip_tags(last):
        return None
    return last


def repair_end_time(content: Optional[str], padding: float = 3.0, closing: Optional[str] = None) -> str:
    """
    Append a closing timestamp when the last lyric line has a start tag but nothing ends it.

    `closing` is the end boundary the provider sent (see closing_time_tag); it is restored
    when it lies after the last lyric line, otherwise one is synthesized `padding` seconds
    after that line. Best effort: content is returned unchanged when the last line is
    already a bare timestamp or its time tag cannot be parsed.
    """
    if not content:
        return content or ""
    lines = [line for line in content.splitlines() if line.strip()]
    if not lines:
        return content
    last = lines[-1].strip()
    if not _LEADING_TIME_TAG_RE.match(last) or not strip_tags(last):
        return content

    stamps = _line_stamps(last)
    if not stamps:
        return content
    closing_stamps = _line_stamps(closing) if closing else []
    if closing_stamps and max(closing_stamps) > max(stamps):
        end_tag = closing.strip()
    else:
        end_tag = format_time_tag(max(stamps) + max(0.0, padding))
    return content.rstrip("\r\n") + "\n" + end_tag
