"""
Utilities for normalizing lyric lookup queries.

Responsibilities:
- Clean track titles (parenthetical annotations, version/remaster qualifiers, CJK brackets)
- Split artist strings into an ordered, de-duplicated artist list
- Isolate the CJK/Kana core of mixed-script titles
- Apply the injectable mistranslated-title table

All functions are pure and deterministic.
"""
from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple


logger = logging.getLogger(__name__)

# Ordered: suffix patterns run before bracket removal so " - 《X》 ..." disappears as a unit.
_TITLE_NOISE_PATTERNS = [
    re.compile(r"\s+[-–—]\s+《.*?》.*$"),
    re.compile(r"\s+[-–—]\s+.*(?:anniversary|theme song|version|动画|主题曲).*$", re.IGNORECASE),
    re.compile(r"\s+[-–—]\s+(?:from|official|remaster(?:ed)?)\b.*$", re.IGNORECASE),
    re.compile(r"\s+[-–—]\s+.*\b(?:mix|edit)\b.*$", re.IGNORECASE),
    re.compile(r"\s*\((?:from|feat\.?|ft\.?)\b[^)]*\)", re.IGNORECASE),
    re.compile(r"\([^)]*\)"),
    re.compile(r"（[^）]*）"),
    re.compile(r"\[[^\]]*\]"),
    re.compile(r"《[^》]*》"),
    re.compile(r"【[^】]*】"),
    re.compile(r"-{3,}|—{2,}|–{2,}"),
]

_TRAILING_SEPARATORS_RE = re.compile(r"[-–—\s]+$")
_FIRST_TOKEN_SPLIT_RE = re.compile(r"[-\s–—|]")

_ARTIST_SPLIT_RE = re.compile(r"\s*[,，、]\s*|\s+&\s+|\s+(?:and|和|与)\s+", re.IGNORECASE)

# CJK unified ideographs (incl. extension A), iteration mark, Hiragana, Katakana
_CORE_SCRIPT_RE = re.compile(r"[぀-ゟ゠-ヿ㐀-䶿一-鿿々]+")


def _collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def normalize_track_name(raw: Optional[str]) -> str:
    """
    Strip annotations and qualifiers from a track title.

    Falls back to the text before the first separator when cleaning removes everything.
    """
    original = (raw or "").strip()
    processed = original
    for pattern in _TITLE_NOISE_PATTERNS:
        processed = pattern.sub("", processed)
    processed = _collapse_whitespace(processed)
    processed = _TRAILING_SEPARATORS_RE.sub("", processed).strip()
    if processed:
        return processed
    for token in _FIRST_TOKEN_SPLIT_RE.split(original):
        if token.strip():
            return token.strip()
    return original


def normalize_artist_names(raw: Optional[str]) -> List[str]:
    """Split an artist string on , & and "and"; de-duplicate case-insensitively, keep order."""
    seen = set()
    artists: List[str] = []
    for part in _ARTIST_SPLIT_RE.split(raw or ""):
        name = _collapse_whitespace(part)
        key = name.lower()
        if name and key not in seen:
            seen.add(key)
            artists.append(name)
    return artists


def core_script_run(text: Optional[str]) -> str:
    """First contiguous CJK/Kana run in the text, or an empty string."""
    m = _CORE_SCRIPT_RE.search(text or "")
    return m.group(0) if m else ""


def is_latin_script(text: Optional[str]) -> bool:
    """True when every letter in the text is Latin (accents allowed) and there is at least one."""
    letters = [ch for ch in (text or "") if ch.isalpha()]
    if not letters:
        return False
    return all(unicodedata.name(ch, "").startswith("LATIN") for ch in letters)


def extract_core_name(text: Optional[str]) -> str:
    """
    Pull the contiguous CJK/Kana run out of a mixed-script title.

    Latin-only input is returned unchanged: truncating a short Latin phrase loses its meaning.
    Other scripts fall back to the cleaned title, or its first word.
    """
    text = (text or "").strip()
    if not text or is_latin_script(text):
        return text

    core = core_script_run(text)
    if core:
        return core

    processed = normalize_track_name(text)
    if processed and len(processed) < len(text):
        return processed
    first = _FIRST_TOKEN_SPLIT_RE.split(text)[0].strip()
    return first or text


def apply_title_mapping(
    track_name: str, artists: List[str], mappings: Optional[Mapping[str, str]]
) -> str:
    """Return the corrected search title for known mistranslations, or the title unchanged."""
    if not mappings:
        return track_name
    for artist in artists:
        key = f"{track_name.lower()}_{artist.lower()}"
        mapped = mappings.get(key)
        if mapped:
            logger.info("Title mapping: %r -> %r (artist %r)", track_name, mapped, artist)
            return mapped
    return track_name


@dataclass(frozen=True)
class NormalizedQuery:
    raw_track_name: str
    raw_artist_name: str
    cleaned_track_name: str
    search_track_name: str
    core_track_name: str
    artists: Tuple[str, ...]
    is_latin_script: bool

    @property
    def primary_artist(self) -> str:
        return self.artists[0] if self.artists else ""


def normalize_query(
    track_name: str,
    artist_name: Optional[str] = None,
    title_mappings: Optional[Mapping[str, str]] = None,
) -> NormalizedQuery:
    """Derive every search key used downstream from the raw (title, artist) input."""
    raw_track = (track_name or "").strip()
    raw_artist = (artist_name or "").strip()

    cleaned = normalize_track_name(raw_track)
    artists = normalize_artist_names(raw_artist)
    search_title = apply_title_mapping(cleaned, artists, title_mappings)

    return NormalizedQuery(
        raw_track_name=raw_track,
        raw_artist_name=raw_artist,
        cleaned_track_name=cleaned,
        search_track_name=search_title,
        core_track_name=extract_core_name(search_title),
        artists=tuple(artists),
        is_latin_script=is_latin_script(raw_track),
    )
