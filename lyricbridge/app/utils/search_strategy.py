"""Search query variants for the catalog provider.

Strategy (in priority order):
1) "CleanTitle PrimaryArtist" - the most precise query.
2) "CleanTitle" alone - survives artist spelling differences.
3) "CoreTitle Artist" for each artist - CJK/Kana core of mixed-script titles.
4) "RawTitle RawArtist" - unprocessed input, lowest-precision title query.
5) "Artist" alone - last resort so that *something* surfaces when titles fail.

Queries are de-duplicated case-insensitively preserving order. The list is capped at
`max_strategies`; the artist-only fallback always keeps the final slot.
"""
from __future__ import annotations

from typing import List, Set

from .normalize import NormalizedQuery

DEFAULT_MAX_STRATEGIES = 6


def _join(*parts: str) -> str:
    return " ".join(p.strip() for p in parts if p and p.strip())


def build_search_strategies(query: NormalizedQuery, max_strategies: int = DEFAULT_MAX_STRATEGIES) -> List[str]:
    """Build the ordered, bounded list of search strings for one lookup."""
    title = query.search_track_name
    artists = list(query.artists)
    primary = query.primary_artist

    candidates: List[str] = []
    # 1) cleaned title + first artist
    candidates.append(_join(title, primary))
    # 2) cleaned title alone
    candidates.append(_join(title))
    # 3) core-script title + each artist
    if artists:
        for artist in artists:
            candidates.append(_join(query.core_track_name, artist))
    else:
        candidates.append(_join(query.core_track_name))
    # 4) raw title + raw artist
    candidates.append(_join(query.raw_track_name, query.raw_artist_name))

    seen: Set[str] = set()
    ordered: List[str] = []
    for q in candidates:
        key = q.lower()
        if key and key not in seen:
            seen.add(key)
            ordered.append(q)

    limit = max(1, max_strategies)
    # 5) artist alone, reserved final slot
    fallback = primary
    if fallback and limit > 1 and fallback.lower() not in seen:
        ordered = ordered[: limit - 1]
        ordered.append(fallback)
    return ordered[:limit]
