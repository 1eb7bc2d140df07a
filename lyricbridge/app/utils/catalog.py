"""Catalog search rows normalized into comparable candidates."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from .duration import parse_duration
from .fields import extract_album, extract_artists, extract_song_title


def _opt_id(value: Any) -> Optional[Union[int, str]]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, str)):
        return value if str(value).strip() else None
    return str(value)


@dataclass(frozen=True)
class CatalogCandidate:
    external_id: Optional[Union[int, str]]
    external_alt_id: Optional[Union[int, str]]
    display_title: str
    artist_name: str
    album_name: str
    duration_sec: int
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CatalogCandidate":
        """Normalize one provider row; polymorphic fields are flattened here, on ingress."""
        return cls(
            external_id=_opt_id(row.get("id")),
            external_alt_id=_opt_id(row.get("mid")),
            display_title=extract_song_title(row),
            artist_name=extract_artists(row.get("singer")),
            album_name=extract_album(row.get("album")),
            duration_sec=parse_duration(row.get("interval")),
            raw=row,
        )

    @property
    def response_id(self) -> Optional[Union[int, str]]:
        return self.external_id if self.external_id is not None else self.external_alt_id


def parse_search_rows(rows: Any) -> List[CatalogCandidate]:
    """Turn the provider `data` array into candidates, skipping rows that are not objects."""
    if not isinstance(rows, list):
        return []
    candidates: List[CatalogCandidate] = []
    for row in rows:
        if isinstance(row, Mapping):
            candidates.append(CatalogCandidate.from_row(row))
    return candidates


def describe(candidate: CatalogCandidate) -> Dict[str, Any]:
    """Compact dict used in log lines."""
    return {
        "id": candidate.response_id,
        "title": candidate.display_title,
        "artist": candidate.artist_name,
    }
