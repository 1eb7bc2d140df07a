"""
Adapters for polymorphic catalog fields.

Upstream rows carry `singer`, `album` and friends as a scalar, an object, a list of
objects, or nothing at all. Each raw value is first classified into an explicit
variant (ScalarField / ObjectField / ListField / MissingField) and then flattened
to a display string. Extraction never raises and never returns None.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence, Tuple, Union


ARTIST_NAME_KEYS = ("name", "title", "singer_name")
ALBUM_NAME_KEYS = ("name", "title")
SONG_TITLE_KEYS = ("song", "name", "songname", "title", "songName")


@dataclass(frozen=True)
class MissingField:
    pass


@dataclass(frozen=True)
class ScalarField:
    value: str


@dataclass(frozen=True)
class ObjectField:
    value: Mapping[str, Any]


@dataclass(frozen=True)
class ListField:
    items: Tuple["FieldValue", ...]


FieldValue = Union[MissingField, ScalarField, ObjectField, ListField]


def classify_field(raw: Any) -> FieldValue:
    """Tag a raw JSON value with the shape it arrived in."""
    if raw is None:
        return MissingField()
    if isinstance(raw, Mapping):
        return ObjectField(raw)
    if isinstance(raw, (list, tuple)):
        return ListField(tuple(classify_field(item) for item in raw))
    if isinstance(raw, bool):
        return MissingField()
    text = str(raw).strip()
    return ScalarField(text) if text else MissingField()


def _lookup_alias(obj: Mapping[str, Any], keys: Sequence[str]) -> str:
    for key in keys:
        value = obj.get(key)
        if value is None or isinstance(value, (Mapping, list, tuple, bool)):
            continue
        text = str(value).strip()
        if text:
            return text
    return ""


def _flatten(field: FieldValue, keys: Sequence[str]) -> str:
    if isinstance(field, ScalarField):
        return field.value
    if isinstance(field, ObjectField):
        return _lookup_alias(field.value, keys)
    if isinstance(field, ListField):
        names = [_flatten(item, keys) for item in field.items]
        return ", ".join(name for name in names if name)
    return ""


def extract_artists(raw: Any) -> str:
    """Flatten a `singer` field: list entries are joined with ", " in order, blanks dropped."""
    return _flatten(classify_field(raw), ARTIST_NAME_KEYS)


def extract_album(raw: Any) -> str:
    """Flatten an `album` field to a single name."""
    field = classify_field(raw)
    if isinstance(field, ListField):
        # Single-valued: first usable entry wins
        for item in field.items:
            name = _flatten(item, ALBUM_NAME_KEYS)
            if name:
                return name
        return ""
    return _flatten(field, ALBUM_NAME_KEYS)


def extract_song_title(row: Any) -> str:
    """Return the first non-empty title alias of a catalog row."""
    if not isinstance(row, Mapping):
        return ""
    return _lookup_alias(row, SONG_TITLE_KEYS)
