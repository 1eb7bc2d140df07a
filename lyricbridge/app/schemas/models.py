from __future__ import annotations

from typing import Optional, Union
from pydantic import BaseModel, ConfigDict


class LyricsResponse(BaseModel):
    """Response record in the public lyrics API shape (camelCase keys).

    Built once per request and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[Union[int, str]] = None
    trackName: str
    artistName: str = ""
    albumName: str = ""
    duration: int = 0
    instrumental: bool
    plainLyrics: str = ""
    syncedLyrics: str = ""
    translatedLyrics: Optional[str] = None
    # "yrc" (word-synced), "lrc" (line-synced) or "none"
    lyricType: Optional[str] = None
    # Set only when no synced lyrics were found
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    detail: str


class InfoResponse(BaseModel):
    name: str
    version: str
