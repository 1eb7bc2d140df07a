"""Exceptions raised by the lyric lookup core."""

from typing import Optional


class LyricBridgeError(Exception):
    """Base exception for the lyric bridge."""
    pass


class UpstreamTransportError(LyricBridgeError):
    """A single call to the catalog or lyric provider failed at network/HTTP level."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
