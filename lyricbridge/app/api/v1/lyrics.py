from typing import AsyncIterator, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

try:
    from ...core.config import settings  # type: ignore
    from ...core.errors import UpstreamTransportError  # type: ignore
    from ...schemas.models import LyricsResponse, ErrorResponse  # type: ignore
    from ...utils.lyrics_lookup import LyricsLookupService  # type: ignore
    from ...utils.provider_client import ProviderClient  # type: ignore
except Exception:  # pragma: no cover
    from core.config import settings  # type: ignore
    from core.errors import UpstreamTransportError  # type: ignore
    from schemas.models import LyricsResponse, ErrorResponse  # type: ignore
    from utils.lyrics_lookup import LyricsLookupService  # type: ignore
    from utils.provider_client import ProviderClient  # type: ignore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["lyrics"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing parameters"},
    404: {"model": ErrorResponse, "description": "No matching song"},
    502: {"model": ErrorResponse, "description": "Upstream catalog unreachable"},
}


async def get_provider() -> AsyncIterator[ProviderClient]:
    """One upstream client per request; overridden in tests."""
    async with ProviderClient.from_settings(settings) as provider:
        yield provider


def _pick(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value and value.strip():
            return value.strip()
    return None


async def _run_lookup(provider: ProviderClient, track: str, artist: Optional[str]) -> LyricsResponse:
    service = LyricsLookupService.from_settings(provider, settings)
    try:
        result = await service.lookup(track, artist)
    except UpstreamTransportError as e:
        logger.error("All search strategies failed upstream for %r / %r: %s", track, artist, e)
        raise HTTPException(status_code=502, detail="Upstream catalog unavailable")
    except Exception:
        logger.exception("Lyric lookup crashed for %r / %r", track, artist)
        raise HTTPException(status_code=500, detail="Internal server error")
    if result is None:
        raise HTTPException(status_code=404, detail="Song not found")
    return result


@router.get(
    "/get",
    response_model=LyricsResponse,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
async def get_lyrics_strict(
    trackName: Optional[str] = Query(None),
    track_name: Optional[str] = Query(None),
    artistName: Optional[str] = Query(None),
    artist_name: Optional[str] = Query(None),
    provider: ProviderClient = Depends(get_provider),
):
    """Look up lyrics by title and artist (both required)."""
    track = _pick(trackName, track_name)
    artist = _pick(artistName, artist_name)
    if not track or not artist:
        raise HTTPException(
            status_code=400,
            detail="trackName/track_name and artistName/artist_name are both required",
        )
    return await _run_lookup(provider, track, artist)


@router.get(
    "/get-lyrics",
    response_model=LyricsResponse,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
async def get_lyrics(
    trackName: Optional[str] = Query(None),
    track_name: Optional[str] = Query(None),
    artistName: Optional[str] = Query(None),
    artist_name: Optional[str] = Query(None),
    provider: ProviderClient = Depends(get_provider),
):
    """Look up lyrics by title; the artist narrows the search when given."""
    track = _pick(trackName, track_name)
    if not track:
        raise HTTPException(status_code=400, detail="trackName/track_name is required")
    return await _run_lookup(provider, track, _pick(artistName, artist_name))
