"""Lyric lookup pipeline (search strategies -> best match -> lyric payload -> response).

Design goals:
- One request, one fresh pipeline: no state survives between lookups.
- Strategies run strictly in order with a small throttle between attempts; the first
  strategy that yields candidates decides the match.
- A transport failure only costs its own strategy; the lookup raises only when every
  strategy failed that way. "Not found" is returned as None.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

try:
    from ..core.config import settings, Settings  # type: ignore
    from ..core.errors import UpstreamTransportError  # type: ignore
    from ..schemas.models import LyricsResponse  # type: ignore
except Exception:  # pragma: no cover
    from core.config import settings, Settings  # type: ignore
    from core.errors import UpstreamTransportError  # type: ignore
    from schemas.models import LyricsResponse  # type: ignore

from .catalog import CatalogCandidate, describe, parse_search_rows
from .lyric_decoder import LyricPayload, LyricVariant, decode_lyric_payload
from .lyric_sanitizer import closing_time_tag, extract_plain_text, repair_end_time, sanitize_metadata_lines
from .normalize import NormalizedQuery, normalize_query
from .provider_client import ProviderClient
from .ranking_service import RankingService
from .search_strategy import DEFAULT_MAX_STRATEGIES, build_search_strategies

logger = logging.getLogger(__name__)


LYRIC_TYPE_NAMES = {
    LyricVariant.word_synced: "yrc",
    LyricVariant.line_synced: "lrc",
}
NO_LYRICS_MESSAGE = "No synced lyrics found"


@dataclass(frozen=True)
class LyricResult:
    synced_lyrics: str
    plain_lyrics: str
    translated_lyrics: Optional[str]
    variant: LyricVariant

    @property
    def is_instrumental(self) -> bool:
        return not self.synced_lyrics.strip()

    @property
    def lyric_type(self) -> str:
        """Public name of the variant served: "yrc", "lrc" or "none"."""
        if self.is_instrumental:
            return "none"
        return LYRIC_TYPE_NAMES.get(self.variant, "none")


def build_lyric_result(
    payload: LyricPayload,
    keep_display_tags: bool = True,
    fix_end_time: bool = False,
    end_time_padding: float = 3.0,
) -> LyricResult:
    """Sanitize the decoded payload into synced/plain/translated text."""
    synced = sanitize_metadata_lines(payload.raw_content, keep_display_tags=keep_display_tags)
    plain = extract_plain_text(synced)
    if not plain:
        # Only metadata survived: treat as instrumental
        synced = ""
    elif fix_end_time:
        # Timestamp-only lines are gone after sanitizing; the end boundary comes from the raw text
        synced = repair_end_time(
            synced, padding=end_time_padding, closing=closing_time_tag(payload.raw_content)
        )

    translated = sanitize_metadata_lines(payload.translation, keep_display_tags=keep_display_tags)
    return LyricResult(
        synced_lyrics=synced,
        plain_lyrics=plain,
        translated_lyrics=translated or None,
        variant=payload.variant,
    )


EMPTY_LYRICS = LyricResult(synced_lyrics="", plain_lyrics="", translated_lyrics=None, variant=LyricVariant.none)


class LyricsLookupService:
    """Runs one lookup against a provider; construct a new one per request."""

    def __init__(
        self,
        provider: ProviderClient,
        ranking: RankingService = None,
        *,
        strategy_delay_ms: int = 0,
        max_strategies: int = DEFAULT_MAX_STRATEGIES,
        title_mappings: Optional[Mapping[str, str]] = None,
        keep_display_tags: bool = True,
        fix_end_time: bool = False,
        end_time_padding: float = 3.0,
    ):
        self.provider = provider
        self.ranking = ranking or RankingService()
        self.strategy_delay = max(0, strategy_delay_ms) / 1000.0
        self.max_strategies = max_strategies
        self.title_mappings = title_mappings or {}
        self.keep_display_tags = keep_display_tags
        self.fix_end_time = fix_end_time
        self.end_time_padding = end_time_padding

    @classmethod
    def from_settings(cls, provider: ProviderClient, cfg: Settings = None,
                      ranking: RankingService = None) -> "LyricsLookupService":
        cfg = cfg or settings
        return cls(
            provider,
            ranking,
            strategy_delay_ms=cfg.strategy_delay_ms,
            max_strategies=cfg.max_search_strategies,
            title_mappings=cfg.title_mappings,
            keep_display_tags=cfg.keep_display_tags,
            fix_end_time=cfg.repair_end_time,
            end_time_padding=cfg.end_time_padding,
        )

    async def find_song(self, query: NormalizedQuery) -> Optional[CatalogCandidate]:
        """Try each strategy in order until one produces a match."""
        strategies = build_search_strategies(query, self.max_strategies)
        failures = 0
        last_error: Optional[UpstreamTransportError] = None

        for idx, word in enumerate(strategies, 1):
            if idx > 1 and self.strategy_delay:
                await asyncio.sleep(self.strategy_delay)
            logger.info("Search strategy %d/%d: %r", idx, len(strategies), word)
            try:
                rows = await self.provider.search(word)
            except UpstreamTransportError as e:
                failures += 1
                last_error = e
                logger.warning("Search strategy %d failed: %s", idx, e)
                continue

            candidates = parse_search_rows(rows)
            if not candidates:
                continue
            match = self.ranking.select_best_match(candidates, query)
            if match is not None:
                logger.info("Strategy %d matched %s", idx, describe(match))
                return match

        if strategies and failures == len(strategies) and last_error is not None:
            raise last_error
        return None

    async def fetch_lyrics(self, candidate: CatalogCandidate) -> LyricResult:
        """Fetch by id, then by mid on transport failure; no lyrics is not an error."""
        attempts = []
        if candidate.external_id is not None:
            attempts.append({"song_id": candidate.external_id})
        if candidate.external_alt_id is not None:
            attempts.append({"mid": candidate.external_alt_id})

        for params in attempts:
            try:
                data = await self.provider.fetch_lyric(**params)
            except UpstreamTransportError as e:
                logger.warning("Lyric fetch %s failed: %s", params, e)
                continue
            payload = decode_lyric_payload(data)
            logger.info(
                "Lyrics for %s: %s (base64=%s, translation=%s, translation base64=%s)",
                describe(candidate),
                payload.variant.value,
                payload.is_base64_encoded,
                bool(payload.translation),
                payload.translation_is_base64_encoded,
            )
            return build_lyric_result(
                payload,
                keep_display_tags=self.keep_display_tags,
                fix_end_time=self.fix_end_time,
                end_time_padding=self.end_time_padding,
            )

        logger.warning("No lyric source reachable for %s; returning instrumental record", describe(candidate))
        return EMPTY_LYRICS

    async def lookup(self, track_name: str, artist_name: Optional[str] = None) -> Optional[LyricsResponse]:
        """Full lookup; None when no strategy found a song."""
        query = normalize_query(track_name, artist_name, self.title_mappings)
        logger.info(
            "Lookup %r / %r (search title %r, artists %s)",
            query.raw_track_name,
            query.raw_artist_name,
            query.search_track_name,
            list(query.artists),
        )
        song = await self.find_song(query)
        if song is None:
            return None

        lyrics = await self.fetch_lyrics(song)
        return LyricsResponse(
            id=song.response_id,
            trackName=song.display_title or query.raw_track_name,
            artistName=song.artist_name,
            albumName=song.album_name,
            duration=song.duration_sec,
            instrumental=lyrics.is_instrumental,
            plainLyrics=lyrics.plain_lyrics,
            syncedLyrics=lyrics.synced_lyrics,
            translatedLyrics=lyrics.translated_lyrics,
            lyricType=lyrics.lyric_type,
            message=NO_LYRICS_MESSAGE if lyrics.is_instrumental else None,
        )


async def lookup_lyrics(
    track_name: str,
    artist_name: Optional[str] = None,
    *,
    provider: ProviderClient,
    cfg: Settings = None,
) -> Optional[LyricsResponse]:
    """Convenience entry point: a fresh service per call."""
    return await LyricsLookupService.from_settings(provider, cfg).lookup(track_name, artist_name)
