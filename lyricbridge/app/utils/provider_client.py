"""HTTP client for the upstream song catalog (search + lyric endpoints).

Transport problems (connection errors, timeouts, HTTP status >= 400) raise
UpstreamTransportError so the caller can move on to its next strategy.
Unexpected payload shapes are not errors: they read as "no results".
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

import httpx

try:
    from ..core.config import settings, Settings  # type: ignore
    from ..core.errors import UpstreamTransportError  # type: ignore
except Exception:  # pragma: no cover
    from core.config import settings, Settings  # type: ignore
    from core.errors import UpstreamTransportError  # type: ignore

logger = logging.getLogger(__name__)


class ProviderClient:
    """Async wrapper around the catalog search and lyric endpoints."""

    def __init__(
        self,
        search_url: str,
        lyric_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.search_url = search_url
        self.lyric_url = lyric_url
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_settings(cls, cfg: Settings = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> "ProviderClient":
        cfg = cfg or settings
        return cls(
            search_url=cfg.search_url,
            lyric_url=cfg.lyric_url,
            timeout=cfg.upstream_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ProviderClient":
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get_json(self, url: str, params: Dict[str, Any]) -> Any:
        if self._client is None:
            raise RuntimeError("ProviderClient must be used as an async context manager")
        try:
            resp = await self._client.get(url, params=params)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamTransportError(
                f"Upstream returned HTTP {e.response.status_code}",
                url=str(e.request.url),
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamTransportError(f"Upstream request failed: {e}", url=url) from e
        try:
            return resp.json()
        except ValueError:
            logger.warning("Upstream returned a non-JSON body for %s", url)
            return None

    async def search(self, word: str) -> List[Dict[str, Any]]:
        """Return the raw result rows for a keyword; [] when the provider reports none."""
        payload = await self._get_json(self.search_url, {"word": word})
        if not isinstance(payload, dict) or payload.get("code") != 200:
            code = payload.get("code") if isinstance(payload, dict) else None
            logger.info("Search %r returned no results (code=%s)", word, code)
            return []
        rows = payload.get("data")
        if not isinstance(rows, list):
            return []
        return [row for row in rows if isinstance(row, dict)]

    async def fetch_lyric(
        self,
        song_id: Optional[Union[int, str]] = None,
        mid: Optional[Union[int, str]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Return the lyric `data` object for a song, or None when the provider has none."""
        if song_id is not None:
            params = {"id": song_id}
        elif mid is not None:
            params = {"mid": mid}
        else:
            return None
        payload = await self._get_json(self.lyric_url, params)
        if not isinstance(payload, dict) or payload.get("code") != 200:
            msg = payload.get("msg") if isinstance(payload, dict) else None
            logger.info("Lyric lookup %s returned no data (%s)", params, msg or "no message")
            return None
        data = payload.get("data")
        return data if isinstance(data, dict) else None
