"""
Test configuration

Settings are read from the environment at import time, so the throttle between
search strategies is disabled here before anything from the app is imported.
Upstream HTTP is never reached: provider clients get an httpx.MockTransport.
"""
from pathlib import Path
import os
import sys

import httpx
import pytest

# Ensure project root and app paths are importable for tests
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ["STRATEGY_DELAY_MS"] = "0"
os.environ.setdefault("APP_LOG_COLORS", "0")
os.environ.pop("TITLE_MAPPINGS_FILE", None)

SEARCH_URL = "https://catalog.test/search/song"
LYRIC_URL = "https://catalog.test/lyric"


class FakeCatalog:
    """Scriptable upstream: search responses keyed by query word, lyric responses by id/mid."""

    def __init__(self):
        self.searches = {}
        self.lyrics = {}
        self.search_default = {"code": 404, "data": []}
        self.failing_words = set()
        self.failing_lyric_keys = set()
        self.requests = []

    def add_song(self, word, rows):
        self.searches[word] = {"code": 200, "data": rows}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        params = dict(request.url.params)
        if request.url.path.endswith("/search/song"):
            word = params.get("word", "")
            if word in self.failing_words or "*" in self.failing_words:
                return httpx.Response(503, json={"code": 503, "msg": "busy"})
            return httpx.Response(200, json=self.searches.get(word, self.search_default))
        key = f"id={params['id']}" if "id" in params else f"mid={params.get('mid')}"
        if key in self.failing_lyric_keys:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json=self.lyrics.get(key, {"code": 404, "msg": "no lyric"}))

    @property
    def search_words(self):
        return [dict(r.url.params).get("word") for r in self.requests if r.url.path.endswith("/search/song")]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def provider_factory(catalog):
    try:
        from lyricbridge.app.utils.provider_client import ProviderClient
    except Exception:  # pragma: no cover
        from app.utils.provider_client import ProviderClient

    def _make():
        return ProviderClient(SEARCH_URL, LYRIC_URL, timeout=1.0, transport=catalog.transport())

    return _make
