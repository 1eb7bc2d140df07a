from fastapi import FastAPI
import logging
from fastapi.middleware.cors import CORSMiddleware

# Apply logging configuration as early as possible (module import time)
try:
    from .core.logging_config import configure_logging  # type: ignore
except Exception:  # pragma: no cover
    from core.logging_config import configure_logging  # type: ignore

configure_logging()

# Support both execution modes:
# - "uvicorn lyricbridge.app.main:app" (package-relative imports)
# - "uvicorn main:app" with sys.path pointing to lyricbridge/app (flat imports)
try:
    from .api.v1.health import router as health_router  # type: ignore
    from .api.v1.lyrics import router as lyrics_router  # type: ignore
    from .core.config import settings  # type: ignore
except Exception:  # pragma: no cover
    from api.v1.health import router as health_router  # type: ignore
    from api.v1.lyrics import router as lyrics_router  # type: ignore
    from core.config import settings  # type: ignore

logger = logging.getLogger(__name__)

tags_metadata = [
    {"name": "health", "description": "Health checks and basic service info."},
    {"name": "lyrics", "description": "Best-match lyric lookup by track title and artist."},
]

app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description=(
        "Lyrics bridge: finds the best-matching song in an upstream catalog and returns"
        " plain and time-synced lyrics in a stable, lrclib-style response shape."
    ),
    openapi_tags=tags_metadata,
    # Serve docs under /api/* to match API prefix
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    contact={"name": settings.app_name},
    license_info={
        "name": "MIT",
    },
)

# CORS: public read-only API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(health_router, prefix="/api/v1")
app.include_router(lyrics_router, prefix="/api/v1")
# Unversioned paths used by existing lrclib-style clients (/api/get, /api/get-lyrics)
app.include_router(lyrics_router, prefix="/api")

logger.debug(
    "Upstream search=%s lyric=%s timeout=%.1fs delay=%dms strategies<=%d",
    settings.search_url,
    settings.lyric_url,
    settings.upstream_timeout,
    settings.strategy_delay_ms,
    settings.max_search_strategies,
)
