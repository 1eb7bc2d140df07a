from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel
try:
    from ..app_meta import __version__, __app_name__  # type: ignore
except Exception:  # pragma: no cover
    from app_meta import __version__, __app_name__  # type: ignore


logger = logging.getLogger(__name__)

# Load environment variables from .env files without overriding existing env vars.
# Priority: lyricbridge/.env first (co-located with app), then project-root/.env as fallback.
_package_env = Path(__file__).resolve().parents[2] / ".env"
_root_env = Path(__file__).resolve().parents[3] / ".env"
load_dotenv(dotenv_path=str(_package_env), override=False)
load_dotenv(dotenv_path=str(_root_env), override=False)

DEFAULT_TITLE_MAPPINGS_FILE = Path(__file__).resolve().parents[1] / "data" / "title_mappings.json"


def _split_csv(value: str | None) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


def load_title_mappings(path: Optional[str] = None) -> Dict[str, str]:
    """Load the mistranslated-title table from a JSON object file.

    Keys are "<normalized title>_<artist>" in lower case; values are the title to search for.
    A missing or malformed file yields an empty table.
    """
    file_path = Path(path) if path else DEFAULT_TITLE_MAPPINGS_FILE
    try:
        raw = json.loads(file_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("Title mappings file not found: %s", file_path)
        return {}
    except (OSError, ValueError) as e:
        logger.warning("Could not read title mappings from %s: %s", file_path, e)
        return {}
    if not isinstance(raw, dict):
        logger.warning("Title mappings file %s does not hold a JSON object", file_path)
        return {}
    return {str(k).lower(): str(v) for k, v in raw.items() if str(v).strip()}


class Settings(BaseModel):
    # Name is sourced from code, not environment
    app_name: str = __app_name__
    # Version is sourced from code, not environment
    version: str = __version__

    # CORS (public lyrics API: any origin by default)
    cors_origins: List[str] = _split_csv(os.environ.get("CORS_ORIGINS")) or ["*"]

    # Upstream catalog provider
    search_url: str = os.environ.get(
        "LYRICS_SEARCH_URL", "https://api.vkeys.cn/v2/music/tencent/search/song"
    )
    lyric_url: str = os.environ.get(
        "LYRICS_LYRIC_URL", "https://api.vkeys.cn/v2/music/tencent/lyric"
    )
    upstream_timeout: float = float(os.environ.get("UPSTREAM_TIMEOUT", "10"))

    # Search strategies
    strategy_delay_ms: int = int(os.environ.get("STRATEGY_DELAY_MS", "200"))
    max_search_strategies: int = int(os.environ.get("MAX_SEARCH_STRATEGIES", "6"))
    title_mappings: Dict[str, str] = load_title_mappings(os.environ.get("TITLE_MAPPINGS_FILE"))

    # Lyric post-processing
    keep_display_tags: bool = _env_flag("LYRICS_KEEP_DISPLAY_TAGS", "1")
    repair_end_time: bool = _env_flag("LYRICS_REPAIR_END_TIME", "0")
    end_time_padding: float = float(os.environ.get("LYRICS_END_TIME_PADDING", "3"))


settings = Settings()
