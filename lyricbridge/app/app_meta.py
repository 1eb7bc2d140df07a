"""Name and version reported by /api/v1/info and the OpenAPI document.

The version comes from the repository VERSION file in a checkout, or from the
installed distribution metadata otherwise.
"""

from importlib import metadata
from pathlib import Path

DIST_NAME = "lyricbridge"
VERSION_FILE = Path(__file__).resolve().parents[2] / "VERSION"


def _load_version() -> str:
    if VERSION_FILE.is_file():
        text = VERSION_FILE.read_text(encoding="utf-8").strip()
        if text:
            return text
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:  # pragma: no cover - bare source tree without VERSION
        return "0.0.0"


__app_name__ = "Lyric Bridge API"
__version__ = _load_version()
