"""
Helper script to run the FastAPI app with a predictable sys.path.
Usage:
  python run_api.py
"""
import os
import sys

from uvicorn import run

ROOT = os.path.dirname(os.path.abspath(__file__))
APP_DIR = os.path.join(ROOT, "lyricbridge", "app")

if ROOT not in sys.path:
  sys.path.insert(0, ROOT)

# Ensure reloader subprocess also sees the repository root on PYTHONPATH
os.environ["PYTHONPATH"] = os.pathsep.join(
  [ROOT] + [p for p in os.environ.get("PYTHONPATH", "").split(os.pathsep) if p]
)

if __name__ == "__main__":
  log_level = os.environ.get("APP_LOG_LEVEL", "info").lower()
  reload = os.environ.get("APP_RELOAD", "0") == "1"
  run(
    "lyricbridge.app.main:app",
    host=os.environ.get("APP_HOST", "0.0.0.0"),
    port=int(os.environ.get("APP_PORT", "8000")),
    reload=reload,
    reload_dirs=[APP_DIR] if reload else None,
    log_level=log_level,
    access_log=True,
  )
