from typing import Dict

from fastapi import APIRouter

try:
    from ...core.config import settings  # type: ignore
    from ...schemas.models import InfoResponse  # type: ignore
except Exception:  # pragma: no cover
    from core.config import settings  # type: ignore
    from schemas.models import InfoResponse  # type: ignore

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> Dict[str, str]:
    """Liveness only; the upstream catalog is not probed."""
    return {"status": "ok"}


@router.get("/info", response_model=InfoResponse)
async def info() -> InfoResponse:
    return InfoResponse(name=settings.app_name, version=settings.version)
