# app/api/endpoints/health.py
from fastapi import APIRouter, Depends, Request, Response, status

from app.core.config import get_settings
from app.services.drip_service import DripCalculationService, get_drip_service

router = APIRouter(tags=["Health"])


@router.get("/health", summary="Service health")
async def health() -> dict[str, str]:
    return {"status": "ok", "engine_version": get_settings().APP_VERSION}


@router.get("/health/live", summary="Service liveness")
async def health_live() -> dict[str, str]:
    return {"status": "live"}


@router.get("/health/ready", summary="Service readiness")
async def health_ready(
    request: Request, response: Response, service: DripCalculationService = Depends(get_drip_service)
) -> dict:
    """Not ready while the app is draining; otherwise reports how many cached results are live."""
    if bool(getattr(request.app.state, "is_draining", False)):
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "draining"}
    return {"status": "ready", "cached_results": len(service.cache)}
