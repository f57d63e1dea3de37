from fastapi import APIRouter, Depends, Response

from ..deps import get_proxy_service
from ..services.proxy import ProxyService

router = APIRouter(tags=["health"])

@router.get("/api/v1/ping")
def ping():
    return {"status": "ok"}

@router.get("/health")
def health():
    return {"status": "ok"}

@router.get("/health/cache")
def cache_health(service: ProxyService = Depends(get_proxy_service)):
    return {
        "sportradar_api_key": "set" if service.has_credential else "not-set",
        "cache": service.cache.stats(),
    }

@router.head("/")
def head_root():
    return Response(status_code=200)
