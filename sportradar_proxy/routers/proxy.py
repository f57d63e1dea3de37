# sportradar_proxy/routers/proxy.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from ..deps import get_proxy_service
from ..schemas.proxy import ErrorBody, ProxyRequest
from ..services.proxy import ProxyResult, ProxyService

router = APIRouter(tags=["proxy"])

_ERRORS = {
    400: {"model": ErrorBody, "description": "Endpoint missing or body invalid"},
    429: {"model": ErrorBody, "description": "Upstream still rate limited after retries"},
    500: {"model": ErrorBody, "description": "Configuration, network or proxy failure"},
}


def cached_json(result: ProxyResult) -> JSONResponse:
    return JSONResponse(result.payload, headers={"X-Cache": result.cache_status})


@router.post(
    "/sportradar-proxy",
    summary="Proxy a Sportradar request through the cache",
    description="Body: {endpoint, params?}. Upstream JSON is returned as-is with an X-Cache: HIT|MISS header.",
    responses=_ERRORS,
)
def proxy(body: ProxyRequest, service: ProxyService = Depends(get_proxy_service)):
    return cached_json(service.handle(body.endpoint, body.params))


@router.options("/sportradar-proxy", include_in_schema=False)
def proxy_preflight():
    return Response(status_code=200)
