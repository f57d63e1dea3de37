# sportradar_proxy/deps.py
from fastapi import Depends, Request

from .clients.sportradar import SportradarClient
from .services.proxy import ProxyService


def get_proxy_service(request: Request) -> ProxyService:
    """The process-wide service built by create_app."""
    return request.app.state.proxy


def get_sportradar_client(request: Request, proxy: ProxyService = Depends(get_proxy_service)) -> SportradarClient:
    return SportradarClient(proxy, base_path=request.app.state.settings.sportradar_soccer_path)
