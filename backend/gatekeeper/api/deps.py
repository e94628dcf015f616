from fastapi import Request

from gatekeeper.config import get_proxy_config
from gatekeeper.utils.ip_extractor import StarletteConnection, get_client_ip
from gatekeeper.utils.proxy_trust import IPAddress


def get_request_client_ip(request: Request) -> IPAddress:
    """Resolved client IP, computed by ClientIPMiddleware or on demand."""
    client_ip = getattr(request.state, "client_ip", None)
    if client_ip is None:
        client_ip = get_client_ip(StarletteConnection(request), get_proxy_config())
        request.state.client_ip = client_ip
    return client_ip
