"""ASGI middleware resolving the real client IP once per request."""

import logging

from starlette.requests import HTTPConnection
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from gatekeeper.config import ProxyConfig
from gatekeeper.errors import GatekeeperError
from gatekeeper.utils.ip_extractor import StarletteConnection, get_client_ip

log = logging.getLogger(__name__)

# RFC 6455 policy violation
WS_POLICY_VIOLATION = 1008


class ClientIPMiddleware:
    """
    Stores the resolved client IP in ``request.state.client_ip``.

    Requests whose address cannot be established, or that try to override it
    from an untrusted peer, are refused before reaching any route.
    """

    def __init__(self, app: ASGIApp, config: ProxyConfig):
        self.app = app
        self.config = config

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        conn = HTTPConnection(scope)
        try:
            client_ip = get_client_ip(StarletteConnection(conn), self.config)
        except GatekeeperError as exc:
            log.debug(f"Refusing {scope['type']} request to {scope.get('path')}: {exc.kind}")
            if scope["type"] == "websocket":
                await send({"type": "websocket.close", "code": WS_POLICY_VIOLATION})
                return
            response = JSONResponse(
                status_code=exc.status_code,
                content={"detail": exc.detail, "error": exc.kind}
            )
            await response(scope, receive, send)
            return

        scope.setdefault("state", {})["client_ip"] = client_ip
        await self.app(scope, receive, send)
