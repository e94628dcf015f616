from fastapi import APIRouter, Depends, Request

from gatekeeper.api.deps import get_request_client_ip
from gatekeeper.schemas.client import ClientIPInfo
from gatekeeper.utils.ip_extractor import get_user_agent
from gatekeeper.utils.proxy_trust import IPAddress

router = APIRouter()


@router.get("/whoami", response_model=ClientIPInfo)
async def whoami(request: Request, client_ip: IPAddress = Depends(get_request_client_ip)):
    """Return the client IP as resolved through the trusted proxy chain."""
    return ClientIPInfo(
        ip=str(client_ip),
        version=client_ip.version,
        user_agent=get_user_agent(request)
    )
