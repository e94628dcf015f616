from fastapi import APIRouter

from gatekeeper.api.v1.endpoints import audit_logs, auth, client, tokens

api_router = APIRouter()
api_router.include_router(client.router, tags=["client"])
api_router.include_router(tokens.router, prefix="/tokens", tags=["tokens"])
api_router.include_router(audit_logs.router, prefix="/audit-logs", tags=["audit-logs"])
api_router.include_router(auth.router, tags=["auth"])
