from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from gatekeeper.database import get_db
from gatekeeper.schemas.claims import TokenInspectRequest, TokenInspectResponse, UnverifiedClaims
from gatekeeper.utils.audit_logger import create_audit_log
from gatekeeper.utils.claims import extract_token_claims_unverified

router = APIRouter()


@router.post("/inspect", response_model=TokenInspectResponse)
async def inspect_token(body: TokenInspectRequest, request: Request, db: Session = Depends(get_db)):
    """
    Decode the claims of a token WITHOUT verifying its signature.

    Intended for diagnostics; nothing returned here is authenticated.
    """
    claims = extract_token_claims_unverified(body.token, UnverifiedClaims)
    create_audit_log(
        db, request,
        action="token_inspected",
        details={"sub": claims.sub, "iss": claims.iss}
    )
    return TokenInspectResponse(verified=False, claims=claims.model_dump(exclude_none=True))
