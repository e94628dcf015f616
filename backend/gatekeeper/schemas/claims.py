from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class UnverifiedClaims(BaseModel):
    """Registered JWT claims; unknown claims are kept as extra fields."""

    model_config = ConfigDict(extra="allow")

    sub: Optional[str] = None
    iss: Optional[str] = None
    aud: Optional[Union[str, List[str]]] = None
    exp: Optional[Union[int, float]] = None
    iat: Optional[Union[int, float]] = None
    nbf: Optional[Union[int, float]] = None
    jti: Optional[str] = None


class TokenInspectRequest(BaseModel):
    token: str = Field(..., description="Compact JWT (header.body.signature)")


class TokenInspectResponse(BaseModel):
    verified: bool = Field(False, description="Always false: the signature was not checked")
    claims: Dict[str, Any]

