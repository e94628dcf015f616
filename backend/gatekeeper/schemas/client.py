from typing import Optional

from pydantic import BaseModel, Field


class ClientIPInfo(BaseModel):
    ip: str = Field(..., description="Resolved client IP")
    version: int = Field(..., description="4 or 6")
    user_agent: Optional[str] = None
