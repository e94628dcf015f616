"""Typed failures raised by client IP resolution and token inspection."""

from typing import Optional

from fastapi import status


class GatekeeperError(Exception):
    """Base class; carries the HTTP status and the public detail message."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    detail: str = "Bad request"

    def __init__(self, detail: Optional[str] = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)

    @property
    def kind(self) -> str:
        return type(self).__name__


class MissingPeerAddress(GatekeeperError):
    detail = "No IP address in connection info"


class MalformedPeerAddress(GatekeeperError):
    detail = "Cannot parse peer IP address"


class UntrustedProxy(GatekeeperError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Invalid IP Address"


class MalformedToken(GatekeeperError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Invalid or malformed JWT Token"


class MalformedTokenBody(GatekeeperError):
    detail = "Invalid JWT Token body"


class MalformedTokenClaims(GatekeeperError):
    detail = "Invalid JWT Token claims"


class Base64DecodeError(GatekeeperError):
    detail = "B64 decoding error"
