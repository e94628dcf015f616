"""Decode-only access to the payload of a JWT."""

import logging
from typing import Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from gatekeeper.errors import Base64DecodeError, MalformedToken, MalformedTokenBody, MalformedTokenClaims
from gatekeeper.utils.codec import base64_url_no_pad_decode

log = logging.getLogger(__name__)

T = TypeVar("T")


def extract_token_claims_unverified(token: str, shape: Type[T] = dict) -> T:
    """
    Extract the claims of a ``header.body.signature`` token into ``shape``.

    CAUTION: the signature is never looked at. The result is only fit for
    pre-inspection or diagnostics and must not be trusted until the token has
    been verified.

    Args:
        token: raw token string
        shape: any type pydantic can validate into, e.g. a BaseModel or ``dict``

    Raises:
        MalformedToken: fewer than two ``.`` separators
        MalformedTokenBody: body is not unpadded URL-safe base64
        MalformedTokenClaims: body is not JSON matching ``shape``
    """
    _metadata, sep, rest = token.partition(".")
    if not sep:
        raise MalformedToken()
    body, sep, _signature = rest.partition(".")
    if not sep:
        raise MalformedToken()

    try:
        raw = base64_url_no_pad_decode(body)
    except Base64DecodeError as err:
        log.error(f"Error decoding JWT token body '{body}' from base64: {err.__cause__ or err}")
        raise MalformedTokenBody() from err

    text = raw.decode("utf-8", errors="replace")
    try:
        return TypeAdapter(shape).validate_json(text)
    except ValidationError as err:
        log.error(f"Error deserializing JWT Token claims: {err}")
        raise MalformedTokenClaims() from err

