"""Base64 helpers for the standard and URL-safe alphabets."""

import base64
import binascii
import re

from gatekeeper.errors import Base64DecodeError

_URL_SAFE_CHARS = re.compile(r"^[A-Za-z0-9_-]*={0,2}$")
_URL_SAFE_NO_PAD_CHARS = re.compile(r"^[A-Za-z0-9_-]*$")


def base64_encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def base64_decode(b64: str) -> bytes:
    try:
        return base64.b64decode(b64, validate=True)
    except (binascii.Error, ValueError) as err:
        raise Base64DecodeError() from err


def base64_url_encode(data: bytes) -> str:
    """URL-safe alphabet with the trailing padding removed."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def base64_url_no_pad_encode(data: bytes) -> str:
    return base64_url_encode(data)


def _urlsafe_decode(b64: str) -> bytes:
    try:
        raw = base64.b64decode(b64, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as err:
        raise Base64DecodeError() from err
    # Non-zero unused bits in the last symbol make the encoding non-canonical
    if base64.urlsafe_b64encode(raw).decode("ascii") != b64:
        raise Base64DecodeError()
    return raw


def base64_url_decode(b64: str) -> bytes:
    """Decode padded URL-safe base64."""
    # b64decode lets '+' and '/' through even with altchars
    if not isinstance(b64, str) or not _URL_SAFE_CHARS.match(b64):
        raise Base64DecodeError()
    return _urlsafe_decode(b64)


def base64_url_no_pad_decode(b64: str) -> bytes:
    """Decode URL-safe base64 that carries no padding."""
    if not isinstance(b64, str) or not _URL_SAFE_NO_PAD_CHARS.match(b64):
        raise Base64DecodeError()
    if len(b64) % 4 == 1:
        raise Base64DecodeError()
    return _urlsafe_decode(b64 + "=" * (-len(b64) % 4))
