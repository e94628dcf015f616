import secrets
import socket
import string
from typing import List

_ALPHANUMERIC = string.ascii_letters + string.digits


def cache_entry_client(client_id: str) -> str:
    """Returns the cache key for a given client."""
    return f"client_{client_id}"


def json_arr_to_list(arr: str) -> List[str]:
    """
    Converts a flat JSON array literal like ``["one","two"]`` into a list of strings.

    An empty array yields ``[""]``.
    """
    # TODO: nested arrays are cut off at the first closing bracket
    body = []
    for char in arr[1:]:
        if char == '"':
            continue
        if char == "]":
            break
        body.append(char)
    return "".join(body).split(",")


def get_local_hostname() -> str:
    return socket.gethostname()


def get_rand(count: int) -> str:
    """Returns a cryptographically secure alphanumeric string of the requested length."""
    return "".join(secrets.choice(_ALPHANUMERIC) for _ in range(count))


def new_store_id() -> str:
    return get_rand(24)
