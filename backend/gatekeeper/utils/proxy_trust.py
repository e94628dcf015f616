"""Trusted proxy list: CIDR ranges allowed to override the peer address."""

import logging
from ipaddress import IPv4Address, IPv4Network, IPv6Address, IPv6Network, ip_network
from typing import Iterable, Tuple, Union

log = logging.getLogger(__name__)

IPNetwork = Union[IPv4Network, IPv6Network]
IPAddress = Union[IPv4Address, IPv6Address]


def build_trusted_proxies(raw: str) -> Tuple[IPNetwork, ...]:
    """
    Parse a multi-line CIDR list, one range per line.

    Blank lines are ignored. A line that is not a valid CIDR (including one with
    host bits set, e.g. ``10.0.0.1/8``) is logged and skipped so that a single
    typo does not disable every other trusted proxy.
    """
    proxies = []
    for line in raw.splitlines():
        trimmed = line.strip()
        if not trimmed:
            continue
        try:
            proxies.append(ip_network(trimmed))
        except ValueError as err:
            log.error(f"Cannot parse trusted proxy entry to CIDR: {err}")
    return tuple(proxies)


def is_trusted(proxies: Iterable[IPNetwork], ip: IPAddress) -> bool:
    """Return True if ``ip`` lies inside any of the trusted ranges."""
    # `in` is False across address families, no special casing needed
    return any(ip in cidr for cidr in proxies)
