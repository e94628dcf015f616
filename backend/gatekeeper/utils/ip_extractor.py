"""Client IP resolution from HTTP requests with trusted reverse proxy support."""

import logging
from dataclasses import dataclass, field
from ipaddress import ip_address
from typing import Dict, Optional, Protocol

from starlette.requests import HTTPConnection

from gatekeeper.config import ProxyConfig
from gatekeeper.errors import MalformedPeerAddress, MissingPeerAddress, UntrustedProxy
from gatekeeper.logging_setup import TRACE
from gatekeeper.utils.proxy_trust import IPAddress, is_trusted

log = logging.getLogger(__name__)


class ConnectionInfo(Protocol):
    """What the resolver needs to know about a single request."""

    def peer_addr(self) -> Optional[str]:
        """Address of the directly connected socket peer."""

    def header(self, name: str) -> Optional[str]:
        """Value of a request header, case-insensitive."""

    def forwarded_addr(self) -> Optional[str]:
        """Client address as reported by standard proxy headers."""


def parse_forwarded_node(value: str) -> str:
    """
    Strip quotes, IPv6 brackets and a port suffix from a forwarded node.

    ``"[2001:db8::1]:4711"`` becomes ``2001:db8::1``, ``192.0.2.60:8080`` becomes
    ``192.0.2.60``. A bare IPv6 literal is returned untouched.
    """
    node = value.strip().strip('"')
    if node.startswith("["):
        end = node.find("]")
        return node[1:end] if end != -1 else node
    if node.count(":") == 1:
        return node.split(":", 1)[0]
    return node


def realip_from_headers(headers, peer: Optional[str]) -> Optional[str]:
    """
    Standard forwarded-address resolution.

    Order of precedence:
    1. ``for=`` of the first element of the RFC 7239 ``Forwarded`` header
    2. first entry of ``X-Forwarded-For`` (the original client)
    3. the peer address itself
    """
    forwarded = headers.get("forwarded")
    if forwarded:
        first_element = forwarded.split(",", 1)[0]
        for pair in first_element.split(";"):
            name, _, value = pair.partition("=")
            if name.strip().lower() == "for" and value.strip():
                return parse_forwarded_node(value)

    forwarded_for = headers.get("x-forwarded-for")
    if forwarded_for:
        client = forwarded_for.split(",", 1)[0].strip()
        if client:
            return parse_forwarded_node(client)

    return peer


class StarletteConnection:
    """Adapter for Starlette/FastAPI ``Request`` and ``WebSocket`` objects."""

    def __init__(self, conn: HTTPConnection):
        self.conn = conn

    def peer_addr(self) -> Optional[str]:
        if self.conn.client and self.conn.client.host:
            return self.conn.client.host
        return None

    def header(self, name: str) -> Optional[str]:
        return self.conn.headers.get(name)

    def forwarded_addr(self) -> Optional[str]:
        return realip_from_headers(self.conn.headers, self.peer_addr())


@dataclass
class StaticConnection:
    """Adapter for plain values, e.g. connection data captured outside a request."""

    peer: Optional[str]
    headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.headers = {name.lower(): value for name, value in self.headers.items()}

    def peer_addr(self) -> Optional[str]:
        return self.peer

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())

    def forwarded_addr(self) -> Optional[str]:
        return realip_from_headers(self.headers, self.peer)


def parse_ip(value: str) -> IPAddress:
    """Plain IP literal; IPv6 zone ids such as ``fe80::1%eth0`` are refused."""
    if "%" in value:
        raise ValueError(f"'{value}' carries a scope id")
    return ip_address(value)


def parse_peer_addr(peer_addr: Optional[str]) -> IPAddress:
    if peer_addr is None:
        log.error("No peer IP address in connection info")
        raise MissingPeerAddress("No IP Addr in Connection Info - this should only happen in tests")
    try:
        return parse_ip(peer_addr)
    except ValueError as err:
        log.error(f"Cannot parse peer IP address '{peer_addr}': {err}")
        raise MalformedPeerAddress(f"Cannot parse peer IP address: {err}") from err


def check_trusted_proxy(config: ProxyConfig, peer_ip: IPAddress) -> None:
    if is_trusted(config.trusted_proxies, peer_ip):
        return
    log.error(f"Invalid request from IP {peer_ip} which is not a trusted proxy")
    raise UntrustedProxy()


def ip_from_cust_header(config: ProxyConfig, conn: ConnectionInfo) -> Optional[IPAddress]:
    """Client IP from the configured override header, if it holds a valid address."""
    header_name = config.peer_ip_header_name
    if not header_name:
        return None

    value = conn.header(header_name)
    if value is not None:
        try:
            return parse_ip(value.strip())
        except ValueError as err:
            # Treated as absent, the header is optional even when configured
            log.error(f"Cannot parse IP from {header_name}: {err}")
    log.log(TRACE, f"no PEER IP from PEER_IP_HEADER_NAME: '{header_name}'")
    return None


def get_client_ip(conn: ConnectionInfo, config: ProxyConfig) -> IPAddress:
    """
    Resolve the real client IP for one request.

    Order of precedence:
    1. the custom override header (``PEER_IP_HEADER_NAME``), peer must be trusted
    2. standard proxy headers when ``PROXY_MODE`` is on, peer must be trusted
    3. the directly connected peer

    Trust is only checked when a header is about to replace the peer address, so a
    direct client is never rejected for its origin alone.

    Raises:
        MissingPeerAddress: transport supplied no peer address
        MalformedPeerAddress: peer or forwarded address is not an IP literal
        UntrustedProxy: an untrusted peer tried to override its address
    """
    peer_ip = parse_peer_addr(conn.peer_addr())

    header_ip = ip_from_cust_header(config, conn)
    if header_ip is not None:
        check_trusted_proxy(config, peer_ip)
        return header_ip

    if config.proxy_mode:
        check_trusted_proxy(config, peer_ip)
        forwarded = conn.forwarded_addr()
        if not forwarded:
            log.error(f"No forwarded address for request from trusted proxy {peer_ip}")
            raise MalformedPeerAddress("No forwarded client address")
        return parse_peer_addr(forwarded)

    return peer_ip


def get_user_agent(request: HTTPConnection) -> Optional[str]:
    """
    Extract User-Agent header from request.

    Args:
        request: FastAPI Request object

    Returns:
        User-Agent string or None if not present
    """
    return request.headers.get("User-Agent")
