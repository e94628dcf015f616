#!/usr/bin/env python
"""
Print the parsed TRUSTED_PROXIES list and show how sample requests would resolve.
Run with: cd backend; python scripts/check_trusted_proxies.py 10.0.0.5 203.0.113.9
Requires TRUSTED_PROXIES and SECRET_KEY in .env or the environment.
"""

import os
import sys
from ipaddress import ip_address

# Add gatekeeper to path
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from gatekeeper.config import get_proxy_config
from gatekeeper.errors import GatekeeperError
from gatekeeper.logging_setup import configure_logging
from gatekeeper.utils.ip_extractor import StaticConnection, get_client_ip
from gatekeeper.utils.proxy_trust import is_trusted


def check(peers):
    config = get_proxy_config()
    print(f"{len(config.trusted_proxies)} trusted proxy range(s):")
    for cidr in config.trusted_proxies:
        print(f"- {cidr}")
    print(f"Override header: {config.peer_ip_header_name or '(none)'}")
    print(f"Proxy mode: {'on' if config.proxy_mode else 'off'}")

    for peer in peers:
        try:
            peer_trusted = is_trusted(config.trusted_proxies, ip_address(peer))
        except ValueError:
            peer_trusted = False
        print(f"\n{peer}: {'trusted' if peer_trusted else 'not trusted'} as a proxy")
        headers = {}
        if config.peer_ip_header_name:
            headers[config.peer_ip_header_name] = "198.51.100.1"
        try:
            resolved = get_client_ip(StaticConnection(peer, headers), config)
        except GatekeeperError as exc:
            print(f"{peer}: rejected ({exc.kind}: {exc.detail})")
            continue
        print(f"{peer}: resolves to {resolved}")


if __name__ == '__main__':
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))
    check(sys.argv[1:])
