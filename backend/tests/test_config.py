from ipaddress import ip_network

import pytest
from pydantic import ValidationError

from gatekeeper.config import ProxyConfig, Settings, get_proxy_config


def test_proxy_config_from_environment():
    config = get_proxy_config()
    assert config.trusted_proxies == (
        ip_network("10.0.0.0/8"),
        ip_network("192.168.100.0/24"),
        ip_network("2001:db8::/32"),
    )
    assert config.peer_ip_header_name == "X-Client-IP"
    assert config.proxy_mode is False
    assert get_proxy_config() is config


def test_proxy_config_is_immutable():
    config = ProxyConfig()
    with pytest.raises(AttributeError):
        config.proxy_mode = True


def test_missing_trusted_proxies_is_fatal(monkeypatch):
    monkeypatch.delenv("TRUSTED_PROXIES", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_empty_header_name_is_unset(monkeypatch):
    monkeypatch.setenv("PEER_IP_HEADER_NAME", "  ")
    monkeypatch.setenv("PROXY_MODE", "true")
    settings = Settings(_env_file=None)
    config = ProxyConfig.from_settings(settings)
    assert config.peer_ip_header_name is None
    assert config.proxy_mode is True


def test_debug_forces_debug_log_level(monkeypatch):
    monkeypatch.setenv("DEBUG", "true")
    assert Settings(_env_file=None).log_level == "DEBUG"
