"""Application configuration management."""

from dataclasses import dataclass
from functools import lru_cache
from ipaddress import IPv4Network, IPv6Network
from typing import List, Optional, Tuple, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gatekeeper.utils.proxy_trust import build_trusted_proxies


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.debug and self.log_level.upper() != "TRACE":
            self.log_level = "DEBUG"

    # Proxy trust
    trusted_proxies: str
    peer_ip_header_name: Optional[str] = None
    proxy_mode: bool = False

    # Database
    database_url: str = "sqlite:///./gatekeeper.db"

    # Security
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440

    # CORS
    cors_origins: str = "http://localhost:5173"

    # Admin User
    admin_username: str = "admin"
    admin_password: str = "changeme"

    # Application
    debug: bool = False
    log_level: str = "INFO"
    api_v1_str: str = "/api/v1"

    @field_validator("peer_ip_header_name")
    @classmethod
    def empty_header_name_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value.strip() if value else value

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]


@dataclass(frozen=True)
class ProxyConfig:
    """Read-only proxy settings shared by every request."""

    trusted_proxies: Tuple[Union[IPv4Network, IPv6Network], ...] = ()
    peer_ip_header_name: Optional[str] = None
    proxy_mode: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProxyConfig":
        return cls(
            trusted_proxies=build_trusted_proxies(settings.trusted_proxies),
            peer_ip_header_name=settings.peer_ip_header_name,
            proxy_mode=settings.proxy_mode,
        )


# Global settings instance
settings = Settings()


@lru_cache
def get_proxy_config() -> ProxyConfig:
    """Build the proxy config once per process."""
    return ProxyConfig.from_settings(settings)
