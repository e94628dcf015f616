"""Trusted-proxy client IP resolution and unverified token claims."""

__version__ = "0.1.0"
