"""Database models."""

from gatekeeper.models.audit_log import AuditLog

__all__ = [
    "AuditLog",
]
