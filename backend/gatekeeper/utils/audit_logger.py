"""Audit logging helper for consistent audit trail creation."""

from typing import Any, Dict, Optional

from sqlalchemy.orm import Session
from starlette.requests import HTTPConnection

from gatekeeper.models.audit_log import AuditLog
from gatekeeper.utils.ip_extractor import get_user_agent


def create_audit_log(
    db: Session,
    request: HTTPConnection,
    action: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
    user: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """
    Create audit log entry with the resolved client IP and user agent.

    Args:
        db: Database session
        request: FastAPI Request object, already passed through ClientIPMiddleware
        action: Action being performed (e.g., 'login_success', 'token_inspected')
        entity_type: Type of entity affected
        entity_id: ID of affected entity
        user: Username performing the action
        details: Additional context as JSON

    Returns:
        Created AuditLog instance
    """
    client_ip = getattr(request.state, "client_ip", None)

    audit_log = AuditLog(
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        user=user,
        details=details,
        ip_address=str(client_ip) if client_ip is not None else None,
        user_agent=get_user_agent(request)
    )

    db.add(audit_log)
    db.commit()
    db.refresh(audit_log)

    return audit_log
