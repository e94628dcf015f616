"""Audit log model for tracking access to the service."""

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String
from sqlalchemy.sql import func

from gatekeeper.database import Base


class AuditLog(Base):
    """Audit trail of requests, keyed by resolved client IP."""

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)

    # Action details
    action = Column(String(100), nullable=False)  # 'login_success', 'login_failed', 'token_inspected'
    entity_type = Column(String(50), nullable=True)
    entity_id = Column(Integer, nullable=True)

    # User and context
    user = Column(String(100), nullable=True)
    details = Column(JSON, nullable=True)

    # Resolved client IP (supports IPv6)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    __table_args__ = (
        Index('idx_audit_logs_action', 'action'),
        Index('idx_audit_logs_ip_created', 'ip_address', 'created_at'),
    )

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', ip='{self.ip_address}')>"
