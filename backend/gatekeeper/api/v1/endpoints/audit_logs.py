from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from gatekeeper.auth import get_current_active_user
from gatekeeper.database import get_db
from gatekeeper.models.audit_log import AuditLog
from gatekeeper.schemas.audit import AuditLogInDB
from gatekeeper.schemas.auth import User

router = APIRouter()


@router.get("/", response_model=List[AuditLogInDB])
async def read_audit_logs(
    current_user: Annotated[User, Depends(get_current_active_user)],
    skip: int = 0,
    limit: int = 100,
    action: Optional[str] = Query(None, description="Filter by specific action"),
    ip_address: Optional[str] = Query(None, description="Filter by resolved client IP"),
    user: Optional[str] = Query(None, description="Filter by username"),
    db: Session = Depends(get_db)
):
    """Retrieve audit logs with optional filters."""
    query = db.query(AuditLog).order_by(AuditLog.created_at.desc(), AuditLog.id.desc())

    if action:
        query = query.filter(AuditLog.action == action)
    if ip_address:
        query = query.filter(AuditLog.ip_address == ip_address)
    if user:
        query = query.filter(AuditLog.user == user)

    return query.offset(skip).limit(limit).all()


@router.get("/{log_id}", response_model=AuditLogInDB)
async def read_audit_log(
    log_id: int,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Session = Depends(get_db)
):
    """Retrieve a single audit log by ID."""
    db_log = db.query(AuditLog).filter(AuditLog.id == log_id).first()
    if db_log is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Audit log not found")
    return db_log
