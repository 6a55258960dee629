# app/api/endpoints/audit.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from app.api.deps import get_db_session, require_audit_viewer
from app.models.admin_user import AdminUser
from app.models.enums import AuditAction
from app.schemas.audit import AuditLogRead
from app.services.audit_service import AUDIT_PAGE_SIZE, list_audit_logs, search_logs

router = APIRouter(prefix="/api/audit-logs", tags=["Audit Trail"])


@router.get("/", response_model=List[AuditLogRead])
async def get_audit_logs(
    action: Optional[AuditAction] = Query(None, description="create, update or delete"),
    resource_type: Optional[str] = Query(None, description="Table name, e.g. applications"),
    user_id: Optional[UUID] = Query(None),
    days: Optional[int] = Query(None, ge=1, description="Lookback window; omit for all time"),
    search: Optional[str] = Query(None),
    limit: int = Query(AUDIT_PAGE_SIZE, ge=1, le=500),
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_audit_viewer),
):
    rows = await list_audit_logs(
        session,
        action=action.value if action else None,
        resource_type=resource_type,
        user_id=user_id,
        days=days,
        limit=limit,
    )
    # Search runs over the fetched page only
    return search_logs(rows, search)
