# app/api/endpoints/analytics.py

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session, require_analytics
from app.models.admin_user import AdminUser
from app.schemas.analytics import AnalyticsRead
from app.services.analytics_service import aggregate
from app.services.application_service import compute_stats, list_applications

router = APIRouter(prefix="/api/analytics", tags=["Analytics"])


@router.get("/", response_model=AnalyticsRead)
async def get_analytics(
    days: int = Query(30, description="7, 30 or 90"),
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_analytics),
):
    apps = await list_applications(session)
    try:
        summary = aggregate(apps, days)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return AnalyticsRead(**summary, stats=compute_stats(apps))
