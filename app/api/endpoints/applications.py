# app/api/endpoints/applications.py

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import HTMLResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from app.api.deps import get_db_session, require_bulk_editor, require_reviewer
from app.core.errors import NotFoundError
from app.models.admin_user import AdminUser
from app.schemas.application import (
    ApplicationDetail,
    ApplicationFilters,
    ApplicationRead,
    ApplicationStats,
    AttachmentCreate,
    AttachmentRead,
    BulkActionRequest,
    BulkActionResult,
    MailtoLink,
    StatusUpdateRequest,
)
from app.services import application_service, export_service
from app.services.bulk_service import apply_bulk_action
from app.services.comment_service import list_comments
from app.services.template_service import questions_for_department

router = APIRouter(prefix="/api/applications", tags=["Applications (Review)"])


# -------------------------------------------------------------------
# Query-string filters (all fields ANDed, "all" disables a field)
# -------------------------------------------------------------------
def get_filters(
    status: str = Query("all"),
    department: str = Query("all"),
    priority: str = Query("all"),
    search: Optional[str] = Query(None),
    date_range: str = Query("all"),
) -> ApplicationFilters:
    try:
        return ApplicationFilters(
            status=status,
            department=department,
            priority=priority,
            search=search,
            date_range=date_range,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


async def _filtered(session: AsyncSession, filters: ApplicationFilters):
    apps = await application_service.list_applications(session)
    return application_service.filter_applications(apps, filters)


# -------------------------------------------------------------------
# Dashboard list
# -------------------------------------------------------------------
@router.get("/", response_model=List[ApplicationRead])
async def list_applications(
    filters: ApplicationFilters = Depends(get_filters),
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_reviewer),
):
    return await _filtered(session, filters)


@router.get("/stats", response_model=ApplicationStats)
async def application_stats(
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_reviewer),
):
    return await application_service.get_application_stats(session)


# -------------------------------------------------------------------
# Exports over the filtered set
# -------------------------------------------------------------------
@router.get("/export.csv")
async def export_csv(
    filters: ApplicationFilters = Depends(get_filters),
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_reviewer),
):
    content = export_service.to_csv(await _filtered(session, filters))
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="applications.csv"'},
    )


@router.get("/print", response_class=HTMLResponse)
async def print_view(
    filters: ApplicationFilters = Depends(get_filters),
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_reviewer),
):
    return HTMLResponse(export_service.print_html(await _filtered(session, filters)))


@router.get("/mailto", response_model=MailtoLink)
async def mailto(
    filters: ApplicationFilters = Depends(get_filters),
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_reviewer),
):
    apps = await _filtered(session, filters)
    return MailtoLink(
        href=export_service.mailto_link(apps),
        recipients=sum(1 for app in apps if app.applicant_email),
    )


# -------------------------------------------------------------------
# Bulk actions
# -------------------------------------------------------------------
@router.post("/bulk", response_model=BulkActionResult)
async def bulk_action(
    payload: BulkActionRequest,
    session: AsyncSession = Depends(get_db_session),
    current_user: AdminUser = Depends(require_bulk_editor),
):
    try:
        return await apply_bulk_action(session, payload, current_user.id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# -------------------------------------------------------------------
# Detail
# -------------------------------------------------------------------
@router.get("/{application_id}", response_model=ApplicationDetail)
async def application_detail(
    application_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_reviewer),
):
    try:
        app = await application_service.get_application(session, application_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    detail = ApplicationDetail.model_validate(app)
    detail.questions = await questions_for_department(session, app.department)
    detail.comments = await list_comments(session, app.id)
    detail.attachments = [
        AttachmentRead.model_validate(a)
        for a in await application_service.list_attachments(session, app.id)
    ]
    detail.available_transitions = application_service.available_transitions(app.status)
    return detail


@router.patch("/{application_id}/status", response_model=ApplicationRead)
async def update_status(
    application_id: UUID,
    payload: StatusUpdateRequest,
    session: AsyncSession = Depends(get_db_session),
    current_user: AdminUser = Depends(require_reviewer),
):
    try:
        return await application_service.update_status(
            session,
            application_id,
            payload.status,
            reviewer_id=current_user.id,
            notes=payload.notes,
            final_decision_reason=payload.final_decision_reason,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


# -------------------------------------------------------------------
# Attachments
# -------------------------------------------------------------------
@router.get("/{application_id}/attachments", response_model=List[AttachmentRead])
async def get_attachments(
    application_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_reviewer),
):
    try:
        app = await application_service.get_application(session, application_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return await application_service.list_attachments(session, app.id)


@router.post(
    "/{application_id}/attachments",
    response_model=AttachmentRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_attachment(
    application_id: UUID,
    payload: AttachmentCreate,
    session: AsyncSession = Depends(get_db_session),
    current_user: AdminUser = Depends(require_reviewer),
):
    try:
        return await application_service.add_attachment(
            session, application_id, payload.model_dump(), uploaded_by=current_user.id
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{application_id}/attachments/{attachment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_attachment(
    application_id: UUID,
    attachment_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_reviewer),
):
    try:
        await application_service.delete_attachment(session, application_id, attachment_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return None
