# app/api/endpoints/templates.py

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from app.api.deps import get_db_session, require_template_manager
from app.core.errors import NotFoundError
from app.models.admin_user import AdminUser
from app.schemas.template import (
    ApplicationTemplateCreate,
    ApplicationTemplateRead,
    ApplicationTemplateUpdate,
    EmailTemplateCreate,
    EmailTemplateRead,
    EmailTemplateUpdate,
    TemplatePreview,
    TemplatePreviewRequest,
)
from app.services import template_service

router = APIRouter(prefix="/api/templates", tags=["Templates"])


# -------------------------------------------------------------------
# EMAIL TEMPLATES
# -------------------------------------------------------------------
@router.get("/email", response_model=List[EmailTemplateRead])
async def list_email_templates(
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_template_manager),
):
    return await template_service.list_email_templates(session)


@router.post("/email", response_model=EmailTemplateRead, status_code=status.HTTP_201_CREATED)
async def create_email_template(
    payload: EmailTemplateCreate,
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_template_manager),
):
    try:
        return await template_service.save_email_template(session, payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/email/{template_id}", response_model=EmailTemplateRead)
async def update_email_template(
    template_id: UUID,
    payload: EmailTemplateUpdate,
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_template_manager),
):
    try:
        return await template_service.save_email_template(session, payload.model_dump(), template_id=template_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/email/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_email_template(
    template_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_template_manager),
):
    try:
        await template_service.delete_email_template(session, template_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return None


@router.post("/email/{template_id}/preview", response_model=TemplatePreview)
async def preview_email_template(
    template_id: UUID,
    payload: Optional[TemplatePreviewRequest] = None,
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_template_manager),
):
    try:
        template = await template_service.get_email_template(session, template_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    values = {**template_service.sample_variables(), **(payload.values if payload else {})}
    return template_service.render_template(template.subject, template.body, template.variables, values)


# -------------------------------------------------------------------
# APPLICATION TEMPLATES (question sets)
# -------------------------------------------------------------------
@router.get("/application", response_model=List[ApplicationTemplateRead])
async def list_application_templates(
    department: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_template_manager),
):
    return await template_service.list_application_templates(session, department)


@router.post("/application", response_model=ApplicationTemplateRead, status_code=status.HTTP_201_CREATED)
async def create_application_template(
    payload: ApplicationTemplateCreate,
    session: AsyncSession = Depends(get_db_session),
    current_user: AdminUser = Depends(require_template_manager),
):
    try:
        return await template_service.save_application_template(
            session, payload.model_dump(), created_by=current_user.id
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/application/{template_id}", response_model=ApplicationTemplateRead)
async def update_application_template(
    template_id: UUID,
    payload: ApplicationTemplateUpdate,
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_template_manager),
):
    try:
        return await template_service.save_application_template(
            session, payload.model_dump(), template_id=template_id
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/application/{template_id}", response_model=ApplicationTemplateRead)
async def deactivate_application_template(
    template_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_template_manager),
):
    try:
        return await template_service.save_application_template(
            session, {"is_active": False}, template_id=template_id
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
