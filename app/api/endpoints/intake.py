# app/api/endpoints/intake.py

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.api.deps import get_db_session
from app.core.config import settings
from app.core.departments import DEPARTMENTS, get_department
from app.core.errors import WebhookDeliveryError
from app.core.rate_limiter import limiter
from app.schemas.intake import DepartmentRead, IntakeResult, IntakeSubmission
from app.services.intake_service import IntakeClosedError, submit_application
from app.services.template_service import questions_for_department

router = APIRouter(prefix="/api/intake", tags=["Intake (Public)"])


# -------------------------------------------------------------------
# Department catalog with the question set of each department
# -------------------------------------------------------------------
@router.get("/departments", response_model=List[DepartmentRead])
async def list_departments(session: AsyncSession = Depends(get_db_session)):
    return [
        DepartmentRead(**dept.to_dict(), questions=await questions_for_department(session, dept.id))
        for dept in DEPARTMENTS
    ]


@router.get("/departments/{department_id}", response_model=DepartmentRead)
async def get_department_detail(department_id: str, session: AsyncSession = Depends(get_db_session)):
    dept = get_department(department_id)
    if not dept:
        raise HTTPException(status_code=404, detail="Department not found")
    return DepartmentRead(**dept.to_dict(), questions=await questions_for_department(session, dept.id))


# -------------------------------------------------------------------
# Submit an application
# -------------------------------------------------------------------
@router.post("/applications", response_model=IntakeResult, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.INTAKE_RATE_LIMIT)
async def submit(
    request: Request,
    payload: IntakeSubmission,
    session: AsyncSession = Depends(get_db_session),
):
    try:
        return await submit_application(session, payload)
    except IntakeClosedError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except WebhookDeliveryError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Error submitting application. Please try again.",
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
