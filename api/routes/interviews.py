from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from api.auth import get_tenant
from api.models.common_schemas import ErrorResponse
from api.models.pipeline_schemas import (
    InterviewCreate,
    InterviewComplete,
    InterviewResponse,
    InterviewListResponse,
)
from services.pipeline_service import PipelineService
from services.tenancy import TenantContext
from utils.database import get_db

router = APIRouter(
    prefix="/interviews",
    tags=["Pipeline"],
    responses={404: {"model": ErrorResponse}},
)


def get_service(tenant: TenantContext = Depends(get_tenant), db: Session = Depends(get_db)) -> PipelineService:
    return PipelineService(db, tenant.organization_id)


@router.post(
    "/",
    response_model=InterviewResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse, "description": "Application not yet submitted to the client"}},
)
def schedule_interview(
    request: InterviewCreate,
    tenant: TenantContext = Depends(get_tenant),
    service: PipelineService = Depends(get_service),
):
    """
    Schedule an interview.

    Only applications with a `submitted_to_client_date` are eligible.
    """
    return service.schedule_interview(created_by=tenant.user_id, **request.model_dump())


@router.get("/", response_model=InterviewListResponse)
def list_interviews(
    application_id: Optional[str] = Query(None),
    status: Optional[str] = Query(None, description="scheduled, completed or cancelled"),
    service: PipelineService = Depends(get_service),
):
    return InterviewListResponse(
        interviews=[
            InterviewResponse.model_validate(i)
            for i in service.list_interviews(application_id=application_id, status=status)
        ]
    )


@router.get("/{interview_id}", response_model=InterviewResponse)
def get_interview(interview_id: str, service: PipelineService = Depends(get_service)):
    return service.get_interview(interview_id)


@router.post("/{interview_id}/complete", response_model=InterviewResponse, responses={422: {"model": ErrorResponse}})
def complete_interview(
    interview_id: str,
    request: InterviewComplete,
    service: PipelineService = Depends(get_service),
):
    return service.complete_interview(interview_id, feedback=request.feedback, rating=request.rating)


@router.post("/{interview_id}/cancel", response_model=InterviewResponse, responses={422: {"model": ErrorResponse}})
def cancel_interview(interview_id: str, service: PipelineService = Depends(get_service)):
    return service.cancel_interview(interview_id)
