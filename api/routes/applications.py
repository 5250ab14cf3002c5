from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from api.auth import get_tenant
from api.models.common_schemas import ErrorResponse
from api.models.pipeline_schemas import (
    ApplicationCreate,
    ApplicationResponse,
    TransitionRequest,
    SubmitToClientRequest,
)
from services.pipeline_service import PipelineService
from services.tenancy import TenantContext
from utils.database import get_db

router = APIRouter(
    prefix="/applications",
    tags=["Pipeline"],
    responses={404: {"model": ErrorResponse}},
)


def get_service(tenant: TenantContext = Depends(get_tenant), db: Session = Depends(get_db)) -> PipelineService:
    return PipelineService(db, tenant.organization_id)


@router.post(
    "/",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse, "description": "Candidate already associated with the job"}},
)
def associate_candidate(
    request: ApplicationCreate,
    tenant: TenantContext = Depends(get_tenant),
    service: PipelineService = Depends(get_service),
):
    """
    Associate a candidate with a job.

    New applications always start as `associated`; sending a status is rejected.
    """
    return service.associate(
        candidate_id=request.candidate_id,
        job_id=request.job_id,
        applied_date=request.applied_date,
        notes=request.notes,
        status=request.status,
        created_by=tenant.user_id,
    )


@router.get("/", response_model=List[ApplicationResponse])
def list_applications(
    candidate_id: Optional[str] = Query(None),
    job_id: Optional[str] = Query(None),
    service: PipelineService = Depends(get_service),
):
    """Applications of a candidate or of a job (exactly one filter)."""
    if bool(candidate_id) == bool(job_id):
        raise ValueError("Pass exactly one of candidate_id or job_id")
    if candidate_id:
        return service.list_for_candidate(candidate_id)
    return service.list_for_job(job_id)


@router.get("/exists")
def application_exists(
    candidate_id: str = Query(...),
    job_id: str = Query(...),
    service: PipelineService = Depends(get_service),
):
    return {"exists": service.has_application(candidate_id, job_id)}


@router.get("/eligible", response_model=List[ApplicationResponse])
def list_eligible_applications(
    candidate_id: Optional[str] = Query(None),
    job_id: Optional[str] = Query(None),
    service: PipelineService = Depends(get_service),
):
    """Applications submitted to the client (interviews may be booked), newest first."""
    return service.get_eligible_applications(candidate_id=candidate_id, job_id=job_id)


@router.get("/{application_id}", response_model=ApplicationResponse)
def get_application(application_id: str, service: PipelineService = Depends(get_service)):
    return service.get(application_id)


@router.post("/{application_id}/transition", response_model=ApplicationResponse)
def transition_application(
    application_id: str,
    request: TransitionRequest,
    service: PipelineService = Depends(get_service),
):
    fields = request.model_dump(exclude_unset=True)
    new_status = fields.pop("status")
    return service.transition(application_id, new_status, **fields)


@router.post("/{application_id}/submit-to-client", response_model=ApplicationResponse)
def submit_to_client(
    application_id: str,
    request: SubmitToClientRequest,
    service: PipelineService = Depends(get_service),
):
    return service.mark_submitted_to_client(application_id, when=request.when)
