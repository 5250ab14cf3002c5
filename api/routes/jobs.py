from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from api.auth import get_tenant
from api.models.common_schemas import DeletedResponse, ErrorResponse
from api.models.company_schemas import ContactResponse
from api.models.job_schemas import JobCreate, JobUpdate, JobResponse
from services.job_service import JobService
from services.pipeline_service import PipelineService
from services.tenancy import TenantContext
from utils.database import get_db

router = APIRouter(
    prefix="/jobs",
    tags=["Jobs"],
    responses={404: {"model": ErrorResponse}},
)


def get_service(tenant: TenantContext = Depends(get_tenant), db: Session = Depends(get_db)) -> JobService:
    return JobService(db, tenant.organization_id)


@router.post("/", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
def create_job(
    request: JobCreate,
    tenant: TenantContext = Depends(get_tenant),
    service: JobService = Depends(get_service),
):
    return service.create(created_by=tenant.user_id, **request.model_dump())


@router.get("/", response_model=List[JobResponse])
def list_jobs(
    status: Optional[str] = Query(None, description="Filter by job status"),
    company_id: Optional[str] = Query(None),
    service: JobService = Depends(get_service),
):
    return service.list(status=status, company_id=company_id)


@router.get("/active", response_model=List[JobResponse])
def list_active_jobs(service: JobService = Depends(get_service)):
    return service.list_active()


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: str, service: JobService = Depends(get_service)):
    return service.get(job_id)


@router.patch("/{job_id}", response_model=JobResponse)
def update_job(job_id: str, request: JobUpdate, service: JobService = Depends(get_service)):
    return service.update(job_id, **request.model_dump(exclude_unset=True))


@router.delete("/{job_id}", response_model=DeletedResponse)
def delete_job(job_id: str, service: JobService = Depends(get_service)):
    service.delete(job_id)
    return DeletedResponse(id=job_id)


@router.get("/{job_id}/contacts", response_model=List[ContactResponse])
def get_job_contacts(
    job_id: str,
    tenant: TenantContext = Depends(get_tenant),
    db: Session = Depends(get_db),
):
    """Contacts of the job's company, for picking an interviewer."""
    return PipelineService(db, tenant.organization_id).get_company_contacts_for_job(job_id)
