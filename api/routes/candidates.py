from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from api.auth import get_tenant
from api.models.candidate_schemas import (
    CandidateCreate,
    CandidateUpdate,
    CandidateResponse,
    CandidateListResponse,
    CandidateDetailResponse,
)
from api.models.common_schemas import DeletedResponse, ErrorResponse
from api.models.document_schemas import DocumentResponse
from api.models.pipeline_schemas import ApplicationResponse, PipelineStageResponse
from api.models.shortlist_schemas import ShortlistResponse
from services.candidate_service import CandidateService
from services.pipeline_service import PipelineService
from services.shortlist_service import ShortlistService
from services.tenancy import TenantContext
from utils.database import get_db

router = APIRouter(
    prefix="/candidates",
    tags=["Candidates"],
    responses={404: {"model": ErrorResponse}},
)


def get_service(tenant: TenantContext = Depends(get_tenant), db: Session = Depends(get_db)) -> CandidateService:
    return CandidateService(db, tenant.organization_id)


@router.post("/", response_model=CandidateResponse, status_code=status.HTTP_201_CREATED)
def create_candidate(
    request: CandidateCreate,
    tenant: TenantContext = Depends(get_tenant),
    service: CandidateService = Depends(get_service),
):
    return service.create(created_by=tenant.user_id, **request.model_dump())


@router.get("/", response_model=CandidateListResponse)
def list_candidates(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    service: CandidateService = Depends(get_service),
):
    candidates, total = service.list(page=page, page_size=page_size)
    return CandidateListResponse(
        candidates=[CandidateResponse.model_validate(c) for c in candidates],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{candidate_id}", response_model=CandidateDetailResponse)
def get_candidate(candidate_id: str, service: CandidateService = Depends(get_service)):
    """Candidate with documents, applications and current pipeline stage."""
    detail = service.get_detail(candidate_id)
    return CandidateDetailResponse(
        candidate=CandidateResponse.model_validate(detail.candidate),
        documents=[DocumentResponse.model_validate(d) for d in detail.documents],
        applications=[ApplicationResponse.model_validate(a) for a in detail.applications],
        pipeline_stage=detail.pipeline_stage.value if detail.pipeline_stage else None,
    )


@router.patch("/{candidate_id}", response_model=CandidateResponse)
def update_candidate(
    candidate_id: str,
    request: CandidateUpdate,
    service: CandidateService = Depends(get_service),
):
    return service.update(candidate_id, **request.model_dump(exclude_unset=True))


@router.delete("/{candidate_id}", response_model=DeletedResponse)
def delete_candidate(candidate_id: str, service: CandidateService = Depends(get_service)):
    service.delete(candidate_id)
    return DeletedResponse(id=candidate_id)


@router.get("/{candidate_id}/pipeline-stage", response_model=PipelineStageResponse)
def get_pipeline_stage(
    candidate_id: str,
    tenant: TenantContext = Depends(get_tenant),
    db: Session = Depends(get_db),
):
    stage = PipelineService(db, tenant.organization_id).pipeline_stage(candidate_id)
    return PipelineStageResponse(candidate_id=candidate_id, stage=stage.value if stage else None)


@router.get("/{candidate_id}/shortlists", response_model=List[ShortlistResponse])
def get_candidate_shortlists(
    candidate_id: str,
    tenant: TenantContext = Depends(get_tenant),
    db: Session = Depends(get_db),
):
    return ShortlistService(db, tenant.organization_id).list_for_candidate(candidate_id)
