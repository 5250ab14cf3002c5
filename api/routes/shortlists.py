from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from api.auth import get_tenant
from api.models.candidate_schemas import CandidateResponse
from api.models.common_schemas import DeletedResponse, ErrorResponse
from api.models.shortlist_schemas import (
    ShortlistCreate,
    ShortlistUpdate,
    ShortlistResponse,
    AddCandidatesRequest,
    AddCandidatesResponse,
    MemberNotesRequest,
    ShortlistMemberResponse,
    DuplicateRequest,
    AssociateJobRequest,
    BulkAssociationResponse,
)
from services.shortlist_service import ShortlistService
from services.tenancy import TenantContext
from utils.database import get_db

router = APIRouter(
    prefix="/shortlists",
    tags=["Shortlists"],
    responses={404: {"model": ErrorResponse}},
)


def get_service(tenant: TenantContext = Depends(get_tenant), db: Session = Depends(get_db)) -> ShortlistService:
    return ShortlistService(db, tenant.organization_id)


# ============ SHORTLIST ENDPOINTS ============

@router.post("/", response_model=ShortlistResponse, status_code=status.HTTP_201_CREATED)
def create_shortlist(
    request: ShortlistCreate,
    tenant: TenantContext = Depends(get_tenant),
    service: ShortlistService = Depends(get_service),
):
    return service.create(request.name, request.description, created_by=tenant.user_id)


@router.get("/", response_model=List[ShortlistResponse])
def list_shortlists(service: ShortlistService = Depends(get_service)):
    """Shortlists with candidate counts, most recently updated first."""
    results = []
    for shortlist, count in service.list():
        response = ShortlistResponse.model_validate(shortlist)
        response.candidate_count = count
        results.append(response)
    return results


@router.get("/options")
def list_shortlist_options(service: ShortlistService = Depends(get_service)):
    """(id, name) pairs for pickers."""
    return [{"id": shortlist_id, "name": name} for shortlist_id, name in service.list_options()]


@router.get("/{shortlist_id}", response_model=ShortlistResponse)
def get_shortlist(shortlist_id: str, service: ShortlistService = Depends(get_service)):
    return service.get(shortlist_id)


@router.patch("/{shortlist_id}", response_model=ShortlistResponse)
def update_shortlist(shortlist_id: str, request: ShortlistUpdate, service: ShortlistService = Depends(get_service)):
    return service.update(shortlist_id, name=request.name, description=request.description)


@router.delete("/{shortlist_id}", response_model=DeletedResponse)
def delete_shortlist(shortlist_id: str, service: ShortlistService = Depends(get_service)):
    service.delete(shortlist_id)
    return DeletedResponse(id=shortlist_id)


# ============ MEMBERSHIP ENDPOINTS ============

@router.get("/{shortlist_id}/candidates", response_model=List[ShortlistMemberResponse])
def list_members(shortlist_id: str, service: ShortlistService = Depends(get_service)):
    return [
        ShortlistMemberResponse(
            candidate=CandidateResponse.model_validate(candidate),
            notes=member.notes,
            added_by=member.added_by,
            added_at=member.added_at,
        )
        for member, candidate in service.list_members(shortlist_id)
    ]


@router.post("/{shortlist_id}/candidates", response_model=AddCandidatesResponse)
def add_candidates(
    shortlist_id: str,
    request: AddCandidatesRequest,
    tenant: TenantContext = Depends(get_tenant),
    service: ShortlistService = Depends(get_service),
):
    """Add candidates; ids already on the shortlist are reported, not rejected."""
    result = service.add_candidates(shortlist_id, request.candidate_ids, request.notes, added_by=tenant.user_id)
    return AddCandidatesResponse(
        added=[member.candidate_id for member in result.added],
        already_present=result.already_present,
    )


@router.patch("/{shortlist_id}/candidates/{candidate_id}")
def update_member_notes(
    shortlist_id: str,
    candidate_id: str,
    request: MemberNotesRequest,
    service: ShortlistService = Depends(get_service),
):
    member = service.update_candidate_notes(shortlist_id, candidate_id, request.notes)
    return {"shortlist_id": member.shortlist_id, "candidate_id": member.candidate_id, "notes": member.notes}


@router.delete("/{shortlist_id}/candidates/{candidate_id}", response_model=DeletedResponse)
def remove_candidate(shortlist_id: str, candidate_id: str, service: ShortlistService = Depends(get_service)):
    service.remove_candidate(shortlist_id, candidate_id)
    return DeletedResponse(id=candidate_id)


# ============ BULK ENDPOINTS ============

@router.post("/{shortlist_id}/duplicate", response_model=ShortlistResponse, status_code=status.HTTP_201_CREATED)
def duplicate_shortlist(
    shortlist_id: str,
    request: DuplicateRequest,
    tenant: TenantContext = Depends(get_tenant),
    service: ShortlistService = Depends(get_service),
):
    return service.duplicate(shortlist_id, request.name, created_by=tenant.user_id)


@router.post("/{shortlist_id}/associate-job", response_model=BulkAssociationResponse)
def associate_with_job(
    shortlist_id: str,
    request: AssociateJobRequest,
    tenant: TenantContext = Depends(get_tenant),
    service: ShortlistService = Depends(get_service),
):
    """Create an application for every member not yet associated with the job."""
    result = service.associate_with_job(shortlist_id, request.job_id, created_by=tenant.user_id)
    return BulkAssociationResponse(
        created=[application.id for application in result.created],
        skipped=result.skipped,
    )
