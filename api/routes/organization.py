from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from api.auth import get_current_user, get_tenant
from api.models.common_schemas import DeletedResponse, ErrorResponse
from api.models.organization_schemas import (
    OrganizationCreate,
    OrganizationResponse,
    MemberResponse,
    InvitationCreate,
    InvitationResponse,
    InvitationLookupResponse,
    AcceptInvitationResponse,
)
from models.invitation import Invitation
from repositories.organization_repository import OrganizationRepository
from services.invitation_service import InvitationService
from services.tenancy import CurrentUser, TenantContext
from utils.database import get_db

router = APIRouter(tags=["Organization"], responses={404: {"model": ErrorResponse}})


def get_service(tenant: TenantContext = Depends(get_tenant), db: Session = Depends(get_db)) -> InvitationService:
    return InvitationService(db, tenant.organization_id)


def to_invitation_response(invitation: Invitation) -> InvitationResponse:
    return InvitationResponse(
        id=invitation.id,
        email=invitation.email,
        invitation_code=invitation.invitation_code,
        created_by=invitation.created_by,
        created_at=invitation.created_at,
        expires_at=invitation.expires_at,
        status=invitation.status_at(datetime.utcnow()).value,
    )


# ============ ORGANIZATION ENDPOINTS ============

@router.post("/organizations", response_model=OrganizationResponse, status_code=status.HTTP_201_CREATED)
def create_organization(
    request: OrganizationCreate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create an organization with the caller as its first member."""
    return InvitationService(db).create_organization(request.name, user)


@router.get("/organization", response_model=OrganizationResponse)
def get_organization(service: InvitationService = Depends(get_service)):
    return service.get_organization()


@router.get("/organization/members", response_model=List[MemberResponse])
def list_members(service: InvitationService = Depends(get_service)):
    return [
        MemberResponse(
            user_id=member.user_id,
            email=profile.email if profile else None,
            joined_at=member.joined_at,
        )
        for member, profile in service.list_members()
    ]


@router.delete("/organization/members/{user_id}", response_model=DeletedResponse)
def remove_member(user_id: str, service: InvitationService = Depends(get_service)):
    service.remove_member(user_id)
    return DeletedResponse(id=user_id)


# ============ INVITATION ENDPOINTS ============

@router.post(
    "/organization/invitations",
    response_model=InvitationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse, "description": "Already a member or already invited"}},
)
def create_invitation(
    request: InvitationCreate,
    tenant: TenantContext = Depends(get_tenant),
    service: InvitationService = Depends(get_service),
):
    return to_invitation_response(service.create(request.email, created_by=tenant.user_id))


@router.get("/organization/invitations", response_model=List[InvitationResponse])
def list_pending_invitations(service: InvitationService = Depends(get_service)):
    return [to_invitation_response(invitation) for invitation in service.list_pending()]


@router.delete("/organization/invitations/{invitation_id}", response_model=DeletedResponse, responses={409: {"model": ErrorResponse}})
def cancel_invitation(invitation_id: str, service: InvitationService = Depends(get_service)):
    service.cancel(invitation_id)
    return DeletedResponse(id=invitation_id)


@router.get(
    "/invitations/{invitation_code}",
    response_model=InvitationLookupResponse,
    responses={409: {"model": ErrorResponse}, 410: {"model": ErrorResponse}},
)
def lookup_invitation(invitation_code: str, db: Session = Depends(get_db)):
    """Public lookup used by the acceptance page."""
    invitation = InvitationService(db).get_by_code(invitation_code)
    organization = OrganizationRepository(db).get_by_id(invitation.organization_id)
    return InvitationLookupResponse(
        organization_id=invitation.organization_id,
        organization_name=organization.name if organization else None,
        email=invitation.email,
        expires_at=invitation.expires_at,
    )


@router.post(
    "/invitations/{invitation_code}/accept",
    response_model=AcceptInvitationResponse,
    responses={
        409: {"model": ErrorResponse, "description": "Already used or already a member"},
        410: {"model": ErrorResponse, "description": "Expired"},
        422: {"model": ErrorResponse, "description": "Email does not match"},
    },
)
def accept_invitation(
    invitation_code: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    member = InvitationService(db).accept(invitation_code, user)
    return AcceptInvitationResponse(
        organization_id=member.organization_id,
        user_id=member.user_id,
        joined_at=member.joined_at,
    )
