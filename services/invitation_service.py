"""
Invitation Lifecycle Manager.

Issues single-use, time-limited invitation codes and redeems them into
organization memberships. Also owns organization creation and member
management, which share the same tables.

Redemption is a compare-and-swap on `used_at` followed by the membership
insert, inside one transaction: two concurrent accepts of the same code
produce exactly one membership.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from config.settings import settings
from models.invitation import Invitation, InvitationStatus
from models.organization import Organization, OrganizationMember
from repositories.invitation_repository import InvitationRepository
from repositories.organization_repository import (
    MembershipRepository,
    OrganizationRepository,
    ProfileRepository,
)
from services.errors import (
    AlreadyMemberError,
    ConflictError,
    DuplicateInvitationError,
    ExpiredResourceError,
    NotEligibleError,
    NotFoundError,
)
from services.tenancy import CurrentUser
from utils.database import atomic

logger = logging.getLogger(__name__)


class InvitationService:
    """
    Invitations and memberships.

    `organization_id` is required for the tenant-scoped operations (create,
    list, cancel, members). `create_organization`, `get_by_code` and `accept`
    work without one because the caller is not a member yet.
    """

    def __init__(self, db_session: Session, organization_id: Optional[int] = None):
        self.db = db_session
        self.organization_id = organization_id
        self.organization_repo = OrganizationRepository(db_session)
        self.membership_repo = MembershipRepository(db_session)
        self.profile_repo = ProfileRepository(db_session)

    @property
    def invitation_repo(self) -> InvitationRepository:
        return InvitationRepository(self.db, self.organization_id)

    # ============ ORGANIZATION ============

    def create_organization(self, name: str, user: CurrentUser) -> Organization:
        """Create an organization with the caller as its first member."""
        name = (name or "").strip()
        if not name:
            raise ValueError("Organization name is required")

        with atomic(self.db):
            self.profile_repo.upsert(user.id, user.email, commit=False)
            organization = self.organization_repo.create(Organization(name=name), commit=False)
            self.membership_repo.create(
                OrganizationMember(organization_id=organization.id, user_id=user.id),
                commit=False,
            )

        self.db.refresh(organization)
        logger.info(f"Created organization {organization.id} '{name}' for user {user.id}")
        return organization

    def get_organization(self) -> Organization:
        organization = self.organization_repo.get_by_id(self.organization_id)
        if organization is None:
            raise NotFoundError("Organization not found")
        return organization

    def list_members(self) -> List[tuple]:
        """(OrganizationMember, Optional[UserProfile]) tuples, newest first."""
        return self.membership_repo.list_for_organization(self.organization_id)

    def remove_member(self, user_id: str) -> bool:
        member = self.membership_repo.get(self.organization_id, user_id)
        if member is None:
            raise NotFoundError("Member not found")
        self.membership_repo.delete(member)
        logger.info(f"Removed user {user_id} from organization {self.organization_id}")
        return True

    # ============ INVITATIONS ============

    def create(self, email: str, created_by: str) -> Invitation:
        """
        Invite an email address to the organization.

        Expired unused invitations for the same email are purged first, so
        re-inviting after expiry works.

        Raises:
            ValueError: Email missing
            AlreadyMemberError: A member already uses this email
            DuplicateInvitationError: A pending invitation exists for this email
        """
        email = (email or "").strip()
        if not email or "@" not in email:
            raise ValueError("A valid email address is required")

        if self.membership_repo.is_email_member(self.organization_id, email):
            raise AlreadyMemberError()

        now = datetime.utcnow()
        repo = self.invitation_repo
        invitation = Invitation(
            email=email,
            created_by=created_by,
            created_at=now,
            expires_at=now + timedelta(days=settings.INVITATION_TTL_DAYS),
        )
        try:
            with atomic(self.db):
                purged = repo.purge_expired_for_email(email, now)
                if purged:
                    logger.info(f"Purged {purged} expired invitation(s) for {email}")
                if repo.get_unused_for_email(email) is not None:
                    raise DuplicateInvitationError()
                repo.create(invitation, commit=False)
        except IntegrityError as exc:
            raise DuplicateInvitationError() from exc

        self.db.refresh(invitation)
        logger.info(f"Invited {email} to organization {self.organization_id} ({invitation.id})")
        return invitation

    def list_pending(self) -> List[Invitation]:
        return self.invitation_repo.list_pending(datetime.utcnow())

    def get_by_code(self, invitation_code: str) -> Invitation:
        """
        Look up a redeemable invitation for the acceptance page.

        Raises:
            NotFoundError: Unknown code
            ConflictError: Already used
            ExpiredResourceError: Past its expiry
        """
        invitation = InvitationRepository.find_by_code(self.db, invitation_code)
        self._check_redeemable(invitation, datetime.utcnow())
        return invitation

    def accept(self, invitation_code: str, user: CurrentUser) -> OrganizationMember:
        """
        Redeem an invitation for the calling user.

        The claim and the membership insert commit together or not at all.

        Raises:
            NotFoundError: Unknown code
            ConflictError: Already used, including by a concurrent accept
            ExpiredResourceError: Past its expiry
            NotEligibleError: Caller's email differs from the invited one
            AlreadyMemberError: Caller already belongs to the organization
        """
        now = datetime.utcnow()
        invitation = InvitationRepository.find_by_code(self.db, invitation_code)
        self._check_redeemable(invitation, now)

        # Exact comparison, as stored
        if user.email != invitation.email:
            raise NotEligibleError("Invitation email does not match your account email")

        organization_id = invitation.organization_id
        if self.membership_repo.get(organization_id, user.id) is not None:
            raise AlreadyMemberError()

        repo = InvitationRepository(self.db, organization_id)
        member = OrganizationMember(organization_id=organization_id, user_id=user.id, joined_at=now)
        try:
            with atomic(self.db):
                if not repo.claim(invitation.id, user.id, now):
                    raise ConflictError("Invitation has already been used")
                self.profile_repo.upsert(user.id, user.email, commit=False)
                self.membership_repo.create(member, commit=False)
        except IntegrityError as exc:
            raise AlreadyMemberError() from exc

        self.db.refresh(member)
        logger.info(f"User {user.id} joined organization {organization_id} via invitation {invitation.id}")
        return member

    def cancel(self, invitation_id: str) -> bool:
        """Delete an unused invitation."""
        repo = self.invitation_repo
        with atomic(self.db):
            invitation = repo.get_by_id_for_update(invitation_id)
            if invitation is None:
                raise NotFoundError("Invitation not found")
            if invitation.used_at is not None:
                raise ConflictError("Invitation has already been used")
            repo.delete(invitation, commit=False)

        logger.info(f"Cancelled invitation {invitation_id}")
        return True

    @staticmethod
    def _check_redeemable(invitation: Optional[Invitation], now: datetime) -> None:
        if invitation is None:
            raise NotFoundError("Invalid invitation code")
        status = invitation.status_at(now)
        if status == InvitationStatus.ACCEPTED:
            raise ConflictError("Invitation has already been used")
        if status == InvitationStatus.EXPIRED:
            raise ExpiredResourceError()
