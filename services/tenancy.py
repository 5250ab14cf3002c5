"""
Tenancy Guard.

Resolves an authenticated caller to exactly one organization. Every domain
service is constructed with the organization id returned here and never
sees a raw credential. Resolution is repeated on every request because
membership can change between calls.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlmodel import Session

from repositories.organization_repository import MembershipRepository
from services.errors import NotAuthenticatedError, NotAMemberError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentUser:
    """Identity collaborator's view of the caller."""
    id: str
    email: str


@dataclass(frozen=True)
class TenantContext:
    """Resolved organization for one request."""
    organization_id: int
    user: CurrentUser

    @property
    def user_id(self) -> str:
        return self.user.id


class TenancyGuard:
    """Maps a caller to the organization every domain operation is scoped to."""

    def __init__(self, db_session: Session):
        self.membership_repo = MembershipRepository(db_session)

    def resolve(self, user: Optional[CurrentUser]) -> TenantContext:
        """
        Resolve the caller's organization.

        Args:
            user: Authenticated caller, or None

        Returns:
            TenantContext for the caller's organization

        Raises:
            NotAuthenticatedError: No caller identity
            NotAMemberError: Caller has no membership
        """
        if user is None or not user.id:
            raise NotAuthenticatedError()

        memberships = self.membership_repo.get_for_user(user.id)
        if not memberships:
            raise NotAMemberError()

        if len(memberships) > 1:
            logger.warning(
                f"User {user.id} belongs to {len(memberships)} organizations; "
                f"using earliest joined ({memberships[0].organization_id})"
            )

        return TenantContext(organization_id=memberships[0].organization_id, user=user)
