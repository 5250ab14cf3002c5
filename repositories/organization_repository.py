"""
Organization, membership and profile repositories.

These tables are the root of tenancy, so they are not tenant-scoped
themselves; callers pass the organization explicitly.
"""

from typing import List, Optional
from sqlmodel import Session, select

from models.organization import Organization, OrganizationMember
from models.profile import UserProfile
from repositories.base_repository import BaseRepository


class OrganizationRepository(BaseRepository[Organization]):
    """Repository for organizations."""

    def __init__(self, db_session: Session):
        super().__init__(db_session, Organization)


class MembershipRepository(BaseRepository[OrganizationMember]):
    """Repository for organization memberships."""

    def __init__(self, db_session: Session):
        super().__init__(db_session, OrganizationMember)

    def get_for_user(self, user_id: str) -> List[OrganizationMember]:
        """
        All memberships of a user, earliest joined first.

        Args:
            user_id: Identity provider user id

        Returns:
            List of memberships (possibly empty)
        """
        statement = (
            select(OrganizationMember)
            .where(OrganizationMember.user_id == user_id)
            .order_by(OrganizationMember.joined_at.asc(), OrganizationMember.id.asc())
        )
        return list(self.db.exec(statement).all())

    def get(self, organization_id: int, user_id: str) -> Optional[OrganizationMember]:
        statement = select(OrganizationMember).where(
            OrganizationMember.organization_id == organization_id,
            OrganizationMember.user_id == user_id,
        )
        return self.db.exec(statement).first()

    def list_for_organization(self, organization_id: int) -> List[tuple]:
        """
        Members of an organization with their profile (newest first).

        Returns:
            List of (OrganizationMember, Optional[UserProfile]) tuples
        """
        statement = (
            select(OrganizationMember, UserProfile)
            .join(UserProfile, UserProfile.id == OrganizationMember.user_id, isouter=True)
            .where(OrganizationMember.organization_id == organization_id)
            .order_by(OrganizationMember.joined_at.desc())
        )
        return list(self.db.exec(statement).all())

    def is_email_member(self, organization_id: int, email: str) -> bool:
        """Whether a user whose profile carries `email` belongs to the organization."""
        statement = (
            select(OrganizationMember.id)
            .join(UserProfile, UserProfile.id == OrganizationMember.user_id)
            .where(
                OrganizationMember.organization_id == organization_id,
                UserProfile.email == email,
            )
        )
        return self.db.exec(statement).first() is not None


class ProfileRepository(BaseRepository[UserProfile]):
    """Repository for user profiles (id -> email)."""

    def __init__(self, db_session: Session):
        super().__init__(db_session, UserProfile)

    def upsert(self, user_id: str, email: str, commit: bool = True) -> UserProfile:
        """Create the profile or refresh its email."""
        profile = self.get_by_id(user_id)
        if profile is None:
            return self.create(UserProfile(id=user_id, email=email), commit=commit)
        if profile.email != email:
            profile.email = email
            return self.update(profile, commit=commit)
        return profile
