"""
Invitation repository.

Tenant-scoped like the other repositories, plus an unscoped lookup by code
for the acceptance flow (the invitee is not a member yet).
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, update
from sqlmodel import Session, select

from models.invitation import Invitation
from repositories.base_repository import TenantRepository


class InvitationRepository(TenantRepository[Invitation]):
    """Repository for organization invitations."""

    def __init__(self, db_session: Session, organization_id: int):
        super().__init__(db_session, Invitation, organization_id)

    @staticmethod
    def find_by_code(db_session: Session, invitation_code: str) -> Optional[Invitation]:
        """Look an invitation up by its code, regardless of organization."""
        statement = select(Invitation).where(Invitation.invitation_code == invitation_code)
        return db_session.exec(statement).first()

    def get_unused_for_email(self, email: str) -> Optional[Invitation]:
        statement = self._select().where(
            Invitation.email == email,
            Invitation.used_at.is_(None),
        )
        return self.db.exec(statement).first()

    def list_pending(self, now: datetime) -> List[Invitation]:
        statement = (
            self._select()
            .where(Invitation.used_at.is_(None), Invitation.expires_at > now)
            .order_by(Invitation.created_at.desc())
        )
        return list(self.db.exec(statement).all())

    def purge_expired_for_email(self, email: str, now: datetime) -> int:
        """Delete unused, expired invitations for an email. Flushes only."""
        statement = delete(Invitation).where(
            Invitation.organization_id == self.organization_id,
            Invitation.email == email,
            Invitation.used_at.is_(None),
            Invitation.expires_at <= now,
        )
        result = self.db.exec(statement)
        return result.rowcount or 0

    def claim(self, invitation_id: str, user_id: str, now: datetime) -> bool:
        """
        Compare-and-swap: stamp used_at/used_by only if still unused and unexpired.

        Returns:
            True if this call won the invitation, False otherwise
        """
        statement = (
            update(Invitation)
            .where(
                Invitation.id == invitation_id,
                Invitation.organization_id == self.organization_id,
                Invitation.used_at.is_(None),
                Invitation.expires_at > now,
            )
            .values(used_at=now, used_by=user_id)
            .execution_options(synchronize_session=False)
        )
        result = self.db.exec(statement)
        return result.rowcount == 1
