from datetime import datetime
from enum import Enum
from typing import Optional
import secrets
import uuid

import sqlalchemy as sa
from sqlmodel import SQLModel, Field


class InvitationStatus(str, Enum):
    """Derived invitation states; never stored."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    EXPIRED = "expired"


def generate_invitation_code() -> str:
    return secrets.token_urlsafe(32)


class Invitation(SQLModel, table=True):
    """Single-use, time-limited code that adds a user to an organization.

    Redeemable only while `used_at` is null and `expires_at` is in the future.
    At most one unused invitation per (organization, email); expired unused
    rows are purged before a new invitation is issued for the same email.
    """

    __tablename__ = "organization_invitations"
    __table_args__ = (
        sa.Index(
            "uq_organization_invitations_unused_email",
            "organization_id",
            "email",
            unique=True,
            sqlite_where=sa.text("used_at IS NULL"),
            postgresql_where=sa.text("used_at IS NULL"),
        ),
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    organization_id: int = Field(foreign_key="organizations.id", ondelete="CASCADE", index=True)
    email: str = Field(index=True, nullable=False)
    invitation_code: str = Field(
        default_factory=generate_invitation_code,
        index=True,
        nullable=False,
        sa_column_kwargs={"unique": True},
    )
    created_by: str = Field(nullable=False)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    expires_at: datetime = Field(nullable=False, index=True)
    used_at: Optional[datetime] = Field(default=None, nullable=True)
    used_by: Optional[str] = Field(default=None, nullable=True)

    def status_at(self, now: datetime) -> InvitationStatus:
        if self.used_at is not None:
            return InvitationStatus.ACCEPTED
        if self.expires_at <= now:
            return InvitationStatus.EXPIRED
        return InvitationStatus.PENDING
