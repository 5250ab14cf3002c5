from datetime import datetime

from sqlmodel import SQLModel, Field


class UserProfile(SQLModel, table=True):
    """Email lookup for identity-provider users.

    Rows are upserted whenever an authenticated user touches the system, so an
    invitation can check whether the invited email already belongs to a member.
    """

    __tablename__ = "profiles"

    id: str = Field(primary_key=True)  # identity provider user id
    email: str = Field(index=True, nullable=False)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
