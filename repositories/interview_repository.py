"""
Interview repository.
"""

from typing import List, Optional
from sqlmodel import Session

from models.interview import Interview
from repositories.base_repository import TenantRepository


class InterviewRepository(TenantRepository[Interview]):
    """Repository for client interviews."""

    def __init__(self, db_session: Session, organization_id: int):
        super().__init__(db_session, Interview, organization_id)

    def search(
        self,
        application_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Interview]:
        statement = self._select()
        if application_id:
            statement = statement.where(Interview.application_id == application_id)
        if status:
            statement = statement.where(Interview.status == status)
        statement = statement.order_by(Interview.scheduled_date.asc())
        return list(self.db.exec(statement).all())
