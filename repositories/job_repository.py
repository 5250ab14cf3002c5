"""
Job repository.
"""

from typing import List, Optional
from sqlmodel import Session

from models.job import Job, JobStatus
from repositories.base_repository import TenantRepository


class JobRepository(TenantRepository[Job]):
    """Repository for job openings."""

    def __init__(self, db_session: Session, organization_id: int):
        super().__init__(db_session, Job, organization_id)

    def search(self, status: Optional[str] = None, company_id: Optional[str] = None) -> List[Job]:
        statement = self._select()
        if status:
            statement = statement.where(Job.status == status)
        if company_id:
            statement = statement.where(Job.company_id == company_id)
        statement = statement.order_by(Job.created_at.desc())
        return list(self.db.exec(statement).all())

    def get_active(self) -> List[Job]:
        return self.search(status=JobStatus.ACTIVE.value)
