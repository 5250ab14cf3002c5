"""
Application repository.

Owns the existing-application predicate and the eligibility query used by
interview scheduling.
"""

from typing import List, Optional
from sqlmodel import Session

from models.application import Application
from repositories.base_repository import TenantRepository


class ApplicationRepository(TenantRepository[Application]):
    """Repository for candidate/job applications."""

    def __init__(self, db_session: Session, organization_id: int):
        super().__init__(db_session, Application, organization_id)

    def get_for_pair(self, candidate_id: str, job_id: str) -> Optional[Application]:
        statement = self._select().where(
            Application.candidate_id == candidate_id,
            Application.job_id == job_id,
        )
        return self.db.exec(statement).first()

    def exists_for_pair(self, candidate_id: str, job_id: str) -> bool:
        return self.get_for_pair(candidate_id, job_id) is not None

    def candidate_ids_for_job(self, job_id: str) -> set:
        statement = self._select().where(Application.job_id == job_id)
        return {application.candidate_id for application in self.db.exec(statement).all()}

    def get_for_candidate(self, candidate_id: str) -> List[Application]:
        statement = (
            self._select()
            .where(Application.candidate_id == candidate_id)
            .order_by(Application.created_at.desc())
        )
        return list(self.db.exec(statement).all())

    def get_for_job(self, job_id: str) -> List[Application]:
        statement = (
            self._select()
            .where(Application.job_id == job_id)
            .order_by(Application.created_at.desc())
        )
        return list(self.db.exec(statement).all())

    def get_eligible(
        self,
        candidate_id: Optional[str] = None,
        job_id: Optional[str] = None,
    ) -> List[Application]:
        """Applications whose submitted_to_client_date is set, newest first."""
        statement = self._select().where(Application.submitted_to_client_date.is_not(None))
        if candidate_id:
            statement = statement.where(Application.candidate_id == candidate_id)
        if job_id:
            statement = statement.where(Application.job_id == job_id)
        statement = statement.order_by(Application.created_at.desc())
        return list(self.db.exec(statement).all())
