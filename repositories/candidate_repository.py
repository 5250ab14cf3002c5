"""
Candidate repository for candidate persistence.

Handles tenant-scoped CRUD operations for the candidates table.
"""

from typing import List, Optional, Sequence
from sqlmodel import Session, select, func

from models.candidate import Candidate
from repositories.base_repository import TenantRepository


class CandidateRepository(TenantRepository[Candidate]):
    """Repository for managing candidates."""

    def __init__(self, db_session: Session, organization_id: int):
        super().__init__(db_session, Candidate, organization_id)

    def get_many(self, candidate_ids: Sequence[str]) -> List[Candidate]:
        """Fetch the candidates of this organization among `candidate_ids`."""
        if not candidate_ids:
            return []
        statement = self._select().where(Candidate.id.in_(list(candidate_ids)))
        return list(self.db.exec(statement).all())

    def get_by_email(self, email: str) -> Optional[Candidate]:
        if not email:
            return None
        statement = self._select().where(Candidate.email == email)
        return self.db.exec(statement).first()

    def get_paginated(self, page: int = 1, page_size: int = 20):
        """
        Get paginated candidates, newest first.

        Returns:
            Tuple of (candidates, total_count)
        """
        offset = (page - 1) * page_size
        statement = (
            self._select()
            .order_by(Candidate.created_at.desc())
            .offset(offset)
            .limit(page_size)
        )
        candidates = list(self.db.exec(statement).all())
        count_query = select(func.count(Candidate.id)).where(
            Candidate.organization_id == self.organization_id
        )
        total = self.db.exec(count_query).one()
        return candidates, total
