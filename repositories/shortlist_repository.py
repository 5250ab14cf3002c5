"""
Shortlist repositories.

`shortlist_candidates` has no organization column; it is scoped by joining
its shortlist.
"""

from typing import Any, List, Optional
from sqlmodel import Session, select, func

from models.candidate import Candidate
from models.shortlist import Shortlist, ShortlistCandidate
from repositories.base_repository import TenantRepository, BaseRepository


class ShortlistRepository(TenantRepository[Shortlist]):
    """Repository for shortlists."""

    def __init__(self, db_session: Session, organization_id: int):
        super().__init__(db_session, Shortlist, organization_id)

    def list_with_counts(self) -> List[tuple]:
        """
        Shortlists of the organization with member counts, most recently updated first.

        Returns:
            List of (Shortlist, candidate_count) tuples
        """
        statement = (
            select(Shortlist, func.count(ShortlistCandidate.id))
            .join(ShortlistCandidate, ShortlistCandidate.shortlist_id == Shortlist.id, isouter=True)
            .where(Shortlist.organization_id == self.organization_id)
            .group_by(Shortlist.id)
            .order_by(Shortlist.updated_at.desc())
        )
        return list(self.db.exec(statement).all())

    def get_for_candidate(self, candidate_id: str) -> List[Shortlist]:
        statement = (
            self._select()
            .join(ShortlistCandidate, ShortlistCandidate.shortlist_id == Shortlist.id)
            .where(ShortlistCandidate.candidate_id == candidate_id)
            .order_by(Shortlist.name.asc())
        )
        return list(self.db.exec(statement).all())


class ShortlistCandidateRepository(BaseRepository[ShortlistCandidate]):
    """Repository for shortlist memberships, scoped through the parent shortlist."""

    def __init__(self, db_session: Session, organization_id: int):
        super().__init__(db_session, ShortlistCandidate)
        self.organization_id = organization_id

    def _select(self):
        return (
            select(ShortlistCandidate)
            .join(Shortlist, Shortlist.id == ShortlistCandidate.shortlist_id)
            .where(Shortlist.organization_id == self.organization_id)
        )

    # exists() and delete_by_id() go through get_by_id, so they are scoped too
    def get_by_id(self, id: Any) -> Optional[ShortlistCandidate]:
        statement = self._select().where(ShortlistCandidate.id == id)
        return self.db.exec(statement).first()

    def get_all(self, limit: int = 100, offset: int = 0) -> List[ShortlistCandidate]:
        statement = (
            self._select()
            .order_by(ShortlistCandidate.added_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.db.exec(statement).all())

    def create(self, entity: ShortlistCandidate, commit: bool = True) -> ShortlistCandidate:
        self._check_owned(entity)
        return super().create(entity, commit=commit)

    def update(self, entity: ShortlistCandidate, commit: bool = True) -> ShortlistCandidate:
        self._check_owned(entity)
        return super().update(entity, commit=commit)

    def delete(self, entity: ShortlistCandidate, commit: bool = True) -> bool:
        self._check_owned(entity)
        return super().delete(entity, commit=commit)

    def _check_owned(self, entity: ShortlistCandidate) -> None:
        statement = select(Shortlist.id).where(
            Shortlist.id == entity.shortlist_id,
            Shortlist.organization_id == self.organization_id,
        )
        if self.db.exec(statement).first() is None:
            raise ValueError(
                f"Shortlist {entity.shortlist_id} is outside organization {self.organization_id}"
            )

    def get_pair(self, shortlist_id: str, candidate_id: str) -> Optional[ShortlistCandidate]:
        statement = self._select().where(
            ShortlistCandidate.shortlist_id == shortlist_id,
            ShortlistCandidate.candidate_id == candidate_id,
        )
        return self.db.exec(statement).first()

    def get_members(self, shortlist_id: str) -> List[ShortlistCandidate]:
        statement = (
            self._select()
            .where(ShortlistCandidate.shortlist_id == shortlist_id)
            .order_by(ShortlistCandidate.added_at.desc())
        )
        return list(self.db.exec(statement).all())

    def get_members_with_candidates(self, shortlist_id: str) -> List[tuple]:
        """(ShortlistCandidate, Candidate) rows of a shortlist, newest first."""
        statement = (
            select(ShortlistCandidate, Candidate)
            .join(Shortlist, Shortlist.id == ShortlistCandidate.shortlist_id)
            .join(Candidate, Candidate.id == ShortlistCandidate.candidate_id)
            .where(
                Shortlist.organization_id == self.organization_id,
                ShortlistCandidate.shortlist_id == shortlist_id,
            )
            .order_by(ShortlistCandidate.added_at.desc())
        )
        return list(self.db.exec(statement).all())

    def member_ids(self, shortlist_id: str) -> set:
        return {member.candidate_id for member in self.get_members(shortlist_id)}
