"""
Shortlist Manager.

Named candidate sets with duplicate-safe bulk membership changes. Each new
membership is inserted inside its own savepoint so a pair inserted by a
concurrent request turns into an "already present" result instead of failing
the whole batch.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from models.application import Application, ApplicationStatus
from models.shortlist import Shortlist, ShortlistCandidate
from repositories.application_repository import ApplicationRepository
from repositories.candidate_repository import CandidateRepository
from repositories.job_repository import JobRepository
from repositories.shortlist_repository import ShortlistRepository, ShortlistCandidateRepository
from services.errors import NotFoundError
from utils.database import atomic

logger = logging.getLogger(__name__)


@dataclass
class AddCandidatesResult:
    added: List[ShortlistCandidate] = field(default_factory=list)
    already_present: List[str] = field(default_factory=list)


@dataclass
class BulkAssociationResult:
    created: List[Application] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


class ShortlistService:
    """Shortlists and their memberships for one organization."""

    def __init__(self, db_session: Session, organization_id: int):
        self.db = db_session
        self.organization_id = organization_id
        self.shortlist_repo = ShortlistRepository(db_session, organization_id)
        self.member_repo = ShortlistCandidateRepository(db_session, organization_id)
        self.candidate_repo = CandidateRepository(db_session, organization_id)
        self.application_repo = ApplicationRepository(db_session, organization_id)
        self.job_repo = JobRepository(db_session, organization_id)

    # ============ SHORTLISTS ============

    def create(self, name: str, description: Optional[str] = None, created_by: Optional[str] = None) -> Shortlist:
        name = self._clean_name(name)
        shortlist = self.shortlist_repo.create(
            Shortlist(name=name, description=description, created_by=created_by)
        )
        logger.info(f"Created shortlist {shortlist.id} '{name}'")
        return shortlist

    def update(
        self,
        shortlist_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Shortlist:
        shortlist = self.get(shortlist_id)
        if name is not None:
            shortlist.name = self._clean_name(name)
        if description is not None:
            shortlist.description = description
        shortlist.updated_at = datetime.utcnow()
        return self.shortlist_repo.update(shortlist)

    def delete(self, shortlist_id: str) -> bool:
        """Delete a shortlist; its memberships go with it."""
        shortlist = self.get(shortlist_id)
        self.shortlist_repo.delete(shortlist)
        logger.info(f"Deleted shortlist {shortlist_id}")
        return True

    def get(self, shortlist_id: str) -> Shortlist:
        shortlist = self.shortlist_repo.get_by_id(shortlist_id)
        if shortlist is None:
            raise NotFoundError("Shortlist not found")
        return shortlist

    def list(self) -> List[tuple]:
        """(Shortlist, candidate_count) tuples, most recently updated first."""
        return self.shortlist_repo.list_with_counts()

    def list_options(self) -> List[tuple]:
        """(id, name) pairs sorted by name, for pickers."""
        shortlists = sorted(self.shortlist_repo.get_all(limit=1000), key=lambda s: s.name.lower())
        return [(shortlist.id, shortlist.name) for shortlist in shortlists]

    def list_for_candidate(self, candidate_id: str) -> List[Shortlist]:
        return self.shortlist_repo.get_for_candidate(candidate_id)

    # ============ MEMBERSHIP ============

    def list_members(self, shortlist_id: str) -> List[tuple]:
        """(ShortlistCandidate, Candidate) rows, most recently added first."""
        self.get(shortlist_id)
        return self.member_repo.get_members_with_candidates(shortlist_id)

    def add_candidates(
        self,
        shortlist_id: str,
        candidate_ids: Sequence[str],
        notes: Optional[str] = None,
        added_by: Optional[str] = None,
    ) -> AddCandidatesResult:
        """
        Add candidates to a shortlist. Safe to repeat.

        Returns:
            AddCandidatesResult listing new memberships and ids already present

        Raises:
            NotFoundError: Shortlist or any candidate outside this organization
        """
        unique_ids = list(dict.fromkeys(candidate_ids))
        result = AddCandidatesResult()
        if not unique_ids:
            return result

        with atomic(self.db):
            shortlist = self.get(shortlist_id)
            found = {candidate.id for candidate in self.candidate_repo.get_many(unique_ids)}
            missing = [candidate_id for candidate_id in unique_ids if candidate_id not in found]
            if missing:
                raise NotFoundError(f"Candidates not found: {', '.join(missing)}")

            existing = self.member_repo.member_ids(shortlist_id)
            for candidate_id in unique_ids:
                if candidate_id in existing:
                    result.already_present.append(candidate_id)
                    continue
                member = ShortlistCandidate(
                    shortlist_id=shortlist_id,
                    candidate_id=candidate_id,
                    notes=notes,
                    added_by=added_by,
                )
                try:
                    with self.db.begin_nested():
                        self.member_repo.create(member, commit=False)
                except IntegrityError:
                    logger.info(f"Candidate {candidate_id} was added to shortlist {shortlist_id} concurrently")
                    result.already_present.append(candidate_id)
                    continue
                result.added.append(member)

            if result.added:
                shortlist.updated_at = datetime.utcnow()
                self.shortlist_repo.update(shortlist, commit=False)

        logger.info(
            f"Shortlist {shortlist_id}: added {len(result.added)}, "
            f"already present {len(result.already_present)}"
        )
        return result

    def remove_candidate(self, shortlist_id: str, candidate_id: str) -> bool:
        member = self.member_repo.get_pair(shortlist_id, candidate_id)
        if member is None:
            raise NotFoundError("Candidate is not on this shortlist")
        self.member_repo.delete(member)
        return True

    def update_candidate_notes(self, shortlist_id: str, candidate_id: str, notes: Optional[str]) -> ShortlistCandidate:
        member = self.member_repo.get_pair(shortlist_id, candidate_id)
        if member is None:
            raise NotFoundError("Candidate is not on this shortlist")
        member.notes = notes
        return self.member_repo.update(member)

    # ============ BULK ============

    def duplicate(self, shortlist_id: str, new_name: str, created_by: Optional[str] = None) -> Shortlist:
        """
        Copy a shortlist and all its memberships under a new name.

        Member notes are kept; added_by/added_at are those of the copy.
        """
        new_name = self._clean_name(new_name)
        with atomic(self.db):
            source = self.get(shortlist_id)
            copy = Shortlist(name=new_name, description=source.description, created_by=created_by)
            self.shortlist_repo.create(copy, commit=False)
            members = self.member_repo.get_members(shortlist_id)
            for member in members:
                self.member_repo.create(
                    ShortlistCandidate(
                        shortlist_id=copy.id,
                        candidate_id=member.candidate_id,
                        notes=member.notes,
                        added_by=created_by,
                    ),
                    commit=False,
                )

        self.db.refresh(copy)
        logger.info(f"Duplicated shortlist {shortlist_id} into {copy.id} ({len(members)} candidates)")
        return copy

    def associate_with_job(
        self,
        shortlist_id: str,
        job_id: str,
        created_by: Optional[str] = None,
    ) -> BulkAssociationResult:
        """
        Create an application for every member not yet associated with the job.

        Members that already have one are reported in `skipped`.
        """
        result = BulkAssociationResult()
        with atomic(self.db):
            self.get(shortlist_id)
            if not self.job_repo.exists(job_id):
                raise NotFoundError("Job not found")

            associated = self.application_repo.candidate_ids_for_job(job_id)
            for member in self.member_repo.get_members(shortlist_id):
                if member.candidate_id in associated:
                    result.skipped.append(member.candidate_id)
                    continue
                application = Application(
                    candidate_id=member.candidate_id,
                    job_id=job_id,
                    status=ApplicationStatus.ASSOCIATED.value,
                    applied_date=date.today(),
                    created_by=created_by,
                )
                try:
                    with self.db.begin_nested():
                        self.application_repo.create(application, commit=False)
                except IntegrityError:
                    result.skipped.append(member.candidate_id)
                    continue
                result.created.append(application)

        logger.info(
            f"Shortlist {shortlist_id} -> job {job_id}: created {len(result.created)}, "
            f"skipped {len(result.skipped)}"
        )
        return result

    @staticmethod
    def _clean_name(name: Optional[str]) -> str:
        name = (name or "").strip()
        if not name:
            raise ValueError("Shortlist name is required")
        return name
