"""
Candidate service - tenant-scoped candidate records.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlmodel import Session

from models.application import Application, ApplicationStatus
from models.candidate import Candidate
from models.document import Document, EntityType
from repositories.activity_repository import ActivityRepository
from repositories.candidate_repository import CandidateRepository
from repositories.document_repository import DocumentRepository
from services.document_service import DocumentService
from services.errors import NotFoundError
from services.pipeline_service import PipelineService
from utils.database import atomic
from utils.file_storage import FileStorage

logger = logging.getLogger(__name__)

CANDIDATE_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "current_title",
    "location",
    "skills",
    "rating",
    "status",
    "notes",
)


@dataclass
class CandidateDetail:
    candidate: Candidate
    documents: List[Document] = field(default_factory=list)
    applications: List[Application] = field(default_factory=list)
    pipeline_stage: Optional[ApplicationStatus] = None


class CandidateService:
    def __init__(self, db_session: Session, organization_id: int, storage: Optional[FileStorage] = None):
        self.db = db_session
        self.organization_id = organization_id
        self.storage = storage
        self.candidate_repo = CandidateRepository(db_session, organization_id)
        self.document_repo = DocumentRepository(db_session, organization_id)
        self.activity_repo = ActivityRepository(db_session, organization_id)

    def create(self, created_by: Optional[str] = None, **fields) -> Candidate:
        values = self._clean(fields, require_names=True)
        candidate = self.candidate_repo.create(Candidate(created_by=created_by, **values))
        logger.info(f"Created candidate {candidate.id}")
        return candidate

    def get(self, candidate_id: str) -> Candidate:
        candidate = self.candidate_repo.get_by_id(candidate_id)
        if candidate is None:
            raise NotFoundError("Candidate not found")
        return candidate

    def list(self, page: int = 1, page_size: int = 20):
        """Candidates newest first. Returns (candidates, total)."""
        if page < 1 or page_size < 1:
            raise ValueError("page and page_size must be positive")
        return self.candidate_repo.get_paginated(page=page, page_size=page_size)

    def update(self, candidate_id: str, **fields) -> Candidate:
        candidate = self.get(candidate_id)
        for key, value in self._clean(fields).items():
            setattr(candidate, key, value)
        candidate.updated_at = datetime.utcnow()
        return self.candidate_repo.update(candidate)

    def delete(self, candidate_id: str) -> bool:
        """
        Delete a candidate.

        Applications, interviews and shortlist memberships go with it through
        foreign-key cascades; documents and activities are removed here, and
        document blobs are removed after the commit.
        """
        with atomic(self.db):
            candidate = self.candidate_repo.get_by_id_for_update(candidate_id)
            if candidate is None:
                raise NotFoundError("Candidate not found")
            file_refs = self.document_repo.delete_for_entity(EntityType.CANDIDATE.value, candidate_id)
            self.activity_repo.delete_for_entity(EntityType.CANDIDATE.value, candidate_id)
            self.candidate_repo.delete(candidate, commit=False)

        if file_refs:
            DocumentService(self.db, self.organization_id, storage=self.storage).remove_blobs(file_refs)
        logger.info(f"Deleted candidate {candidate_id} ({len(file_refs)} documents)")
        return True

    def get_detail(self, candidate_id: str) -> CandidateDetail:
        """Candidate with documents, applications and current pipeline stage."""
        candidate = self.get(candidate_id)
        pipeline = PipelineService(self.db, self.organization_id)
        return CandidateDetail(
            candidate=candidate,
            documents=self.document_repo.get_for_entity(EntityType.CANDIDATE.value, candidate_id),
            applications=pipeline.list_for_candidate(candidate_id),
            pipeline_stage=pipeline.pipeline_stage(candidate_id),
        )

    @staticmethod
    def _clean(fields: dict, require_names: bool = False) -> dict:
        unknown = set(fields) - set(CANDIDATE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown candidate fields: {', '.join(sorted(unknown))}")

        values = dict(fields)
        for name in ("first_name", "last_name"):
            if name in values or require_names:
                value = (values.get(name) or "").strip()
                if not value:
                    raise ValueError(f"{name} is required")
                values[name] = value

        rating = values.get("rating")
        if rating is not None and not 0 <= rating <= 5:
            raise ValueError("Rating must be between 0 and 5")

        if "skills" in values:
            skills = values["skills"] or []
            # keep first occurrence order
            values["skills"] = list(dict.fromkeys(s.strip() for s in skills if s and s.strip()))
        return values
