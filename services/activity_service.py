"""
Activity service - notes, calls, emails and meetings logged against a
candidate, company or job.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlmodel import Session

from models.activity import Activity
from repositories.activity_repository import ActivityRepository
from repositories.candidate_repository import CandidateRepository
from repositories.company_repository import CompanyRepository
from repositories.job_repository import JobRepository
from services.errors import NotFoundError

logger = logging.getLogger(__name__)

ACTIVITY_ENTITY_TYPES = ("candidate", "company", "job")
ACTIVITY_FIELDS = ("activity_type", "subject", "description", "scheduled_date", "status")


class ActivityService:
    def __init__(self, db_session: Session, organization_id: int):
        self.db = db_session
        self.organization_id = organization_id
        self.activity_repo = ActivityRepository(db_session, organization_id)
        self.entity_repos = {
            "candidate": CandidateRepository(db_session, organization_id),
            "company": CompanyRepository(db_session, organization_id),
            "job": JobRepository(db_session, organization_id),
        }

    def create(
        self,
        entity_type: str,
        entity_id: str,
        subject: str,
        activity_type: str = "note",
        description: Optional[str] = None,
        scheduled_date: Optional[datetime] = None,
        status: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> Activity:
        if entity_type not in ACTIVITY_ENTITY_TYPES:
            raise ValueError(f"Invalid entity type '{entity_type}'")
        if not (subject or "").strip():
            raise ValueError("Activity subject is required")
        if not self.entity_repos[entity_type].exists(entity_id):
            raise NotFoundError(f"{entity_type.capitalize()} not found")

        activity = Activity(
            entity_type=entity_type,
            entity_id=entity_id,
            activity_type=activity_type,
            subject=subject.strip(),
            description=description,
            scheduled_date=scheduled_date or datetime.utcnow(),
            status=status,
            created_by=created_by,
        )
        return self.activity_repo.create(activity)

    def list_for_entity(self, entity_type: str, entity_id: str) -> List[Activity]:
        """Newest scheduled first."""
        return self.activity_repo.get_for_entity(entity_type, entity_id)

    def get(self, activity_id: str) -> Activity:
        activity = self.activity_repo.get_by_id(activity_id)
        if activity is None:
            raise NotFoundError("Activity not found")
        return activity

    def update(self, activity_id: str, **fields) -> Activity:
        unknown = set(fields) - set(ACTIVITY_FIELDS)
        if unknown:
            raise ValueError(f"Unknown activity fields: {', '.join(sorted(unknown))}")
        if "subject" in fields and not (fields["subject"] or "").strip():
            raise ValueError("Activity subject is required")

        activity = self.get(activity_id)
        for key, value in fields.items():
            setattr(activity, key, value)
        return self.activity_repo.update(activity)

    def delete(self, activity_id: str) -> bool:
        activity = self.get(activity_id)
        self.activity_repo.delete(activity)
        return True
