"""
Job service - openings at client companies.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlmodel import Session

from models.job import Job, JobStatus
from repositories.company_repository import CompanyRepository
from repositories.job_repository import JobRepository
from services.errors import NotFoundError

logger = logging.getLogger(__name__)

JOB_FIELDS = (
    "company_id",
    "title",
    "description",
    "location",
    "employment_type",
    "priority",
    "salary_min",
    "salary_max",
    "status",
)
PRIORITIES = ("low", "medium", "high")


class JobService:
    def __init__(self, db_session: Session, organization_id: int):
        self.db = db_session
        self.organization_id = organization_id
        self.job_repo = JobRepository(db_session, organization_id)
        self.company_repo = CompanyRepository(db_session, organization_id)

    def create(self, company_id: str, title: str, created_by: Optional[str] = None, **fields) -> Job:
        """
        Create a job for a company of this organization.

        Raises:
            ValueError: Invalid field values
            NotFoundError: Company not in this organization
        """
        values = self._clean(dict(fields, company_id=company_id, title=title))
        job = Job(created_by=created_by, **values)
        self._check_salary(job)
        if not self.company_repo.exists(company_id):
            raise NotFoundError("Company not found")

        job = self.job_repo.create(job)
        logger.info(f"Created job {job.id} '{job.title}' for company {company_id}")
        return job

    def get(self, job_id: str) -> Job:
        job = self.job_repo.get_by_id(job_id)
        if job is None:
            raise NotFoundError("Job not found")
        return job

    def list(self, status: Optional[str] = None, company_id: Optional[str] = None) -> List[Job]:
        if status is not None:
            self._check_status(status)
        return self.job_repo.search(status=status, company_id=company_id)

    def list_active(self) -> List[Job]:
        return self.job_repo.get_active()

    def update(self, job_id: str, **fields) -> Job:
        values = self._clean(fields)
        job = self.get(job_id)
        if "company_id" in values and not self.company_repo.exists(values["company_id"]):
            raise NotFoundError("Company not found")
        for key, value in values.items():
            setattr(job, key, value)
        self._check_salary(job)
        job.updated_at = datetime.utcnow()
        return self.job_repo.update(job)

    def delete(self, job_id: str) -> bool:
        job = self.get(job_id)
        self.job_repo.delete(job)
        logger.info(f"Deleted job {job_id}")
        return True

    def _clean(self, fields: dict) -> dict:
        unknown = set(fields) - set(JOB_FIELDS)
        if unknown:
            raise ValueError(f"Unknown job fields: {', '.join(sorted(unknown))}")
        if "title" in fields and not (fields["title"] or "").strip():
            raise ValueError("Job title is required")
        if fields.get("status") is not None:
            self._check_status(fields["status"])
        if fields.get("priority") is not None and fields["priority"] not in PRIORITIES:
            raise ValueError(f"Invalid priority '{fields['priority']}'. Allowed: {', '.join(PRIORITIES)}")
        return fields

    @staticmethod
    def _check_status(status: str) -> None:
        allowed = [s.value for s in JobStatus]
        if status not in allowed:
            raise ValueError(f"Invalid job status '{status}'. Allowed: {', '.join(allowed)}")

    @staticmethod
    def _check_salary(job: Job) -> None:
        if job.salary_min is not None and job.salary_max is not None and job.salary_min > job.salary_max:
            raise ValueError("salary_min cannot exceed salary_max")
