"""
Pipeline State Machine.

Applications move associated -> submitted-to-client -> interview -> placed,
with rejected reachable from anywhere. Transitions are permissive: any known
status may follow any other, so recruiters can correct mistakes. The one
hard rule is the interview gate: an interview can only be booked once the
application has a submitted_to_client_date.
"""

import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from models.activity import Activity
from models.application import Application, ApplicationStatus, PIPELINE_ORDER, TERMINAL_STATUSES
from models.company import CompanyContact
from models.document import EntityType
from models.interview import Interview, InterviewStatus
from repositories.activity_repository import ActivityRepository
from repositories.application_repository import ApplicationRepository
from repositories.candidate_repository import CandidateRepository
from repositories.company_repository import CompanyContactRepository
from repositories.interview_repository import InterviewRepository
from repositories.job_repository import JobRepository
from services.errors import ConflictError, NotEligibleError, NotFoundError
from utils.database import atomic

logger = logging.getLogger(__name__)

# Fields `transition` may patch alongside the status
TRANSITION_FIELDS = (
    "submitted_to_client_date",
    "interview_date",
    "placed_date",
    "offered_salary",
    "notes",
)


def stage_rank(status: str) -> int:
    """Position in the pipeline; -1 for rejected or unknown statuses."""
    for index, stage in enumerate(PIPELINE_ORDER):
        if stage.value == status:
            return index
    return -1


def parse_status(status) -> ApplicationStatus:
    try:
        return ApplicationStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in ApplicationStatus)
        raise ValueError(f"Invalid application status '{status}'. Allowed: {allowed}")


class PipelineService:
    """Applications and interviews of one organization."""

    def __init__(self, db_session: Session, organization_id: int):
        self.db = db_session
        self.organization_id = organization_id
        self.application_repo = ApplicationRepository(db_session, organization_id)
        self.interview_repo = InterviewRepository(db_session, organization_id)
        self.candidate_repo = CandidateRepository(db_session, organization_id)
        self.job_repo = JobRepository(db_session, organization_id)
        self.contact_repo = CompanyContactRepository(db_session, organization_id)
        self.activity_repo = ActivityRepository(db_session, organization_id)

    # ============ APPLICATIONS ============

    def associate(
        self,
        candidate_id: str,
        job_id: str,
        applied_date: Optional[date] = None,
        notes: Optional[str] = None,
        status: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> Application:
        """
        Associate a candidate with a job.

        Every application starts at `associated`; later stages are reached
        through `transition`.

        Raises:
            ValueError: A status was supplied
            NotFoundError: Candidate or job not in this organization
            ConflictError: The pair already has an application
        """
        if status is not None:
            raise ValueError("New applications always start as 'associated'; use transition() to change status")

        if not self.candidate_repo.exists(candidate_id):
            raise NotFoundError("Candidate not found")
        if not self.job_repo.exists(job_id):
            raise NotFoundError("Job not found")
        if self.application_repo.exists_for_pair(candidate_id, job_id):
            raise ConflictError("Candidate is already associated with this job")

        application = Application(
            candidate_id=candidate_id,
            job_id=job_id,
            status=ApplicationStatus.ASSOCIATED.value,
            applied_date=applied_date or date.today(),
            notes=notes,
            created_by=created_by,
        )
        try:
            with atomic(self.db):
                self.application_repo.create(application, commit=False)
        except IntegrityError as exc:
            raise ConflictError("Candidate is already associated with this job") from exc

        self.db.refresh(application)
        logger.info(f"Associated candidate {candidate_id} with job {job_id} ({application.id})")
        return application

    def has_application(self, candidate_id: str, job_id: str) -> bool:
        return self.application_repo.exists_for_pair(candidate_id, job_id)

    def get(self, application_id: str) -> Application:
        application = self.application_repo.get_by_id(application_id)
        if application is None:
            raise NotFoundError("Application not found")
        return application

    def list_for_candidate(self, candidate_id: str) -> List[Application]:
        return self.application_repo.get_for_candidate(candidate_id)

    def list_for_job(self, job_id: str) -> List[Application]:
        return self.application_repo.get_for_job(job_id)

    def transition(self, application_id: str, status: str, **fields) -> Application:
        """
        Move an application to `status`, optionally patching dates, salary and notes.

        Any known status is accepted from any state. Leaving placed/rejected
        or moving backwards is logged at WARNING but allowed. Dates are never
        stamped implicitly; use `mark_submitted_to_client` for the gate date.

        Raises:
            ValueError: Unknown status or field
            NotFoundError: Application not in this organization
        """
        new_status = parse_status(status)
        unknown = set(fields) - set(TRANSITION_FIELDS)
        if unknown:
            raise ValueError(f"Unknown application fields: {', '.join(sorted(unknown))}")

        with atomic(self.db):
            application = self.application_repo.get_by_id_for_update(application_id)
            if application is None:
                raise NotFoundError("Application not found")

            old_status = application.status
            if old_status in {s.value for s in TERMINAL_STATUSES} and old_status != new_status.value:
                logger.warning(
                    f"Application {application_id} leaves terminal status {old_status} for {new_status.value}"
                )
            elif (
                new_status != ApplicationStatus.REJECTED
                and stage_rank(new_status.value) < stage_rank(old_status)
            ):
                logger.warning(
                    f"Application {application_id} moves backwards from {old_status} to {new_status.value}"
                )

            application.status = new_status.value
            for key, value in fields.items():
                setattr(application, key, value)
            application.updated_at = datetime.utcnow()
            self.application_repo.update(application, commit=False)

        self.db.refresh(application)
        logger.info(f"Application {application_id}: {old_status} -> {new_status.value}")
        return application

    def mark_submitted_to_client(self, application_id: str, when: Optional[date] = None) -> Application:
        """Set the submitted-to-client status and gate date together."""
        return self.transition(
            application_id,
            ApplicationStatus.SUBMITTED_TO_CLIENT.value,
            submitted_to_client_date=when or date.today(),
        )

    def get_eligible_applications(
        self,
        candidate_id: Optional[str] = None,
        job_id: Optional[str] = None,
    ) -> List[Application]:
        """Applications that may have interviews booked, newest first."""
        return self.application_repo.get_eligible(candidate_id=candidate_id, job_id=job_id)

    def pipeline_stage(self, candidate_id: str) -> Optional[ApplicationStatus]:
        """Furthest non-rejected stage across the candidate's applications."""
        best = None
        for application in self.application_repo.get_for_candidate(candidate_id):
            rank = stage_rank(application.status)
            if rank < 0:
                continue
            if best is None or rank > best:
                best = rank
        return PIPELINE_ORDER[best] if best is not None else None

    # ============ INTERVIEWS ============

    def schedule_interview(
        self,
        application_id: str,
        scheduled_date: datetime,
        interview_type: str = "virtual",
        duration_minutes: int = 60,
        location: Optional[str] = None,
        interviewer_name: Optional[str] = None,
        notes: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> Interview:
        """
        Book an interview for an application that has been submitted to the client.

        The gate is re-checked with the application row locked, so an
        application reverted concurrently cannot slip through.

        Raises:
            NotFoundError: Application not in this organization
            NotEligibleError: Application not yet submitted to the client
        """
        if duration_minutes is not None and duration_minutes <= 0:
            raise ValueError("duration_minutes must be positive")

        with atomic(self.db):
            application = self.application_repo.get_by_id_for_update(application_id)
            if application is None:
                raise NotFoundError("Application not found")
            if application.submitted_to_client_date is None:
                raise NotEligibleError(
                    "Candidate must be submitted to the client before an interview can be scheduled"
                )

            interview = Interview(
                organization_id=self.organization_id,
                application_id=application.id,
                interview_type=interview_type,
                scheduled_date=scheduled_date,
                duration_minutes=duration_minutes,
                location=location,
                interviewer_name=interviewer_name,
                notes=notes,
                status=InterviewStatus.SCHEDULED.value,
                created_by=created_by,
            )
            self.interview_repo.create(interview, commit=False)

            job = self.job_repo.get_by_id(application.job_id)
            self._record_interview_activity(
                application,
                subject=f"Interview Scheduled - {job.title if job else 'Job'}",
                description=f"{interview_type} interview scheduled for {scheduled_date:%Y-%m-%d}",
                scheduled_date=scheduled_date,
                status=InterviewStatus.SCHEDULED.value,
                created_by=created_by,
            )

        self.db.refresh(interview)
        logger.info(f"Scheduled interview {interview.id} for application {application_id}")
        return interview

    def complete_interview(
        self,
        interview_id: str,
        feedback: Optional[str] = None,
        rating: Optional[int] = None,
    ) -> Interview:
        """
        Record the outcome of an interview. The application is left untouched.

        Raises:
            ValueError: Rating outside 1..5
            NotFoundError: Interview not in this organization
            NotEligibleError: Interview is no longer scheduled
        """
        if rating is not None and not 1 <= rating <= 5:
            raise ValueError("Rating must be between 1 and 5")
        return self._close_interview(
            interview_id,
            InterviewStatus.COMPLETED,
            feedback=feedback,
            rating=rating,
        )

    def cancel_interview(self, interview_id: str) -> Interview:
        return self._close_interview(interview_id, InterviewStatus.CANCELLED)

    def get_interview(self, interview_id: str) -> Interview:
        interview = self.interview_repo.get_by_id(interview_id)
        if interview is None:
            raise NotFoundError("Interview not found")
        return interview

    def list_interviews(
        self,
        application_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Interview]:
        return self.interview_repo.search(application_id=application_id, status=status)

    def get_company_contacts_for_job(self, job_id: str) -> List[CompanyContact]:
        """Contacts of the job's company, for picking an interviewer."""
        job = self.job_repo.get_by_id(job_id)
        if job is None:
            raise NotFoundError("Job not found")
        return self.contact_repo.get_by_company(job.company_id)

    # ============ HELPERS ============

    def _close_interview(
        self,
        interview_id: str,
        new_status: InterviewStatus,
        **fields,
    ) -> Interview:
        with atomic(self.db):
            interview = self.interview_repo.get_by_id_for_update(interview_id)
            if interview is None:
                raise NotFoundError("Interview not found")
            # Only a scheduled interview can be closed, and only once
            if interview.status != InterviewStatus.SCHEDULED.value:
                raise NotEligibleError(f"A {interview.status} interview cannot be marked {new_status.value}")

            interview.status = new_status.value
            for key, value in fields.items():
                setattr(interview, key, value)
            interview.updated_at = datetime.utcnow()
            self.interview_repo.update(interview, commit=False)

            application = self.application_repo.get_by_id(interview.application_id)
            job = self.job_repo.get_by_id(application.job_id)
            self._record_interview_activity(
                application,
                subject=f"Interview {new_status.value} - {job.title if job else 'Job'}",
                description=f"Interview {new_status.value} on {interview.scheduled_date:%Y-%m-%d}",
                scheduled_date=datetime.utcnow(),
                status=new_status.value,
                created_by=interview.created_by,
            )

        self.db.refresh(interview)
        logger.info(f"Interview {interview_id} marked {new_status.value}")
        return interview

    def _record_interview_activity(
        self,
        application: Application,
        subject: str,
        description: str,
        scheduled_date: datetime,
        status: str,
        created_by: Optional[str],
    ) -> Activity:
        activity = Activity(
            entity_type=EntityType.CANDIDATE.value,
            entity_id=application.candidate_id,
            activity_type="interview",
            subject=subject,
            description=description,
            scheduled_date=scheduled_date,
            status=status,
            created_by=created_by,
        )
        return self.activity_repo.create(activity, commit=False)
