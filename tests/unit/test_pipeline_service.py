"""
Unit tests for the Pipeline State Machine (PipelineService).

Run: pytest tests/unit/test_pipeline_service.py -v
"""

from datetime import date, datetime, timedelta

import pytest

from models.application import ApplicationStatus
from services.activity_service import ActivityService
from services.candidate_service import CandidateService
from services.company_service import CompanyService
from services.errors import ConflictError, NotEligibleError, NotFoundError
from services.job_service import JobService
from services.pipeline_service import PipelineService, parse_status, stage_rank

NEXT_WEEK = datetime.utcnow() + timedelta(days=7)


@pytest.fixture
def pipeline(db, org_a):
    return PipelineService(db, org_a)


@pytest.fixture
def application(pipeline, candidate, job):
    return pipeline.associate(candidate.id, job.id, created_by="user-alice")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class TestStatusHelpers:

    def test_stage_rank_follows_pipeline_order(self):
        ranks = [stage_rank(s) for s in ("associated", "submitted-to-client", "interview", "placed")]
        assert ranks == [0, 1, 2, 3]

    def test_rejected_is_off_track(self):
        assert stage_rank("rejected") == -1

    def test_parse_status_rejects_unknown(self):
        with pytest.raises(ValueError, match="Invalid application status"):
            parse_status("hired")


# ---------------------------------------------------------------------------
# associate
# ---------------------------------------------------------------------------

class TestAssociate:

    def test_new_application_starts_associated(self, application):
        assert application.status == ApplicationStatus.ASSOCIATED.value
        assert application.applied_date == date.today()
        assert application.submitted_to_client_date is None

    def test_duplicate_pair_is_a_conflict(self, pipeline, application, candidate, job):
        with pytest.raises(ConflictError):
            pipeline.associate(candidate.id, job.id)
        assert len(pipeline.list_for_job(job.id)) == 1

    def test_status_cannot_be_chosen(self, pipeline, candidate, job):
        with pytest.raises(ValueError):
            pipeline.associate(candidate.id, job.id, status="placed")
        assert pipeline.has_application(candidate.id, job.id) is False

    def test_unknown_candidate_or_job(self, pipeline, candidate, job):
        with pytest.raises(NotFoundError):
            pipeline.associate("missing", job.id)
        with pytest.raises(NotFoundError):
            pipeline.associate(candidate.id, "missing")

    def test_other_tenant_candidate(self, db, org_b, candidate, bob):
        company = CompanyService(db, org_b).create(name="Globex")
        job = JobService(db, org_b).create(company_id=company.id, title="Analyst", created_by=bob.id)
        with pytest.raises(NotFoundError):
            PipelineService(db, org_b).associate(candidate.id, job.id)

    def test_has_application(self, pipeline, application, candidate, job):
        assert pipeline.has_application(candidate.id, job.id) is True


# ---------------------------------------------------------------------------
# transition
# ---------------------------------------------------------------------------

class TestTransition:

    def test_moves_forward_and_patches_fields(self, pipeline, application):
        updated = pipeline.transition(
            application.id,
            "placed",
            placed_date=date(2024, 5, 1),
            offered_salary=120000,
        )
        assert updated.status == "placed"
        assert updated.placed_date == date(2024, 5, 1)
        assert updated.offered_salary == 120000

    def test_dates_are_not_stamped_implicitly(self, pipeline, application):
        updated = pipeline.transition(application.id, "submitted-to-client")
        assert updated.status == "submitted-to-client"
        assert updated.submitted_to_client_date is None

    def test_leaving_terminal_status_is_allowed_with_warning(self, pipeline, application, caplog):
        pipeline.transition(application.id, "rejected")
        updated = pipeline.transition(application.id, "associated")

        assert updated.status == "associated"
        assert "leaves terminal status rejected" in caplog.text

    def test_backwards_move_is_logged(self, pipeline, application, caplog):
        pipeline.transition(application.id, "interview")
        pipeline.transition(application.id, "submitted-to-client")
        assert "moves backwards" in caplog.text

    def test_unknown_status(self, pipeline, application):
        with pytest.raises(ValueError):
            pipeline.transition(application.id, "offer")

    def test_unknown_field(self, pipeline, application):
        with pytest.raises(ValueError, match="Unknown application fields"):
            pipeline.transition(application.id, "interview", candidate_id="other")

    def test_missing_application(self, pipeline):
        with pytest.raises(NotFoundError):
            pipeline.transition("missing", "interview")

    def test_mark_submitted_sets_status_and_gate(self, pipeline, application):
        updated = pipeline.mark_submitted_to_client(application.id, when=date(2024, 3, 1))
        assert updated.status == "submitted-to-client"
        assert updated.submitted_to_client_date == date(2024, 3, 1)


# ---------------------------------------------------------------------------
# Eligibility and interviews
# ---------------------------------------------------------------------------

class TestInterviewGate:

    def test_scheduling_before_submission_is_refused(self, pipeline, application):
        """Associate, try to schedule: refused; submit to client, schedule: accepted."""
        with pytest.raises(NotEligibleError):
            pipeline.schedule_interview(application.id, NEXT_WEEK)
        assert pipeline.list_interviews(application_id=application.id) == []

        pipeline.mark_submitted_to_client(application.id)
        interview = pipeline.schedule_interview(application.id, NEXT_WEEK, interviewer_name="Dana")

        assert interview.status == "scheduled"
        assert interview.application_id == application.id
        assert pipeline.list_interviews(application_id=application.id)[0].id == interview.id

    def test_gate_is_the_date_not_the_status(self, pipeline, application):
        pipeline.transition(application.id, "interview")
        with pytest.raises(NotEligibleError):
            pipeline.schedule_interview(application.id, NEXT_WEEK)

        pipeline.transition(application.id, "interview", submitted_to_client_date=date.today())
        assert pipeline.schedule_interview(application.id, NEXT_WEEK).status == "scheduled"

    def test_eligible_applications(self, db, org_a, pipeline, application, candidate, job):
        other = CandidateService(db, org_a).create(first_name="Alan", last_name="Turing")
        pipeline.associate(other.id, job.id)
        pipeline.mark_submitted_to_client(application.id)

        eligible = pipeline.get_eligible_applications()
        assert [a.id for a in eligible] == [application.id]
        assert pipeline.get_eligible_applications(candidate_id=other.id) == []
        assert [a.id for a in pipeline.get_eligible_applications(job_id=job.id)] == [application.id]

    def test_invalid_duration(self, pipeline, application):
        pipeline.mark_submitted_to_client(application.id)
        with pytest.raises(ValueError):
            pipeline.schedule_interview(application.id, NEXT_WEEK, duration_minutes=0)

    def test_scheduling_records_candidate_activity(self, db, org_a, pipeline, application, candidate, job):
        pipeline.mark_submitted_to_client(application.id)
        pipeline.schedule_interview(application.id, NEXT_WEEK, created_by="user-alice")

        activities = ActivityService(db, org_a).list_for_entity("candidate", candidate.id)
        assert [a.subject for a in activities] == [f"Interview Scheduled - {job.title}"]
        assert activities[0].activity_type == "interview"


class TestInterviewOutcome:

    @pytest.fixture
    def interview(self, pipeline, application):
        pipeline.mark_submitted_to_client(application.id)
        return pipeline.schedule_interview(application.id, NEXT_WEEK)

    def test_complete_records_feedback(self, pipeline, interview, application):
        completed = pipeline.complete_interview(interview.id, feedback="Strong system design", rating=4)

        assert completed.status == "completed"
        assert completed.rating == 4
        # application status is not touched
        assert pipeline.get(application.id).status == "submitted-to-client"

    def test_rating_bounds(self, pipeline, interview):
        with pytest.raises(ValueError):
            pipeline.complete_interview(interview.id, rating=6)
        with pytest.raises(ValueError):
            pipeline.complete_interview(interview.id, rating=0)

    def test_cancelled_interview_cannot_be_completed(self, pipeline, interview):
        pipeline.cancel_interview(interview.id)
        with pytest.raises(NotEligibleError):
            pipeline.complete_interview(interview.id)

    def test_completed_interview_cannot_be_cancelled(self, pipeline, interview):
        pipeline.complete_interview(interview.id)
        with pytest.raises(NotEligibleError):
            pipeline.cancel_interview(interview.id)

    def test_completed_interview_cannot_be_completed_again(self, pipeline, interview):
        pipeline.complete_interview(interview.id, feedback="Strong", rating=4)
        with pytest.raises(NotEligibleError):
            pipeline.complete_interview(interview.id, feedback="Overwritten", rating=1)

        closed = pipeline.get_interview(interview.id)
        assert closed.feedback == "Strong"
        assert closed.rating == 4

    def test_cancelled_interview_cannot_be_cancelled_again(self, pipeline, interview):
        pipeline.cancel_interview(interview.id)
        with pytest.raises(NotEligibleError):
            pipeline.cancel_interview(interview.id)

    def test_list_by_status(self, pipeline, interview):
        pipeline.cancel_interview(interview.id)
        assert pipeline.list_interviews(status="scheduled") == []
        assert [i.id for i in pipeline.list_interviews(status="cancelled")] == [interview.id]

    def test_company_contacts_for_job(self, db, org_a, pipeline, job, company):
        CompanyService(db, org_a).create_contact(company.id, name="Dana", is_primary=True)
        contacts = pipeline.get_company_contacts_for_job(job.id)
        assert [c.name for c in contacts] == ["Dana"]


# ---------------------------------------------------------------------------
# pipeline_stage
# ---------------------------------------------------------------------------

class TestPipelineStage:

    def test_no_applications(self, pipeline, candidate):
        assert pipeline.pipeline_stage(candidate.id) is None

    def test_only_rejected(self, pipeline, application, candidate):
        pipeline.transition(application.id, "rejected")
        assert pipeline.pipeline_stage(candidate.id) is None

    def test_furthest_non_rejected_stage(self, db, org_a, pipeline, application, candidate, company):
        jobs = JobService(db, org_a)
        second = pipeline.associate(candidate.id, jobs.create(company_id=company.id, title="Data Engineer").id)
        third = pipeline.associate(candidate.id, jobs.create(company_id=company.id, title="SRE").id)

        pipeline.transition(application.id, "submitted-to-client")
        pipeline.transition(second.id, "interview")
        pipeline.transition(third.id, "rejected")

        assert pipeline.pipeline_stage(candidate.id) == ApplicationStatus.INTERVIEW
