"""
Unit tests for the Shortlist Manager (ShortlistService).

Run: pytest tests/unit/test_shortlist_service.py -v
"""

import pytest

from models.shortlist import ShortlistCandidate
from repositories.shortlist_repository import ShortlistCandidateRepository
from services.candidate_service import CandidateService
from services.errors import NotFoundError
from services.pipeline_service import PipelineService
from services.shortlist_service import ShortlistService


@pytest.fixture
def shortlists(db, org_a):
    return ShortlistService(db, org_a)


@pytest.fixture
def shortlist(shortlists):
    return shortlists.create("Backend - Q3", "Strong backend profiles", created_by="user-alice")


@pytest.fixture
def grace(db, org_a):
    return CandidateService(db, org_a).create(first_name="Grace", last_name="Hopper")


class TestShortlists:

    def test_create_trims_name(self, shortlists):
        assert shortlists.create("  Frontend  ").name == "Frontend"

    def test_create_requires_name(self, shortlists):
        with pytest.raises(ValueError):
            shortlists.create("   ")

    def test_update(self, shortlists, shortlist):
        updated = shortlists.update(shortlist.id, name="Backend - Q4")
        assert updated.name == "Backend - Q4"
        assert updated.description == "Strong backend profiles"

    def test_list_with_counts(self, shortlists, shortlist, candidate, grace):
        shortlists.create("Empty")
        shortlists.add_candidates(shortlist.id, [candidate.id, grace.id])

        counts = {s.name: count for s, count in shortlists.list()}
        assert counts == {"Backend - Q3": 2, "Empty": 0}

    def test_options_sorted_by_name(self, shortlists, shortlist):
        shortlists.create("analytics")
        assert [name for _, name in shortlists.list_options()] == ["analytics", "Backend - Q3"]

    def test_delete_removes_memberships(self, db, org_a, shortlists, shortlist, candidate):
        shortlists.add_candidates(shortlist.id, [candidate.id])
        shortlists.delete(shortlist.id)

        with pytest.raises(NotFoundError):
            shortlists.get(shortlist.id)
        assert ShortlistCandidateRepository(db, org_a).get_members(shortlist.id) == []

    def test_other_tenant_cannot_see(self, db, org_b, shortlist):
        with pytest.raises(NotFoundError):
            ShortlistService(db, org_b).get(shortlist.id)


class TestMembership:

    def test_add_is_idempotent(self, shortlists, shortlist, candidate, grace):
        """Adding {C1, C2} then {C2, C3} leaves three members and reports C2 as present."""
        alan = CandidateService(shortlists.db, shortlists.organization_id).create(first_name="Alan", last_name="Turing")

        first = shortlists.add_candidates(shortlist.id, [candidate.id, grace.id])
        second = shortlists.add_candidates(shortlist.id, [grace.id, alan.id])

        assert [m.candidate_id for m in first.added] == [candidate.id, grace.id]
        assert second.already_present == [grace.id]
        assert [m.candidate_id for m in second.added] == [alan.id]
        assert len(shortlists.list_members(shortlist.id)) == 3

    def test_duplicate_ids_in_one_call(self, shortlists, shortlist, candidate):
        result = shortlists.add_candidates(shortlist.id, [candidate.id, candidate.id])
        assert len(result.added) == 1
        assert result.already_present == []

    def test_empty_input(self, shortlists, shortlist):
        result = shortlists.add_candidates(shortlist.id, [])
        assert result.added == []
        assert result.already_present == []

    def test_unknown_candidate_adds_nothing(self, shortlists, shortlist, candidate):
        with pytest.raises(NotFoundError, match="missing-id"):
            shortlists.add_candidates(shortlist.id, [candidate.id, "missing-id"])
        assert shortlists.list_members(shortlist.id) == []

    def test_concurrent_insert_reported_as_present(self, db, shortlists, shortlist, candidate, monkeypatch):
        # Another request inserts the pair after this one read the member ids
        db.add(ShortlistCandidate(shortlist_id=shortlist.id, candidate_id=candidate.id))
        db.commit()
        monkeypatch.setattr(shortlists.member_repo, "member_ids", lambda shortlist_id: set())

        result = shortlists.add_candidates(shortlist.id, [candidate.id])

        assert result.added == []
        assert result.already_present == [candidate.id]
        assert len(shortlists.list_members(shortlist.id)) == 1

    def test_members_carry_candidate(self, shortlists, shortlist, candidate):
        shortlists.add_candidates(shortlist.id, [candidate.id], notes="Great fit", added_by="user-alice")
        member, member_candidate = shortlists.list_members(shortlist.id)[0]
        assert member.notes == "Great fit"
        assert member.added_by == "user-alice"
        assert member_candidate.full_name == "Ada Lovelace"

    def test_update_notes_and_remove(self, shortlists, shortlist, candidate):
        shortlists.add_candidates(shortlist.id, [candidate.id])

        assert shortlists.update_candidate_notes(shortlist.id, candidate.id, "Call Monday").notes == "Call Monday"
        shortlists.remove_candidate(shortlist.id, candidate.id)

        assert shortlists.list_members(shortlist.id) == []
        with pytest.raises(NotFoundError):
            shortlists.remove_candidate(shortlist.id, candidate.id)

    def test_shortlists_of_candidate(self, shortlists, shortlist, candidate):
        other = shortlists.create("Another")
        shortlists.add_candidates(shortlist.id, [candidate.id])
        shortlists.add_candidates(other.id, [candidate.id])

        assert [s.name for s in shortlists.list_for_candidate(candidate.id)] == ["Another", "Backend - Q3"]

    def test_deleting_candidate_removes_membership(self, db, org_a, shortlists, shortlist, candidate):
        shortlists.add_candidates(shortlist.id, [candidate.id])
        CandidateService(db, org_a).delete(candidate.id)
        assert shortlists.list_members(shortlist.id) == []


class TestBulk:

    def test_duplicate_copies_members_and_notes(self, shortlists, shortlist, candidate, grace):
        shortlists.add_candidates(shortlist.id, [candidate.id], notes="Top pick")
        shortlists.add_candidates(shortlist.id, [grace.id])

        copy = shortlists.duplicate(shortlist.id, "Backend - copy", created_by="user-alice")

        assert copy.id != shortlist.id
        assert copy.description == shortlist.description
        notes = {m.candidate_id: m.notes for m, _ in shortlists.list_members(copy.id)}
        assert notes == {candidate.id: "Top pick", grace.id: None}

    def test_associate_with_job_skips_existing(self, db, org_a, shortlists, shortlist, candidate, grace, job):
        pipeline = PipelineService(db, org_a)
        pipeline.associate(candidate.id, job.id)
        shortlists.add_candidates(shortlist.id, [candidate.id, grace.id])

        result = shortlists.associate_with_job(shortlist.id, job.id, created_by="user-alice")

        assert [a.candidate_id for a in result.created] == [grace.id]
        assert result.skipped == [candidate.id]
        assert pipeline.has_application(grace.id, job.id)
        assert pipeline.get(result.created[0].id).status == "associated"

    def test_associate_with_unknown_job(self, shortlists, shortlist):
        with pytest.raises(NotFoundError):
            shortlists.associate_with_job(shortlist.id, "missing")
