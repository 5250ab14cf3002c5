"""
Unit tests for TenancyGuard and tenant-scoped repositories.

Run: pytest tests/unit/test_tenancy.py -v
"""

from datetime import datetime, timedelta

import pytest

from models.candidate import Candidate
from models.organization import OrganizationMember
from models.shortlist import ShortlistCandidate
from repositories.candidate_repository import CandidateRepository
from repositories.organization_repository import MembershipRepository
from repositories.shortlist_repository import ShortlistCandidateRepository
from services.candidate_service import CandidateService
from services.errors import NotAMemberError, NotAuthenticatedError, NotFoundError
from services.shortlist_service import ShortlistService
from services.tenancy import CurrentUser, TenancyGuard


# ---------------------------------------------------------------------------
# TenancyGuard.resolve
# ---------------------------------------------------------------------------

class TestResolve:

    def test_no_user_is_not_authenticated(self, db):
        with pytest.raises(NotAuthenticatedError):
            TenancyGuard(db).resolve(None)

    def test_blank_user_id_is_not_authenticated(self, db):
        with pytest.raises(NotAuthenticatedError):
            TenancyGuard(db).resolve(CurrentUser(id="", email="x@example.com"))

    def test_user_without_membership(self, db, org_a):
        stranger = CurrentUser(id="user-stranger", email="stranger@example.com")
        with pytest.raises(NotAMemberError):
            TenancyGuard(db).resolve(stranger)

    def test_member_resolves_to_their_organization(self, db, org_a, org_b, alice, bob):
        assert TenancyGuard(db).resolve(alice).organization_id == org_a
        assert TenancyGuard(db).resolve(bob).organization_id == org_b

    def test_context_exposes_user_id(self, db, org_a, alice):
        context = TenancyGuard(db).resolve(alice)
        assert context.user_id == alice.id

    def test_multiple_memberships_pick_earliest_joined(self, db, org_a, org_b, alice, caplog):
        # alice joined org_a at fixture time; backdate a membership in org_b
        db.add(OrganizationMember(
            organization_id=org_b,
            user_id=alice.id,
            joined_at=datetime.utcnow() - timedelta(days=30),
        ))
        db.commit()

        context = TenancyGuard(db).resolve(alice)

        assert context.organization_id == org_b
        assert "belongs to 2 organizations" in caplog.text

    def test_resolution_follows_membership_changes(self, db, org_a, alice):
        assert TenancyGuard(db).resolve(alice).organization_id == org_a

        repo = MembershipRepository(db)
        repo.delete(repo.get(org_a, alice.id))

        with pytest.raises(NotAMemberError):
            TenancyGuard(db).resolve(alice)


# ---------------------------------------------------------------------------
# Tenant isolation
# ---------------------------------------------------------------------------

class TestIsolation:

    def test_repository_requires_organization(self, db):
        with pytest.raises(ValueError):
            CandidateRepository(db, None)

    def test_other_tenant_row_looks_missing(self, db, org_b, candidate):
        with pytest.raises(NotFoundError):
            CandidateService(db, org_b).get(candidate.id)

    def test_other_tenant_cannot_update_or_delete(self, db, org_b, candidate):
        service = CandidateService(db, org_b)
        with pytest.raises(NotFoundError):
            service.update(candidate.id, first_name="Mallory")
        with pytest.raises(NotFoundError):
            service.delete(candidate.id)
        db.refresh(candidate)
        assert candidate.first_name == "Ada"

    def test_lists_only_own_rows(self, db, org_a, org_b, candidate, bob):
        CandidateService(db, org_b).create(first_name="Grace", last_name="Hopper", created_by=bob.id)

        own, total = CandidateService(db, org_a).list()
        other, other_total = CandidateService(db, org_b).list()

        assert [c.id for c in own] == [candidate.id]
        assert total == 1
        assert [c.first_name for c in other] == ["Grace"]
        assert other_total == 1

    def test_create_forces_caller_organization(self, db, org_a, org_b):
        repo = CandidateRepository(db, org_a)

        created = repo.create(Candidate(organization_id=org_b, first_name="Eve", last_name="Spoof"))

        assert created.organization_id == org_a

    def test_update_of_foreign_entity_is_refused(self, db, org_b, candidate):
        candidate.first_name = "Changed"
        with pytest.raises(ValueError):
            CandidateRepository(db, org_b).update(candidate)
        db.rollback()

    def test_foreign_candidate_cannot_join_shortlist(self, db, org_b, candidate, bob):
        service = ShortlistService(db, org_b)
        shortlist = service.create("Globex picks", created_by=bob.id)

        with pytest.raises(NotFoundError):
            service.add_candidates(shortlist.id, [candidate.id], added_by=bob.id)

        assert service.list_members(shortlist.id) == []

    def test_shortlist_memberships_are_scoped_through_their_shortlist(self, db, org_a, org_b, candidate, alice):
        shortlist = ShortlistService(db, org_a).create("Acme picks", created_by=alice.id)
        ShortlistService(db, org_a).add_candidates(shortlist.id, [candidate.id], added_by=alice.id)
        member_id = ShortlistCandidateRepository(db, org_a).get_pair(shortlist.id, candidate.id).id

        foreign = ShortlistCandidateRepository(db, org_b)

        assert foreign.get_by_id(member_id) is None
        assert foreign.exists(member_id) is False
        assert foreign.get_all() == []
        assert foreign.delete_by_id(member_id) is False
        with pytest.raises(ValueError):
            foreign.create(ShortlistCandidate(shortlist_id=shortlist.id, candidate_id=candidate.id))
        assert ShortlistCandidateRepository(db, org_a).exists(member_id) is True
