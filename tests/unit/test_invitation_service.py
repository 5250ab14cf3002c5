"""
Unit tests for the Invitation Lifecycle Manager (InvitationService).

Run: pytest tests/unit/test_invitation_service.py -v
"""

from datetime import datetime, timedelta

import pytest

from models.invitation import InvitationStatus
from repositories.invitation_repository import InvitationRepository
from repositories.organization_repository import MembershipRepository
from services.errors import (
    AlreadyMemberError,
    ConflictError,
    DuplicateInvitationError,
    ExpiredResourceError,
    NotEligibleError,
    NotFoundError,
)
from services.invitation_service import InvitationService
from services.tenancy import CurrentUser, TenancyGuard

CAROL = CurrentUser(id="user-carol", email="carol@example.com")


@pytest.fixture
def invitations(db, org_a):
    return InvitationService(db, org_a)


@pytest.fixture
def invitation(invitations, alice):
    return invitations.create(CAROL.email, created_by=alice.id)


def expire(db, invitation):
    invitation.expires_at = datetime.utcnow() - timedelta(minutes=1)
    db.add(invitation)
    db.commit()


class TestOrganization:

    def test_creator_becomes_member(self, db, org_a, alice):
        assert MembershipRepository(db).get(org_a, alice.id) is not None
        assert InvitationService(db, org_a).get_organization().name == "Acme Recruiting"

    def test_name_required(self, db, alice):
        with pytest.raises(ValueError):
            InvitationService(db).create_organization("  ", alice)

    def test_list_members_includes_email(self, invitations, alice):
        members = invitations.list_members()
        assert [(m.user_id, p.email) for m, p in members] == [(alice.id, alice.email)]

    def test_remove_member(self, db, invitations, alice):
        invitations.remove_member(alice.id)
        assert invitations.list_members() == []
        with pytest.raises(NotFoundError):
            invitations.remove_member(alice.id)


class TestCreate:

    def test_issues_pending_invitation(self, invitation, alice):
        assert invitation.email == CAROL.email
        assert invitation.created_by == alice.id
        assert invitation.used_at is None
        assert invitation.expires_at > datetime.utcnow() + timedelta(days=6)
        assert invitation.status_at(datetime.utcnow()) == InvitationStatus.PENDING
        assert len(invitation.invitation_code) >= 32

    def test_codes_are_unique(self, invitations, alice):
        first = invitations.create("one@example.com", created_by=alice.id)
        second = invitations.create("two@example.com", created_by=alice.id)
        assert first.invitation_code != second.invitation_code

    def test_invalid_email(self, invitations, alice):
        with pytest.raises(ValueError):
            invitations.create("not-an-email", created_by=alice.id)

    def test_duplicate_pending_invitation(self, invitations, invitation, alice):
        with pytest.raises(DuplicateInvitationError):
            invitations.create(CAROL.email, created_by=alice.id)

    def test_member_email_cannot_be_invited(self, invitations, alice):
        with pytest.raises(AlreadyMemberError):
            invitations.create(alice.email, created_by=alice.id)

    def test_reinvite_after_expiry_purges_old_row(self, db, invitations, invitation, alice):
        expire(db, invitation)
        old_code = invitation.invitation_code

        fresh = invitations.create(CAROL.email, created_by=alice.id)

        assert fresh.invitation_code != old_code
        assert InvitationRepository.find_by_code(db, old_code) is None

    def test_list_pending_excludes_expired_and_used(self, db, invitations, invitation, alice):
        expired = invitations.create("late@example.com", created_by=alice.id)
        expire(db, expired)
        used = invitations.create("dave@example.com", created_by=alice.id)
        invitations.accept(used.invitation_code, CurrentUser(id="user-dave", email="dave@example.com"))

        assert [i.id for i in invitations.list_pending()] == [invitation.id]

    def test_invitations_are_tenant_scoped(self, db, org_b, invitation):
        other = InvitationService(db, org_b)
        assert other.list_pending() == []
        with pytest.raises(NotFoundError):
            other.cancel(invitation.id)


class TestAccept:

    def test_accept_creates_membership(self, db, org_a, invitation):
        """Carol accepts: member of the organization, invitation marked used, code spent."""
        member = InvitationService(db).accept(invitation.invitation_code, CAROL)

        assert member.organization_id == org_a
        assert member.user_id == CAROL.id
        assert TenancyGuard(db).resolve(CAROL).organization_id == org_a

        db.refresh(invitation)
        assert invitation.used_by == CAROL.id
        assert invitation.status_at(datetime.utcnow()) == InvitationStatus.ACCEPTED

        with pytest.raises(ConflictError):
            InvitationService(db).accept(invitation.invitation_code, CAROL)

    def test_unknown_code(self, db):
        with pytest.raises(NotFoundError):
            InvitationService(db).accept("no-such-code", CAROL)

    def test_expired_code(self, db, invitation):
        expire(db, invitation)
        with pytest.raises(ExpiredResourceError):
            InvitationService(db).accept(invitation.invitation_code, CAROL)
        assert MembershipRepository(db).get_for_user(CAROL.id) == []

    def test_email_must_match_exactly(self, db, invitation):
        impostor = CurrentUser(id="user-mallory", email="mallory@example.com")
        with pytest.raises(NotEligibleError):
            InvitationService(db).accept(invitation.invitation_code, impostor)

        shouting = CurrentUser(id=CAROL.id, email=CAROL.email.upper())
        with pytest.raises(NotEligibleError):
            InvitationService(db).accept(invitation.invitation_code, shouting)

    def test_already_member(self, db, invitations, alice, org_a):
        invitation = invitations.create("alice.alt@acme.test", created_by=alice.id)
        alt_alice = CurrentUser(id=alice.id, email="alice.alt@acme.test")

        with pytest.raises(AlreadyMemberError):
            InvitationService(db).accept(invitation.invitation_code, alt_alice)

        db.refresh(invitation)
        assert invitation.used_at is None

    def test_lost_claim_creates_no_membership(self, db, invitation, monkeypatch):
        # A concurrent accept stamped the invitation between the read and the claim
        monkeypatch.setattr(InvitationRepository, "claim", lambda self, *args: False)

        with pytest.raises(ConflictError):
            InvitationService(db).accept(invitation.invitation_code, CAROL)

        assert MembershipRepository(db).get_for_user(CAROL.id) == []

    def test_claim_is_single_use(self, db, org_a, invitation):
        repo = InvitationRepository(db, org_a)
        now = datetime.utcnow()

        assert repo.claim(invitation.id, "user-1", now) is True
        assert repo.claim(invitation.id, "user-2", now) is False
        db.commit()


class TestLookupAndCancel:

    def test_get_by_code(self, db, invitation):
        assert InvitationService(db).get_by_code(invitation.invitation_code).id == invitation.id

    def test_get_by_code_expired(self, db, invitation):
        expire(db, invitation)
        with pytest.raises(ExpiredResourceError):
            InvitationService(db).get_by_code(invitation.invitation_code)

    def test_cancel_pending(self, db, invitations, invitation):
        code = invitation.invitation_code
        invitations.cancel(invitation.id)
        with pytest.raises(NotFoundError):
            InvitationService(db).get_by_code(code)

    def test_cancel_used(self, db, invitations, invitation):
        InvitationService(db).accept(invitation.invitation_code, CAROL)
        with pytest.raises(ConflictError):
            invitations.cancel(invitation.id)
