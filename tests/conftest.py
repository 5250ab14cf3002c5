"""
Shared fixtures: an in-memory SQLite database, two organizations with one
member each, a temporary blob store and an API client wired to the same
session.

Run: pytest tests -v
"""

import sys
from pathlib import Path

# Add project root to Python path (for direct invocation)
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel

import models  # noqa: F401
from api.auth import hash_api_key
from repositories.api_key_repository import APIKeyRepository
from services.company_service import CompanyService
from services.candidate_service import CandidateService
from services.invitation_service import InvitationService
from services.job_service import JobService
from services.tenancy import CurrentUser
from utils.database import build_engine, get_db
from utils.file_storage import LocalFileStorage


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def alice():
    return CurrentUser(id="user-alice", email="alice@acme.test")


@pytest.fixture
def bob():
    return CurrentUser(id="user-bob", email="bob@globex.test")


@pytest.fixture
def org_a(db, alice):
    return InvitationService(db).create_organization("Acme Recruiting", alice).id


@pytest.fixture
def org_b(db, bob):
    return InvitationService(db).create_organization("Globex Talent", bob).id


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(
        root=str(tmp_path / "blobs"),
        base_url="http://testserver/files",
        signing_key="test-signing-key",
        url_ttl_seconds=60,
    )


@pytest.fixture
def company(db, org_a):
    return CompanyService(db, org_a).create(name="Initech", industry="Software")


@pytest.fixture
def job(db, org_a, company, alice):
    return JobService(db, org_a).create(
        company_id=company.id,
        title="Backend Engineer",
        status="active",
        created_by=alice.id,
    )


@pytest.fixture
def candidate(db, org_a, alice):
    return CandidateService(db, org_a).create(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        skills=["Python", "SQL"],
        created_by=alice.id,
    )


def issue_api_key(db, user: CurrentUser, raw_key: str) -> dict:
    """Store a key for `user` and return the request headers that carry it."""
    APIKeyRepository(db).create(
        key_hash=hash_api_key(raw_key),
        name="test",
        user_id=user.id,
        email=user.email,
    )
    return {"X-API-Key": raw_key}


@pytest.fixture
def client(db, storage, monkeypatch):
    from fastapi.testclient import TestClient

    import services.document_service
    from api.main import app
    from api.routes import documents

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(documents, "get_file_storage", lambda: storage)
    monkeypatch.setattr(services.document_service, "get_file_storage", lambda: storage)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def issue_key(db):
    return lambda user, raw_key: issue_api_key(db, user, raw_key)


@pytest.fixture
def alice_headers(db, org_a, alice):
    return issue_api_key(db, alice, "alice-secret")


@pytest.fixture
def bob_headers(db, org_b, bob):
    return issue_api_key(db, bob, "bob-secret")
