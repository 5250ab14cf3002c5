"""
API tests through FastAPI's TestClient.

Exercises authentication, tenant scoping, error mapping and the main flows
end to end against the in-memory database.

Run: pytest tests/integration/test_api.py -v
"""

from services.tenancy import CurrentUser

CAROL = CurrentUser(id="user-carol", email="carol@example.com")


def create_candidate(client, headers, **overrides):
    payload = {"first_name": "Ada", "last_name": "Lovelace", "skills": ["Python"]}
    payload.update(overrides)
    response = client.post("/candidates/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def create_job(client, headers):
    company = client.post("/companies/", json={"name": "Initech"}, headers=headers).json()
    response = client.post(
        "/jobs/",
        json={"company_id": company["id"], "title": "Backend Engineer", "status": "active"},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


# ---------------------------------------------------------------------------
# Health and authentication
# ---------------------------------------------------------------------------

class TestAuth:

    def test_health_is_public(self, client):
        assert client.get("/ping").json() == {"message": "pong"}
        assert client.get("/health").json()["status"] == "healthy"

    def test_missing_key(self, client):
        response = client.get("/candidates/")
        assert response.status_code == 401
        assert response.json()["error"] == "NotAuthenticatedError"
        assert response.headers["WWW-Authenticate"] == "ApiKey"

    def test_unknown_key(self, client):
        response = client.get("/candidates/", headers={"X-API-Key": "nope"})
        assert response.status_code == 401

    def test_key_without_membership(self, client, issue_key):
        headers = issue_key(CAROL, "carol-secret")
        response = client.get("/candidates/", headers=headers)
        assert response.status_code == 403
        assert response.json()["error"] == "NotAMemberError"


# ---------------------------------------------------------------------------
# Tenant scoping
# ---------------------------------------------------------------------------

class TestTenantScoping:

    def test_other_tenant_gets_404(self, client, alice_headers, bob_headers):
        candidate = create_candidate(client, alice_headers)

        assert client.get(f"/candidates/{candidate['id']}", headers=bob_headers).status_code == 404
        assert client.delete(f"/candidates/{candidate['id']}", headers=bob_headers).status_code == 404
        assert client.get("/candidates/", headers=bob_headers).json()["total"] == 0

    def test_candidate_crud(self, client, alice_headers):
        candidate = create_candidate(client, alice_headers, skills=["Python", "SQL", "Python"])
        assert candidate["skills"] == ["Python", "SQL"]

        updated = client.patch(
            f"/candidates/{candidate['id']}", json={"rating": 5}, headers=alice_headers
        ).json()
        assert updated["rating"] == 5
        assert updated["first_name"] == "Ada"

        detail = client.get(f"/candidates/{candidate['id']}", headers=alice_headers).json()
        assert detail["pipeline_stage"] is None
        assert detail["documents"] == []

        assert client.delete(f"/candidates/{candidate['id']}", headers=alice_headers).json()["deleted"] is True
        assert client.get(f"/candidates/{candidate['id']}", headers=alice_headers).status_code == 404

    def test_request_validation(self, client, alice_headers):
        response = client.post("/candidates/", json={"first_name": "Ada", "last_name": "L", "rating": 9}, headers=alice_headers)
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

class TestPipelineFlow:

    def test_interview_gate(self, client, alice_headers):
        candidate = create_candidate(client, alice_headers)
        job = create_job(client, alice_headers)

        application = client.post(
            "/applications/",
            json={"candidate_id": candidate["id"], "job_id": job["id"]},
            headers=alice_headers,
        ).json()
        assert application["status"] == "associated"

        duplicate = client.post(
            "/applications/",
            json={"candidate_id": candidate["id"], "job_id": job["id"]},
            headers=alice_headers,
        )
        assert duplicate.status_code == 409

        interview = {"application_id": application["id"], "scheduled_date": "2030-01-15T10:00:00"}
        refused = client.post("/interviews/", json=interview, headers=alice_headers)
        assert refused.status_code == 422
        assert refused.json()["error"] == "NotEligibleError"

        submitted = client.post(
            f"/applications/{application['id']}/submit-to-client",
            json={"when": "2029-12-20"},
            headers=alice_headers,
        ).json()
        assert submitted["status"] == "submitted-to-client"
        assert submitted["submitted_to_client_date"] == "2029-12-20"

        booked = client.post("/interviews/", json=interview, headers=alice_headers)
        assert booked.status_code == 201, booked.text
        assert booked.json()["status"] == "scheduled"

        stage = client.get(f"/candidates/{candidate['id']}/pipeline-stage", headers=alice_headers).json()
        assert stage["stage"] == "submitted-to-client"

        eligible = client.get("/applications/eligible", headers=alice_headers).json()
        assert [a["id"] for a in eligible] == [application["id"]]

    def test_transition(self, client, alice_headers):
        candidate = create_candidate(client, alice_headers)
        job = create_job(client, alice_headers)
        application = client.post(
            "/applications/",
            json={"candidate_id": candidate["id"], "job_id": job["id"]},
            headers=alice_headers,
        ).json()

        placed = client.post(
            f"/applications/{application['id']}/transition",
            json={"status": "placed", "placed_date": "2030-02-01", "offered_salary": 150000},
            headers=alice_headers,
        ).json()
        assert placed["status"] == "placed"
        assert placed["offered_salary"] == 150000

        bad = client.post(
            f"/applications/{application['id']}/transition",
            json={"status": "hired"},
            headers=alice_headers,
        )
        assert bad.status_code == 400
        assert bad.json()["error"] == "ValueError"

    def test_list_requires_one_filter(self, client, alice_headers):
        assert client.get("/applications/", headers=alice_headers).status_code == 400


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

class TestDocuments:

    def upload(self, client, headers, candidate_id, name):
        return client.post(
            "/documents/",
            data={"entity_type": "candidate", "entity_id": candidate_id, "document_type": "resume"},
            files={"file": (name, b"%PDF-1.4 resume", "application/pdf")},
            headers=headers,
        )

    def test_upload_switch_and_download(self, client, alice_headers):
        candidate = create_candidate(client, alice_headers)

        first = self.upload(client, alice_headers, candidate["id"], "r1.pdf")
        assert first.status_code == 201, first.text
        assert first.json()["is_first"] is True
        assert first.json()["document"]["is_primary"] is True

        second = self.upload(client, alice_headers, candidate["id"], "r2.pdf").json()
        assert second["should_prompt_primary"] is True

        switched = client.post(
            f"/documents/{second['document']['id']}/primary",
            json={"entity_id": candidate["id"], "document_type": "resume"},
            headers=alice_headers,
        )
        assert switched.json()["is_primary"] is True

        documents = client.get(
            "/documents/",
            params={"entity_type": "candidate", "entity_id": candidate["id"]},
            headers=alice_headers,
        ).json()
        assert [d["file_name"] for d in documents if d["is_primary"]] == ["r2.pdf"]

        link = client.get(f"/documents/{second['document']['id']}/url", headers=alice_headers).json()
        assert link["expires_in"] == 60
        served = client.get(link["url"])
        assert served.status_code == 200
        assert served.content == b"%PDF-1.4 resume"

        tampered = client.get(link["url"].replace("signature=", "signature=0"))
        assert tampered.status_code == 403

    def test_rejected_file_type(self, client, alice_headers):
        candidate = create_candidate(client, alice_headers)
        response = client.post(
            "/documents/",
            data={"entity_type": "candidate", "entity_id": candidate["id"], "document_type": "resume"},
            files={"file": ("run.sh", b"#!/bin/sh", "application/x-sh")},
            headers=alice_headers,
        )
        assert response.status_code == 400


# ---------------------------------------------------------------------------
# Shortlists
# ---------------------------------------------------------------------------

class TestShortlists:

    def test_add_twice_reports_present(self, client, alice_headers):
        c1 = create_candidate(client, alice_headers)
        c2 = create_candidate(client, alice_headers, first_name="Grace", last_name="Hopper")
        shortlist = client.post("/shortlists/", json={"name": "Backend"}, headers=alice_headers).json()

        url = f"/shortlists/{shortlist['id']}/candidates"
        first = client.post(url, json={"candidate_ids": [c1["id"]]}, headers=alice_headers).json()
        second = client.post(url, json={"candidate_ids": [c1["id"], c2["id"]]}, headers=alice_headers).json()

        assert first == {"added": [c1["id"]], "already_present": []}
        assert second == {"added": [c2["id"]], "already_present": [c1["id"]]}

        listed = client.get("/shortlists/", headers=alice_headers).json()
        assert listed[0]["candidate_count"] == 2
        assert client.get("/shortlists/options", headers=alice_headers).json() == [
            {"id": shortlist["id"], "name": "Backend"}
        ]


# ---------------------------------------------------------------------------
# Invitations
# ---------------------------------------------------------------------------

class TestInvitationFlow:

    def test_invite_accept_and_reuse(self, client, alice_headers, issue_key):
        created = client.post(
            "/organization/invitations", json={"email": CAROL.email}, headers=alice_headers
        )
        assert created.status_code == 201, created.text
        code = created.json()["invitation_code"]
        assert created.json()["status"] == "pending"

        again = client.post("/organization/invitations", json={"email": CAROL.email}, headers=alice_headers)
        assert again.status_code == 409
        assert again.json()["error"] == "DuplicateInvitationError"

        lookup = client.get(f"/invitations/{code}")
        assert lookup.status_code == 200
        assert lookup.json()["organization_name"] == "Acme Recruiting"

        carol_headers = issue_key(CAROL, "carol-secret")
        assert client.get("/candidates/", headers=carol_headers).status_code == 403

        accepted = client.post(f"/invitations/{code}/accept", headers=carol_headers)
        assert accepted.status_code == 200, accepted.text
        assert client.get("/candidates/", headers=carol_headers).status_code == 200

        reused = client.post(f"/invitations/{code}/accept", headers=carol_headers)
        assert reused.status_code == 409

        members = client.get("/organization/members", headers=alice_headers).json()
        assert {m["email"] for m in members} == {"alice@acme.test", CAROL.email}

    def test_unknown_code(self, client):
        assert client.get("/invitations/does-not-exist").status_code == 404
