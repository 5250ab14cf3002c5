"""Seed script to create a small demo dataset for local development.

Creates (through the domain services, so every invariant holds) one
organization owned by the given user, a company with a primary contact, an
active job, two candidates, an application submitted to the client with an
interview booked, and a shortlist with both candidates.

Usage:
  python scripts/seed_db.py --user-id user-1 --email recruiter@example.com
  python scripts/seed_db.py --user-id user-1 --email recruiter@example.com --reset
  python scripts/seed_db.py --dry-run
"""
from datetime import datetime, timedelta
import sys
from pathlib import Path

# When running the script directly (e.g. `python scripts/seed_db.py`),
# ensure the repository root is on `sys.path` so local package imports
# like `config.settings` resolve correctly without setting `PYTHONPATH`.
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
import argparse

from sqlmodel import Session, SQLModel, select

import models  # noqa: F401
from config.settings import settings
from models.organization import Organization
from services.candidate_service import CandidateService
from services.company_service import CompanyService
from services.invitation_service import InvitationService
from services.job_service import JobService
from services.pipeline_service import PipelineService
from services.shortlist_service import ShortlistService
from services.tenancy import CurrentUser
from utils.database import build_engine

DEMO_ORG = "Demo Recruiting (seed)"


def perform_reset(db: Session) -> int:
    """Delete the demo organization; everything it owns cascades with it."""
    organizations = db.exec(select(Organization).where(Organization.name == DEMO_ORG)).all()
    for organization in organizations:
        db.delete(organization)
    db.commit()
    return len(organizations)


def seed(user_id: str, email: str, dry_run: bool = False, reset_flag: bool = False) -> bool:
    if dry_run:
        print("DRY RUN: would seed the following:")
        print(f" Organization: {DEMO_ORG} (member: {email})")
        print(" Company: Northwind Health, primary contact Dana Reyes")
        print(" Job: Senior Data Engineer (active)")
        print(" Candidates: Miguel Santos, Priya Natarajan")
        print(" Pipeline: Miguel submitted to client, interview booked in 3 days")
        print(" Shortlist: Data Platform - both candidates")
        return True

    db_url = settings.DATABASE_URL
    if not db_url:
        print("ERROR: DATABASE_URL not set in environment/.env", file=sys.stderr)
        return False

    engine = build_engine(db_url)
    # ensure tables exist for local/dev seeding
    SQLModel.metadata.create_all(engine)

    with Session(engine) as db:
        if reset_flag:
            print(f"Reset removed {perform_reset(db)} demo organization(s)")

        user = CurrentUser(id=user_id, email=email)
        organization = InvitationService(db).create_organization(DEMO_ORG, user)
        org_id = organization.id

        companies = CompanyService(db, org_id)
        company = companies.create(name="Northwind Health", industry="Healthcare", city="Austin", state="TX")
        companies.create_contact(company.id, name="Dana Reyes", email="dana@northwind.example", title="VP Engineering", is_primary=True)
        companies.create_contact(company.id, name="Lee Park", email="lee@northwind.example", title="Recruiting Lead")

        job = JobService(db, org_id).create(
            company_id=company.id,
            title="Senior Data Engineer",
            employment_type="permanent",
            salary_min=140000,
            salary_max=170000,
            status="active",
            created_by=user_id,
        )

        candidates = CandidateService(db, org_id)
        miguel = candidates.create(
            first_name="Miguel",
            last_name="Santos",
            email="miguel.santos@example.com",
            current_title="Senior Data Platform Engineer",
            skills=["Python", "SQL", "Airflow", "Spark", "dbt"],
            rating=5,
            created_by=user_id,
        )
        priya = candidates.create(
            first_name="Priya",
            last_name="Natarajan",
            email="priya.n@example.com",
            current_title="Data Engineer",
            skills=["Python", "Snowflake", "Kafka"],
            rating=4,
            created_by=user_id,
        )

        pipeline = PipelineService(db, org_id)
        application = pipeline.associate(miguel.id, job.id, created_by=user_id)
        pipeline.mark_submitted_to_client(application.id)
        pipeline.schedule_interview(
            application.id,
            scheduled_date=datetime.utcnow() + timedelta(days=3),
            interviewer_name="Dana Reyes",
            created_by=user_id,
        )

        shortlists = ShortlistService(db, org_id)
        shortlist = shortlists.create("Data Platform", "Strong data engineering profiles", created_by=user_id)
        shortlists.add_candidates(shortlist.id, [miguel.id, priya.id], added_by=user_id)

        print(f"Seeded organization '{DEMO_ORG}' (id={org_id})")
        print(f" Company {company.id}, job {job.id}")
        print(f" Candidates {miguel.id}, {priya.id}")
        print(f" Application {application.id} (submitted to client, interview booked)")
        print(f" Shortlist {shortlist.id}")
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed a demo recruiting dataset")
    parser.add_argument("--user-id", default="seed-user", help="User id that owns the demo organization")
    parser.add_argument("--email", default="seed-user@example.com", help="Email of that user")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be seeded")
    parser.add_argument("--reset", action="store_true", help="Delete the demo organization first")
    args = parser.parse_args()

    ok = seed(args.user_id, args.email, dry_run=args.dry_run, reset_flag=args.reset)
    sys.exit(0 if ok else 1)
