"""Seed script to issue an API key for a user, for local development/testing.

The user is made a member of an organization (created when needed) so the key
can be used against tenant-scoped endpoints right away. The raw key is printed
once; only its hash is stored.

Usage:
  python scripts/seed_api_key.py --user-id user-1 --email recruiter@example.com
  python scripts/seed_api_key.py --user-id user-1 --email recruiter@example.com --key my-secret-key
  python scripts/seed_api_key.py --user-id user-1 --email recruiter@example.com --reset
"""

import secrets
import sys
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import argparse
import logging
from sqlmodel import Session, SQLModel
from sqlalchemy import delete

import models  # noqa: F401
from api.auth import hash_api_key
from config.settings import settings
from models.api_key import APIKey
from repositories.api_key_repository import APIKeyRepository
from repositories.organization_repository import MembershipRepository
from services.invitation_service import InvitationService
from services.tenancy import CurrentUser
from utils.database import build_engine

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

DEFAULT_NAME = "local-dev-key"
DEFAULT_ORG = "Demo Recruiting"


def seed_api_key(
    user_id: str,
    email: str,
    raw_key: str = None,
    org_name: str = DEFAULT_ORG,
    reset: bool = False,
) -> bool:
    db_url = settings.DATABASE_URL
    if not db_url:
        print("ERROR: DATABASE_URL not set in environment/.env", file=sys.stderr)
        return False

    engine = build_engine(db_url)
    SQLModel.metadata.create_all(engine)
    raw_key = raw_key or secrets.token_urlsafe(24)
    key_hash = hash_api_key(raw_key)

    with Session(engine) as db:
        user = CurrentUser(id=user_id, email=email)
        memberships = MembershipRepository(db).get_for_user(user_id)
        if memberships:
            organization_id = memberships[0].organization_id
            print(f"User {user_id} already belongs to organization {organization_id}")
        else:
            organization = InvitationService(db).create_organization(org_name, user)
            organization_id = organization.id
            print(f"Created organization '{org_name}' (id={organization_id}) with {email} as member")

        if reset:
            res = db.exec(delete(APIKey).where(APIKey.user_id == user_id))
            db.commit()
            print(f"Reset: removed {res.rowcount or 0} existing key(s) for {user_id}")

        repo = APIKeyRepository(db)
        if repo.get_by_hash(key_hash):
            print("API key already exists")
            return True

        repo.create(key_hash=key_hash, name=DEFAULT_NAME, user_id=user_id, email=email)

    print("API key seeded successfully:")
    print(f"  Raw key: {raw_key}")
    print(f"  Hash:    {key_hash[:16]}...")
    print(f"  User:    {user_id} <{email}>")
    print(f"  Org ID:  {organization_id}")
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Issue an API key for local dev/testing")
    parser.add_argument("--user-id", required=True, help="Identity provider user id")
    parser.add_argument("--email", required=True, help="User email (invitations match on it)")
    parser.add_argument("--key", default=None, help="Raw API key value (default: random)")
    parser.add_argument("--org", default=DEFAULT_ORG, help=f"Organization to create if the user has none (default: {DEFAULT_ORG})")
    parser.add_argument("--reset", action="store_true", help="Remove the user's existing keys before inserting")
    args = parser.parse_args()

    ok = seed_api_key(args.user_id, args.email, raw_key=args.key, org_name=args.org, reset=args.reset)
    sys.exit(0 if ok else 1)
