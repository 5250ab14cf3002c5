import hashlib
import logging

from fastapi import Depends, Security
from fastapi.security import APIKeyHeader
from sqlmodel import Session

from repositories.api_key_repository import APIKeyRepository
from repositories.organization_repository import ProfileRepository
from services.errors import NotAuthenticatedError
from services.tenancy import CurrentUser, TenantContext, TenancyGuard
from utils.database import get_db

logger = logging.getLogger(__name__)

# Define API Key security scheme for OpenAPI/Swagger.
# auto_error=False so a missing key surfaces as NotAuthenticatedError (401).
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def hash_api_key(raw_key: str) -> str:
    """Derive deterministic hash for API key secrets."""
    return hashlib.sha256(raw_key.encode("utf-8")).hexdigest()


def get_current_user(
    api_key: str = Security(api_key_header),
    db: Session = Depends(get_db),
) -> CurrentUser:
    """
    Dependency resolving the X-API-Key header to the calling user.

    The caller's profile (user id -> email) is refreshed on every request so
    invitations can tell whether an email already belongs to a member.

    Raises:
        NotAuthenticatedError: Key missing, unknown or inactive
    """
    if not api_key:
        raise NotAuthenticatedError("Missing API key")

    repo = APIKeyRepository(db)
    record = repo.get_by_hash(hash_api_key(api_key))
    if record is None:
        raise NotAuthenticatedError("Invalid API key")
    if not record.is_active:
        raise NotAuthenticatedError("API key is inactive")

    repo.touch_last_used(record)
    ProfileRepository(db).upsert(record.user_id, record.email)
    return CurrentUser(id=record.user_id, email=record.email)


def get_tenant(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TenantContext:
    """
    Resolve the caller's organization for the request.

    Usage:
        @router.get("/candidates")
        def list_candidates(tenant: TenantContext = Depends(get_tenant), db: Session = Depends(get_db)):
            # every service is built with tenant.organization_id
            pass
    """
    return TenancyGuard(db).resolve(user)
