"""
Repositories module - Data Access Layer.

Provides repository classes for database operations following the Repository pattern.
Each repository handles CRUD operations for a specific domain entity. Tenant
repositories are constructed with an organization id and never return rows of
another organization.

Usage:
    from repositories import CandidateRepository, DocumentRepository

    # Initialize with a database session and the caller's organization
    candidate_repo = CandidateRepository(db_session, organization_id)
    document_repo = DocumentRepository(db_session, organization_id)

    # Use repository methods
    candidate = candidate_repo.get_by_id(candidate_id)
    resume = document_repo.get_primary("candidate", candidate_id, "resume")
"""

from repositories.base_repository import BaseRepository, TenantRepository
from repositories.api_key_repository import APIKeyRepository
from repositories.organization_repository import (
    OrganizationRepository,
    MembershipRepository,
    ProfileRepository,
)
from repositories.invitation_repository import InvitationRepository
from repositories.candidate_repository import CandidateRepository
from repositories.company_repository import CompanyRepository, CompanyContactRepository
from repositories.job_repository import JobRepository
from repositories.application_repository import ApplicationRepository
from repositories.interview_repository import InterviewRepository
from repositories.document_repository import DocumentRepository
from repositories.shortlist_repository import ShortlistRepository, ShortlistCandidateRepository
from repositories.activity_repository import ActivityRepository

__all__ = [
    "BaseRepository",
    "TenantRepository",
    "APIKeyRepository",
    "OrganizationRepository",
    "MembershipRepository",
    "ProfileRepository",
    "InvitationRepository",
    "CandidateRepository",
    "CompanyRepository",
    "CompanyContactRepository",
    "JobRepository",
    "ApplicationRepository",
    "InterviewRepository",
    "DocumentRepository",
    "ShortlistRepository",
    "ShortlistCandidateRepository",
    "ActivityRepository",
]
