"""
Services module - Business Logic Layer.

Contains the domain services that enforce the tracker's invariants,
sitting between the API layer (routes) and the data layer (repositories).

Services handle:
- Tenant resolution (TenancyGuard) before anything else runs
- Business rule validation
- Orchestrating multiple repository operations in one transaction
- Translating storage conflicts into domain errors

Usage:
    from services import TenancyGuard, PipelineService

    tenant = TenancyGuard(db).resolve(user)
    pipeline = PipelineService(db, tenant.organization_id)
    application = pipeline.associate(candidate_id, job_id)
"""

from services.tenancy import CurrentUser, TenantContext, TenancyGuard
from services.document_service import DocumentService, UploadResult
from services.pipeline_service import PipelineService
from services.shortlist_service import ShortlistService, AddCandidatesResult, BulkAssociationResult
from services.invitation_service import InvitationService
from services.candidate_service import CandidateService, CandidateDetail
from services.company_service import CompanyService
from services.job_service import JobService
from services.activity_service import ActivityService

__all__ = [
    "CurrentUser",
    "TenantContext",
    "TenancyGuard",
    "DocumentService",
    "UploadResult",
    "PipelineService",
    "ShortlistService",
    "AddCandidatesResult",
    "BulkAssociationResult",
    "InvitationService",
    "CandidateService",
    "CandidateDetail",
    "CompanyService",
    "JobService",
    "ActivityService",
]
