from models.organization import Organization, OrganizationMember
from models.profile import UserProfile
from models.invitation import Invitation, InvitationStatus
from models.api_key import APIKey
from models.candidate import Candidate
from models.company import Company, CompanyContact
from models.job import Job, JobStatus
from models.application import Application, ApplicationStatus
from models.interview import Interview, InterviewStatus
from models.document import Document, EntityType, DOCUMENT_TYPES
from models.shortlist import Shortlist, ShortlistCandidate
from models.activity import Activity

__all__ = [
    "Organization",
    "OrganizationMember",
    "UserProfile",
    "Invitation",
    "InvitationStatus",
    "APIKey",
    "Candidate",
    "Company",
    "CompanyContact",
    "Job",
    "JobStatus",
    "Application",
    "ApplicationStatus",
    "Interview",
    "InterviewStatus",
    "Document",
    "EntityType",
    "DOCUMENT_TYPES",
    "Shortlist",
    "ShortlistCandidate",
    "Activity",
]
