from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from api.models.candidate_schemas import CandidateResponse


class ShortlistCreate(BaseModel):
    """Schema for creating a shortlist"""
    name: str = Field(..., min_length=1)
    description: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Backend - Q3",
                "description": "Strong backend profiles for the Q3 openings"
            }
        }


class ShortlistUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None


class ShortlistResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    candidate_count: Optional[int] = None

    class Config:
        from_attributes = True


class AddCandidatesRequest(BaseModel):
    candidate_ids: List[str] = Field(..., min_length=1)
    notes: Optional[str] = None


class AddCandidatesResponse(BaseModel):
    added: List[str] = Field(..., description="Candidate ids added by this call")
    already_present: List[str] = Field(..., description="Candidate ids that were already on the shortlist")


class MemberNotesRequest(BaseModel):
    notes: Optional[str] = None


class ShortlistMemberResponse(BaseModel):
    candidate: CandidateResponse
    notes: Optional[str] = None
    added_by: Optional[str] = None
    added_at: datetime


class DuplicateRequest(BaseModel):
    name: str = Field(..., min_length=1)


class AssociateJobRequest(BaseModel):
    job_id: str = Field(..., min_length=1)


class BulkAssociationResponse(BaseModel):
    created: List[str] = Field(..., description="Application ids created")
    skipped: List[str] = Field(..., description="Candidate ids already associated with the job")
