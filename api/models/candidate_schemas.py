from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from api.models.document_schemas import DocumentResponse
from api.models.pipeline_schemas import ApplicationResponse


class CandidateCreate(BaseModel):
    """Schema for creating a candidate"""
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    current_title: Optional[str] = None
    location: Optional[str] = None
    skills: List[str] = Field(default_factory=list, description="Ordered list of skills")
    rating: Optional[int] = Field(None, ge=0, le=5)
    status: str = "active"
    notes: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "first_name": "Ada",
                "last_name": "Lovelace",
                "email": "ada@example.com",
                "current_title": "Backend Engineer",
                "skills": ["Python", "PostgreSQL"],
                "rating": 4
            }
        }


class CandidateUpdate(BaseModel):
    """Schema for updating a candidate; only sent fields change"""
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    current_title: Optional[str] = None
    location: Optional[str] = None
    skills: Optional[List[str]] = None
    rating: Optional[int] = Field(None, ge=0, le=5)
    status: Optional[str] = None
    notes: Optional[str] = None


class CandidateResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    current_title: Optional[str] = None
    location: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    rating: Optional[int] = None
    status: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CandidateListResponse(BaseModel):
    candidates: List[CandidateResponse]
    total: int
    page: int
    page_size: int


class CandidateDetailResponse(BaseModel):
    candidate: CandidateResponse
    documents: List[DocumentResponse]
    applications: List[ApplicationResponse]
    pipeline_stage: Optional[str] = Field(None, description="Furthest non-rejected stage, null without applications")
