from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ============ Application Schemas ============

class ApplicationCreate(BaseModel):
    """Schema for associating a candidate with a job"""
    candidate_id: str = Field(..., min_length=1)
    job_id: str = Field(..., min_length=1)
    applied_date: Optional[date] = None
    notes: Optional[str] = None
    status: Optional[str] = Field(None, description="Not accepted; applications always start as 'associated'")

    class Config:
        json_schema_extra = {
            "example": {
                "candidate_id": "0c6dec64-5292-4293-859f-700411c57e6c",
                "job_id": "b1c2d3e4-0000-4000-8000-000000000001",
                "notes": "Referred by the hiring manager"
            }
        }


class TransitionRequest(BaseModel):
    """Schema for moving an application through the pipeline"""
    status: str = Field(..., description="associated, submitted-to-client, interview, placed, rejected")
    submitted_to_client_date: Optional[date] = None
    interview_date: Optional[date] = None
    placed_date: Optional[date] = None
    offered_salary: Optional[int] = None
    notes: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "status": "submitted-to-client",
                "submitted_to_client_date": "2024-03-01"
            }
        }


class SubmitToClientRequest(BaseModel):
    when: Optional[date] = Field(None, description="Defaults to today")


class ApplicationResponse(BaseModel):
    id: str
    candidate_id: str
    job_id: str
    status: str
    applied_date: date
    submitted_to_client_date: Optional[date] = None
    interview_date: Optional[date] = None
    placed_date: Optional[date] = None
    offered_salary: Optional[int] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PipelineStageResponse(BaseModel):
    candidate_id: str
    stage: Optional[str] = None


# ============ Interview Schemas ============

class InterviewCreate(BaseModel):
    """Schema for scheduling an interview"""
    application_id: str = Field(..., min_length=1)
    scheduled_date: datetime
    interview_type: str = Field("virtual", description="virtual, phone, onsite")
    duration_minutes: int = Field(60, gt=0)
    location: Optional[str] = None
    interviewer_name: Optional[str] = None
    notes: Optional[str] = None


class InterviewComplete(BaseModel):
    feedback: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)


class InterviewResponse(BaseModel):
    id: str
    application_id: str
    interview_type: str
    scheduled_date: datetime
    duration_minutes: int
    location: Optional[str] = None
    interviewer_name: Optional[str] = None
    notes: Optional[str] = None
    status: str
    feedback: Optional[str] = None
    rating: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class InterviewListResponse(BaseModel):
    interviews: List[InterviewResponse]
