from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from models.job import JobStatus


class JobCreate(BaseModel):
    """Schema for creating a job opening"""
    company_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[str] = None
    priority: str = Field("medium", description="low, medium, high")
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    status: str = Field(JobStatus.DRAFT.value, description="draft, active, paused, filled, cancelled")

    class Config:
        json_schema_extra = {
            "example": {
                "company_id": "b1c2d3e4-0000-4000-8000-000000000001",
                "title": "Senior Backend Engineer",
                "employment_type": "permanent",
                "salary_min": 120000,
                "salary_max": 150000,
                "status": "active"
            }
        }


class JobUpdate(BaseModel):
    company_id: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[str] = None
    priority: Optional[str] = None
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    status: Optional[str] = None


class JobResponse(BaseModel):
    id: str
    company_id: str
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[str] = None
    priority: str
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
