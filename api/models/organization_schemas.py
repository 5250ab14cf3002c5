from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class OrganizationCreate(BaseModel):
    name: str = Field(..., min_length=1)


class OrganizationResponse(BaseModel):
    id: int
    name: str
    created_at: datetime

    class Config:
        from_attributes = True


class MemberResponse(BaseModel):
    user_id: str
    email: Optional[str] = None
    joined_at: datetime


class InvitationCreate(BaseModel):
    """Schema for inviting someone to the organization"""
    email: str = Field(..., min_length=3)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "new.recruiter@example.com"
            }
        }


class InvitationResponse(BaseModel):
    id: str
    email: str
    invitation_code: str
    created_by: str
    created_at: datetime
    expires_at: datetime
    status: str = Field(..., description="pending, accepted or expired")


class InvitationLookupResponse(BaseModel):
    """What the acceptance page shows before the invitee accepts"""
    organization_id: int
    organization_name: Optional[str] = None
    email: str
    expires_at: datetime


class AcceptInvitationResponse(BaseModel):
    organization_id: int
    user_id: str
    joined_at: datetime
