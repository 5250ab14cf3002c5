from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ============ Company Schemas ============

class CompanyCreate(BaseModel):
    """Schema for creating a client company"""
    name: str = Field(..., min_length=1)
    industry: Optional[str] = None
    website: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Acme Corp",
                "industry": "Manufacturing",
                "city": "Austin",
                "state": "TX"
            }
        }


class CompanyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    industry: Optional[str] = None
    website: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    notes: Optional[str] = None


class CompanyResponse(BaseModel):
    id: str
    name: str
    industry: Optional[str] = None
    website: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ============ Contact Schemas ============

class ContactCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    title: Optional[str] = None
    is_primary: bool = False


class ContactUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    title: Optional[str] = None
    is_primary: Optional[bool] = None


class ContactResponse(BaseModel):
    id: str
    company_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    title: Optional[str] = None
    is_primary: bool

    class Config:
        from_attributes = True
