from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class DocumentResponse(BaseModel):
    id: str
    entity_type: str
    entity_id: str
    document_type: str
    file_name: str
    file_size_bytes: int
    mime_type: Optional[str] = None
    is_primary: bool
    uploaded_by: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class UploadResponse(BaseModel):
    """Result of an upload"""
    document: DocumentResponse
    is_first: bool = Field(..., description="First document of this type for the entity")
    should_prompt_primary: bool = Field(..., description="Offer the user to make this document primary")


class SetPrimaryRequest(BaseModel):
    entity_id: str = Field(..., min_length=1)
    document_type: str = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "entity_id": "0c6dec64-5292-4293-859f-700411c57e6c",
                "document_type": "resume"
            }
        }


class DownloadUrlResponse(BaseModel):
    url: str
    expires_in: int = Field(..., description="Seconds the signed URL stays valid")
