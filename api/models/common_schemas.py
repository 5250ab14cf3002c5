from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every domain error response"""
    detail: str = Field(..., description="Human-readable error message")
    error: str = Field(..., description="Error class, e.g. NotFoundError")

    class Config:
        json_schema_extra = {
            "example": {
                "detail": "Candidate not found",
                "error": "NotFoundError"
            }
        }


class DeletedResponse(BaseModel):
    id: str
    deleted: bool = True
