import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.auth import get_tenant
from api.routes.activities import router as activities_router
from api.routes.applications import router as applications_router
from api.routes.candidates import router as candidates_router
from api.routes.companies import router as companies_router
from api.routes.documents import router as documents_router, files_router
from api.routes.interviews import router as interviews_router
from api.routes.jobs import router as jobs_router
from api.routes.organization import router as organization_router
from api.routes.shortlists import router as shortlists_router
from config.settings import settings
from services.errors import (
    AlreadyMemberError,
    ConflictError,
    DomainError,
    DuplicateInvitationError,
    ExpiredResourceError,
    NotAMemberError,
    NotAuthenticatedError,
    NotEligibleError,
    NotFoundError,
    UploadFailed,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

DESCRIPTION = """
Multi-tenant recruitment tracker: companies, jobs, candidates, the recruiting
pipeline, documents, shortlists and team invitations.

## Authentication

All endpoints (except `/ping`, `/health`, invitation lookup and signed `/files`
links) require an API key via the `X-API-Key` header. Every request is scoped
to the caller's organization.

## Pipeline

| Status | Meaning |
|--------|---------|
| `associated` | Candidate linked to the job (initial) |
| `submitted-to-client` | Profile sent; interviews may now be booked |
| `interview` | Interviewing with the client |
| `placed` | Hired (terminal) |
| `rejected` | Out of the process (terminal, reachable from any status) |

## Errors

Errors are returned as `{"detail": "...", "error": "ErrorClass"}`.
"""

tags_metadata = [
    {"name": "Health", "description": "Health check endpoints. No authentication required."},
    {"name": "Organization", "description": "Organization, members and invitations."},
    {"name": "Candidates", "description": "Candidate records."},
    {"name": "Companies", "description": "Client companies and their contacts."},
    {"name": "Jobs", "description": "Job openings."},
    {"name": "Pipeline", "description": "Applications and interviews."},
    {"name": "Documents", "description": "Uploaded files and primary documents."},
    {"name": "Shortlists", "description": "Curated candidate lists."},
    {"name": "Activities", "description": "Notes, calls and meetings logged on entities."},
]

# Most specific class first
ERROR_STATUS = [
    (NotAuthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (NotAMemberError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (NotEligibleError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (DuplicateInvitationError, status.HTTP_409_CONFLICT),
    (AlreadyMemberError, status.HTTP_409_CONFLICT),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ExpiredResourceError, status.HTTP_410_GONE),
    (UploadFailed, status.HTTP_502_BAD_GATEWAY),
]

app = FastAPI(
    title="Recruitment Tracker API",
    description=DESCRIPTION,
    version="1.0.0",
    openapi_tags=tags_metadata,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def status_for(exc: DomainError) -> int:
    for error_class, status_code in ERROR_STATUS:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    headers = {"WWW-Authenticate": "ApiKey"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": type(exc).__name__},
        headers=headers,
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc), "error": "ValueError"},
    )


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information and documentation links"""
    return {
        "message": "Welcome to the Recruitment Tracker API",
        "version": "1.0.0",
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "authentication": {
            "type": "API Key",
            "header": "X-API-Key",
        },
    }


# Health check endpoints (public - no authentication required)
@app.get("/ping", tags=["Health"])
def ping():
    """Simple ping endpoint to check if API is responding. No authentication required."""
    return {"message": "pong"}


@app.get("/health", tags=["Health"])
def health():
    """Health check endpoint with basic status information. No authentication required."""
    return {
        "status": "healthy",
        "service": "Recruitment Tracker API",
        "version": "1.0.0"
    }


# Register routers
app.include_router(organization_router)
app.include_router(candidates_router)
app.include_router(companies_router)
app.include_router(jobs_router)
app.include_router(applications_router)
app.include_router(interviews_router)
app.include_router(documents_router)
app.include_router(files_router)
app.include_router(shortlists_router)
app.include_router(activities_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=False)
