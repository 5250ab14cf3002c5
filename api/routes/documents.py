from typing import List

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.responses import FileResponse
from sqlmodel import Session

from api.auth import get_tenant
from api.models.common_schemas import DeletedResponse, ErrorResponse
from api.models.document_schemas import (
    DocumentResponse,
    DownloadUrlResponse,
    SetPrimaryRequest,
    UploadResponse,
)
from services.document_service import DocumentService
from services.tenancy import TenantContext
from utils.database import get_db
from utils.file_storage import get_file_storage

router = APIRouter(
    prefix="/documents",
    tags=["Documents"],
    responses={404: {"model": ErrorResponse}},
)

# Signed links are their own credential, so this router has no API key dependency
files_router = APIRouter(prefix="/files", tags=["Documents"])


def get_service(tenant: TenantContext = Depends(get_tenant), db: Session = Depends(get_db)) -> DocumentService:
    return DocumentService(db, tenant.organization_id, storage=get_file_storage())


@router.post(
    "/",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "File or document type rejected"},
        502: {"model": ErrorResponse, "description": "Storage failure"},
    },
)
async def upload_document(
    file: UploadFile = File(...),
    entity_type: str = Form(..., description="candidate or company"),
    entity_id: str = Form(...),
    document_type: str = Form(..., description="candidate: resume, portfolio, certification, other; company: contract, agreement, other"),
    tenant: TenantContext = Depends(get_tenant),
    service: DocumentService = Depends(get_service),
):
    """
    Upload a document for a candidate or company.

    The first resume of an entity becomes primary. For every other upload
    `should_prompt_primary` is true and the client may call
    `POST /documents/{id}/primary`.
    """
    content = await file.read()
    result = service.upload(
        entity_type=entity_type,
        entity_id=entity_id,
        document_type=document_type,
        file_name=file.filename,
        content=content,
        mime_type=file.content_type,
        uploaded_by=tenant.user_id,
    )
    return UploadResponse(
        document=DocumentResponse.model_validate(result.document),
        is_first=result.is_first,
        should_prompt_primary=result.should_prompt_primary,
    )


@router.get("/", response_model=List[DocumentResponse])
def list_documents(
    entity_type: str = Query(...),
    entity_id: str = Query(...),
    service: DocumentService = Depends(get_service),
):
    return service.list_for_entity(entity_type, entity_id)


@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(document_id: str, service: DocumentService = Depends(get_service)):
    return service.get(document_id)


@router.post("/{document_id}/primary", response_model=DocumentResponse, responses={409: {"model": ErrorResponse}})
def set_primary_document(
    document_id: str,
    request: SetPrimaryRequest,
    service: DocumentService = Depends(get_service),
):
    return service.set_primary(document_id, request.entity_id, request.document_type)


@router.get("/{document_id}/url", response_model=DownloadUrlResponse)
def get_document_url(
    document_id: str,
    download: bool = Query(False, description="Ask the browser to download instead of view"),
    service: DocumentService = Depends(get_service),
):
    url = service.get_download_url(document_id, force_download=download)
    return DownloadUrlResponse(url=url, expires_in=service.storage.url_ttl_seconds)


@router.delete("/{document_id}", response_model=DeletedResponse)
def delete_document(document_id: str, service: DocumentService = Depends(get_service)):
    """Delete a document. Deleting the primary leaves the type without one."""
    service.delete(document_id)
    return DeletedResponse(id=document_id)


@files_router.get("/{file_ref:path}")
def serve_file(
    file_ref: str,
    expires: int = Query(...),
    download: int = Query(0),
    signature: str = Query(...),
):
    storage = get_file_storage()
    if not storage.verify(file_ref, expires, bool(download), signature):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired link")
    try:
        path = storage.resolve_path(file_ref)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    if not path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

    return FileResponse(
        path,
        filename=path.name,
        content_disposition_type="attachment" if download else "inline",
    )
