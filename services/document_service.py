"""
Document Registry.

Associates uploaded files with a candidate or company and maintains the
primary-document invariant: for a fixed (entity_type, entity_id,
document_type) at most one document is primary.

Blob I/O always happens outside the row-mutating transaction. The row insert
is the authoritative success signal of an upload.
"""

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session

from config.settings import settings
from models.document import Document, DOCUMENT_TYPES, EntityType
from repositories.candidate_repository import CandidateRepository
from repositories.company_repository import CompanyRepository
from repositories.document_repository import DocumentRepository
from services.errors import ConflictError, NotFoundError, UploadFailed
from utils.database import atomic, is_lock_conflict
from utils.file_storage import FileStorage, get_file_storage

logger = logging.getLogger(__name__)

# Only the first resume of an entity becomes primary on upload
AUTO_PRIMARY_TYPE = "resume"

ALLOWED_MIME_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/jpeg",
    "image/png",
    "image/gif",
    "text/plain",
)


@dataclass
class UploadResult:
    document: Document
    is_first: bool

    @property
    def should_prompt_primary(self) -> bool:
        """Uploads stored as non-primary ask the user whether to make them primary."""
        return not self.document.is_primary


class DocumentService:
    """
    Document Registry for one organization.

    Responsibilities:
    - Validate and store uploads, cleaning up blobs when the row insert fails
    - Switch the primary document atomically
    - Delete rows and their blobs without auto-promoting another document
    """

    def __init__(
        self,
        db_session: Session,
        organization_id: int,
        storage: Optional[FileStorage] = None,
    ):
        self.db = db_session
        self.organization_id = organization_id
        self.storage = storage or get_file_storage()
        self.document_repo = DocumentRepository(db_session, organization_id)
        self.candidate_repo = CandidateRepository(db_session, organization_id)
        self.company_repo = CompanyRepository(db_session, organization_id)

    # ============ UPLOAD ============

    def upload(
        self,
        entity_type: str,
        entity_id: str,
        document_type: str,
        file_name: str,
        content: bytes,
        mime_type: Optional[str] = None,
        uploaded_by: Optional[str] = None,
    ) -> UploadResult:
        """
        Store a file and register it against an entity.

        Documents are stored as non-primary, except the first resume of an
        entity, which becomes primary. A first resume that loses the flag to a
        concurrent upload is stored as non-primary rather than failing.

        Returns:
            UploadResult with the document and whether it was the first of its type

        Raises:
            ValueError: File or document type rejected
            NotFoundError: Entity does not exist in this organization
            UploadFailed: Blob transport or row insert failed
        """
        self._validate_upload(entity_type, document_type, content, mime_type)
        self._ensure_entity(entity_type, entity_id)

        stored_name = self._unique_file_name(entity_type, entity_id, file_name)
        file_path = f"{self.organization_id}/{entity_type}s/{entity_id}/{stored_name}"

        try:
            file_ref = self.storage.store(
                content,
                file_path,
                {"mime_type": mime_type, "document_type": document_type},
            )
        except Exception as exc:
            logger.error(f"Blob store failed for {file_path}: {exc}")
            raise UploadFailed("Failed to store file") from exc

        auto_primary = False
        row = dict(
            entity_type=entity_type,
            entity_id=entity_id,
            document_type=document_type,
            file_name=stored_name,
            file_path=file_ref,
            file_size_bytes=len(content),
            mime_type=mime_type,
            uploaded_by=uploaded_by,
        )
        try:
            try:
                with atomic(self.db):
                    is_first = self.document_repo.count_for_type(entity_type, entity_id, document_type) == 0
                    auto_primary = is_first and document_type == AUTO_PRIMARY_TYPE
                    document = self.document_repo.create(
                        Document(is_primary=auto_primary, **row), commit=False
                    )
            except IntegrityError:
                if not auto_primary:
                    raise
                # A concurrent first resume took the flag
                logger.info(
                    f"Primary {document_type} of {entity_type} {entity_id} already taken; "
                    f"storing {file_ref} as non-primary"
                )
                is_first = False
                with atomic(self.db):
                    document = self.document_repo.create(Document(is_primary=False, **row), commit=False)
        except Exception as exc:
            logger.error(f"Document row insert failed for {file_ref}: {exc}")
            self._remove_blob_quietly(file_ref)
            raise UploadFailed("Failed to save document record") from exc

        self.db.refresh(document)
        logger.info(
            f"Uploaded {document_type} {document.id} for {entity_type} {entity_id} "
            f"(first={is_first})"
        )
        return UploadResult(document=document, is_first=is_first)

    # ============ PRIMARY FLAG ============

    def set_primary(self, document_id: str, entity_id: str, document_type: str) -> Document:
        """
        Make a document the primary one of its (entity, type) pair.

        Clearing the other flags and setting the target happen in one
        transaction with the pair's rows locked, so concurrent calls serialize.

        Raises:
            NotFoundError: Document missing or not part of the pair
            ConflictError: A concurrent call won the race
        """
        try:
            with atomic(self.db):
                target = self.document_repo.get_by_id(document_id)
                if (
                    target is None
                    or target.entity_id != entity_id
                    or target.document_type != document_type
                ):
                    raise NotFoundError("Document not found")

                self.document_repo.lock_type(target.entity_type, entity_id, document_type)
                self.document_repo.unset_primary(
                    target.entity_type, entity_id, document_type, exclude_id=target.id
                )
                target.is_primary = True
                self.document_repo.update(target, commit=False)
        except (IntegrityError, OperationalError) as exc:
            if isinstance(exc, OperationalError) and not is_lock_conflict(exc):
                raise
            logger.warning(f"Primary switch to {document_id} lost a concurrent race")
            raise ConflictError(
                "Another document was made primary at the same time; reload and try again"
            ) from exc

        self.db.refresh(target)
        logger.info(f"Document {document_id} is now primary {document_type} for {entity_id}")
        return target

    # ============ DELETE ============

    def delete(self, document_id: str) -> bool:
        """
        Delete a document row and then its blob.

        Deleting the primary document leaves the pair with no primary.
        """
        with atomic(self.db):
            document = self.document_repo.get_by_id_for_update(document_id)
            if document is None:
                raise NotFoundError("Document not found")
            file_ref = document.file_path
            self.document_repo.delete(document, commit=False)

        self._remove_blob_quietly(file_ref)
        logger.info(f"Deleted document {document_id}")
        return True

    # ============ QUERIES ============

    def get(self, document_id: str) -> Document:
        document = self.document_repo.get_by_id(document_id)
        if document is None:
            raise NotFoundError("Document not found")
        return document

    def list_for_entity(self, entity_type: str, entity_id: str) -> List[Document]:
        return self.document_repo.get_for_entity(entity_type, entity_id)

    def get_primary(self, entity_type: str, entity_id: str, document_type: str) -> Optional[Document]:
        return self.document_repo.get_primary(entity_type, entity_id, document_type)

    def get_download_url(self, document_id: str, force_download: bool = False) -> str:
        """Signed URL for viewing (default) or downloading a document."""
        document = self.get(document_id)
        return self.storage.retrieve_url(document.file_path, download=force_download)

    # ============ HELPERS ============

    def remove_blobs(self, file_refs: List[str]) -> None:
        """Best-effort removal of blobs whose rows are already gone."""
        for file_ref in file_refs:
            self._remove_blob_quietly(file_ref)

    def _validate_upload(
        self,
        entity_type: str,
        document_type: str,
        content: bytes,
        mime_type: Optional[str],
    ) -> None:
        errors = []
        if len(content) > settings.MAX_UPLOAD_BYTES:
            errors.append(
                f"File size exceeds {settings.MAX_UPLOAD_BYTES // (1024 * 1024)}MB limit. "
                f"Current size: {len(content) / 1024 / 1024:.2f}MB"
            )
        if mime_type not in ALLOWED_MIME_TYPES:
            errors.append("File type not allowed. Allowed formats: PDF, DOC, DOCX, JPG, PNG, GIF, TXT")
        if document_type not in DOCUMENT_TYPES.get(entity_type, ()):
            errors.append(f"Invalid document type '{document_type}' for {entity_type}")
        if errors:
            raise ValueError("\n".join(errors))

    def _ensure_entity(self, entity_type: str, entity_id: str) -> None:
        if entity_type == EntityType.CANDIDATE.value:
            exists = self.candidate_repo.exists(entity_id)
        else:
            exists = self.company_repo.exists(entity_id)
        if not exists:
            raise NotFoundError(f"{entity_type.capitalize()} not found")

    def _unique_file_name(self, entity_type: str, entity_id: str, original_name: str) -> str:
        """`name.ext`, then `name(1).ext`, `name(2).ext`, ... until unused."""
        original_name = PurePosixPath(original_name or "file").name
        taken = self.document_repo.file_names_in(entity_type, entity_id)
        base_path = f"{self.organization_id}/{entity_type}s/{entity_id}"
        stem = PurePosixPath(original_name).stem
        suffix = PurePosixPath(original_name).suffix

        file_name = original_name
        counter = 0
        while file_name in taken or self.storage.exists(f"{base_path}/{file_name}"):
            counter += 1
            file_name = f"{stem}({counter}){suffix}"
        return file_name

    def _remove_blob_quietly(self, file_ref: str) -> None:
        try:
            self.storage.remove(file_ref)
        except Exception as exc:
            logger.warning(f"Blob cleanup failed for {file_ref}: {exc}")
