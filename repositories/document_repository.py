"""
Document repository.

Primary-flag writes here only flush; the Document Registry wraps them in
one transaction.
"""

from typing import List, Optional
from sqlalchemy import update
from sqlmodel import Session, select, func

from models.document import Document
from repositories.base_repository import TenantRepository


class DocumentRepository(TenantRepository[Document]):
    """Repository for uploaded documents."""

    def __init__(self, db_session: Session, organization_id: int):
        super().__init__(db_session, Document, organization_id)

    def get_for_entity(self, entity_type: str, entity_id: str) -> List[Document]:
        statement = (
            self._select()
            .where(Document.entity_type == entity_type, Document.entity_id == entity_id)
            .order_by(Document.created_at.desc())
        )
        return list(self.db.exec(statement).all())

    def count_for_type(self, entity_type: str, entity_id: str, document_type: str) -> int:
        statement = select(func.count(Document.id)).where(
            Document.organization_id == self.organization_id,
            Document.entity_type == entity_type,
            Document.entity_id == entity_id,
            Document.document_type == document_type,
        )
        return self.db.exec(statement).one()

    def get_primary(self, entity_type: str, entity_id: str, document_type: str) -> Optional[Document]:
        statement = self._select().where(
            Document.entity_type == entity_type,
            Document.entity_id == entity_id,
            Document.document_type == document_type,
            Document.is_primary.is_(True),
        )
        return self.db.exec(statement).first()

    def file_names_in(self, entity_type: str, entity_id: str) -> set:
        statement = select(Document.file_name).where(
            Document.organization_id == self.organization_id,
            Document.entity_type == entity_type,
            Document.entity_id == entity_id,
        )
        return set(self.db.exec(statement).all())

    def lock_type(self, entity_type: str, entity_id: str, document_type: str) -> List[Document]:
        """Row-lock every document of an (entity, type) pair until the transaction ends."""
        statement = (
            self._select()
            .where(
                Document.entity_type == entity_type,
                Document.entity_id == entity_id,
                Document.document_type == document_type,
            )
            .with_for_update()
        )
        return list(self.db.exec(statement).all())

    def unset_primary(
        self,
        entity_type: str,
        entity_id: str,
        document_type: str,
        exclude_id: Optional[str] = None,
    ) -> int:
        """Clear `is_primary` on the pair's documents (except `exclude_id`). Flushes only."""
        statement = update(Document).where(
            Document.organization_id == self.organization_id,
            Document.entity_type == entity_type,
            Document.entity_id == entity_id,
            Document.document_type == document_type,
            Document.is_primary.is_(True),
        )
        if exclude_id is not None:
            statement = statement.where(Document.id != exclude_id)
        result = self.db.exec(
            statement.values(is_primary=False).execution_options(synchronize_session="fetch")
        )
        self.db.flush()
        return result.rowcount or 0

    def delete_for_entity(self, entity_type: str, entity_id: str) -> List[str]:
        """Delete every document row of an entity. Flushes only; returns file refs."""
        documents = self.get_for_entity(entity_type, entity_id)
        for document in documents:
            self.db.delete(document)
        self.db.flush()
        return [document.file_path for document in documents]
