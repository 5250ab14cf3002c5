"""
Company service - client companies and their contacts.

A company has at most one primary contact. Making a contact primary clears
the flag on the others in the same transaction, with the company's contacts
locked, the same way documents switch their primary.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from models.company import Company, CompanyContact
from models.document import EntityType
from repositories.activity_repository import ActivityRepository
from repositories.company_repository import CompanyRepository, CompanyContactRepository
from repositories.document_repository import DocumentRepository
from services.document_service import DocumentService
from services.errors import ConflictError, NotFoundError
from utils.database import atomic
from utils.file_storage import FileStorage

logger = logging.getLogger(__name__)

COMPANY_FIELDS = ("name", "industry", "website", "city", "state", "notes")
CONTACT_FIELDS = ("name", "email", "phone", "title", "is_primary")


class CompanyService:
    """Companies and company contacts of one organization."""

    def __init__(self, db_session: Session, organization_id: int, storage: Optional[FileStorage] = None):
        self.db = db_session
        self.organization_id = organization_id
        self.storage = storage
        self.company_repo = CompanyRepository(db_session, organization_id)
        self.contact_repo = CompanyContactRepository(db_session, organization_id)
        self.document_repo = DocumentRepository(db_session, organization_id)
        self.activity_repo = ActivityRepository(db_session, organization_id)

    # ============ COMPANIES ============

    def create(self, **fields) -> Company:
        values = _clean(fields, COMPANY_FIELDS, "company", required=("name",))
        company = self.company_repo.create(Company(**values))
        logger.info(f"Created company {company.id}")
        return company

    def get(self, company_id: str) -> Company:
        company = self.company_repo.get_by_id(company_id)
        if company is None:
            raise NotFoundError("Company not found")
        return company

    def list(self) -> List[Company]:
        return self.company_repo.list_by_name()

    def update(self, company_id: str, **fields) -> Company:
        company = self.get(company_id)
        for key, value in _clean(fields, COMPANY_FIELDS, "company").items():
            setattr(company, key, value)
        company.updated_at = datetime.utcnow()
        return self.company_repo.update(company)

    def delete(self, company_id: str) -> bool:
        """Delete a company with its jobs and contacts; documents and blobs too."""
        with atomic(self.db):
            company = self.company_repo.get_by_id_for_update(company_id)
            if company is None:
                raise NotFoundError("Company not found")
            file_refs = self.document_repo.delete_for_entity(EntityType.COMPANY.value, company_id)
            self.activity_repo.delete_for_entity(EntityType.COMPANY.value, company_id)
            self.company_repo.delete(company, commit=False)

        if file_refs:
            DocumentService(self.db, self.organization_id, storage=self.storage).remove_blobs(file_refs)
        logger.info(f"Deleted company {company_id}")
        return True

    # ============ CONTACTS ============

    def list_contacts(self, company_id: str) -> List[CompanyContact]:
        """Primary contact first, then by name."""
        self.get(company_id)
        return self.contact_repo.get_by_company(company_id)

    def get_primary_contact(self, company_id: str) -> Optional[CompanyContact]:
        return self.contact_repo.get_primary(company_id)

    def get_contact(self, contact_id: str) -> CompanyContact:
        contact = self.contact_repo.get_by_id(contact_id)
        if contact is None:
            raise NotFoundError("Contact not found")
        return contact

    def create_contact(self, company_id: str, **fields) -> CompanyContact:
        values = _clean(fields, CONTACT_FIELDS, "contact", required=("name",))
        contact = CompanyContact(company_id=company_id, **values)
        try:
            with atomic(self.db):
                if self.company_repo.get_by_id(company_id) is None:
                    raise NotFoundError("Company not found")
                if contact.is_primary:
                    self.contact_repo.lock_company_contacts(company_id)
                    self.contact_repo.unset_primary(company_id)
                self.contact_repo.create(contact, commit=False)
        except IntegrityError as exc:
            raise ConflictError("Another contact was made primary at the same time; reload and try again") from exc

        self.db.refresh(contact)
        return contact

    def update_contact(self, contact_id: str, **fields) -> CompanyContact:
        values = _clean(fields, CONTACT_FIELDS, "contact")
        try:
            with atomic(self.db):
                contact = self.contact_repo.get_by_id_for_update(contact_id)
                if contact is None:
                    raise NotFoundError("Contact not found")
                if values.get("is_primary"):
                    self.contact_repo.lock_company_contacts(contact.company_id)
                    self.contact_repo.unset_primary(contact.company_id, exclude_id=contact.id)
                for key, value in values.items():
                    setattr(contact, key, value)
                self.contact_repo.update(contact, commit=False)
        except IntegrityError as exc:
            raise ConflictError("Another contact was made primary at the same time; reload and try again") from exc

        self.db.refresh(contact)
        return contact

    def set_primary_contact(self, contact_id: str) -> CompanyContact:
        return self.update_contact(contact_id, is_primary=True)

    def delete_contact(self, contact_id: str) -> bool:
        contact = self.get_contact(contact_id)
        self.contact_repo.delete(contact)
        return True


def _clean(fields: dict, allowed: tuple, label: str, required: tuple = ()) -> dict:
    unknown = set(fields) - set(allowed)
    if unknown:
        raise ValueError(f"Unknown {label} fields: {', '.join(sorted(unknown))}")
    values = dict(fields)
    for name in required:
        if not (values.get(name) or "").strip():
            raise ValueError(f"{label.capitalize()} {name} is required")
    if "name" in values and values["name"] is not None:
        values["name"] = values["name"].strip()
        if not values["name"]:
            raise ValueError(f"{label.capitalize()} name is required")
    return values
