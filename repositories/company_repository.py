"""
Company and company contact repositories.
"""

from typing import List, Optional
from sqlalchemy import update
from sqlmodel import Session

from models.company import Company, CompanyContact
from repositories.base_repository import TenantRepository


class CompanyRepository(TenantRepository[Company]):
    """Repository for client companies."""

    def __init__(self, db_session: Session, organization_id: int):
        super().__init__(db_session, Company, organization_id)

    def list_by_name(self) -> List[Company]:
        statement = self._select().order_by(Company.name.asc())
        return list(self.db.exec(statement).all())


class CompanyContactRepository(TenantRepository[CompanyContact]):
    """Repository for company contacts."""

    def __init__(self, db_session: Session, organization_id: int):
        super().__init__(db_session, CompanyContact, organization_id)

    def get_by_company(self, company_id: str) -> List[CompanyContact]:
        """Contacts of a company, primary first then by name."""
        statement = (
            self._select()
            .where(CompanyContact.company_id == company_id)
            .order_by(CompanyContact.is_primary.desc(), CompanyContact.name.asc())
        )
        return list(self.db.exec(statement).all())

    def get_primary(self, company_id: str) -> Optional[CompanyContact]:
        statement = self._select().where(
            CompanyContact.company_id == company_id,
            CompanyContact.is_primary.is_(True),
        )
        return self.db.exec(statement).first()

    def lock_company_contacts(self, company_id: str) -> List[CompanyContact]:
        statement = (
            self._select()
            .where(CompanyContact.company_id == company_id)
            .with_for_update()
        )
        return list(self.db.exec(statement).all())

    def unset_primary(self, company_id: str, exclude_id: Optional[str] = None) -> int:
        """Clear the primary flag on a company's contacts. Flushes only."""
        statement = update(CompanyContact).where(
            CompanyContact.organization_id == self.organization_id,
            CompanyContact.company_id == company_id,
            CompanyContact.is_primary.is_(True),
        )
        if exclude_id is not None:
            statement = statement.where(CompanyContact.id != exclude_id)
        result = self.db.exec(
            statement.values(is_primary=False).execution_options(synchronize_session="fetch")
        )
        self.db.flush()
        return result.rowcount or 0
