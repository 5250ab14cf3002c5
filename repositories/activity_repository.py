"""
Activity repository.
"""

from typing import List
from sqlalchemy import delete
from sqlmodel import Session

from models.activity import Activity
from repositories.base_repository import TenantRepository


class ActivityRepository(TenantRepository[Activity]):
    """Repository for entity activities."""

    def __init__(self, db_session: Session, organization_id: int):
        super().__init__(db_session, Activity, organization_id)

    def get_for_entity(self, entity_type: str, entity_id: str) -> List[Activity]:
        statement = (
            self._select()
            .where(Activity.entity_type == entity_type, Activity.entity_id == entity_id)
            .order_by(Activity.scheduled_date.desc())
        )
        return list(self.db.exec(statement).all())

    def delete_for_entity(self, entity_type: str, entity_id: str) -> int:
        """Delete an entity's activities. Flushes only."""
        result = self.db.exec(
            delete(Activity).where(
                Activity.organization_id == self.organization_id,
                Activity.entity_type == entity_type,
                Activity.entity_id == entity_id,
            )
        )
        return result.rowcount or 0
