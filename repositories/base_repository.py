"""
Base repositories with common CRUD operations.

Provides a foundation for all domain-specific repositories:
- BaseRepository: plain CRUD for global tables (organizations, profiles)
- TenantRepository: CRUD that is always scoped to one organization

Every write accepts `commit`. Leave it at True for a single-statement write;
pass False inside `utils.database.atomic()` so several writes share one
transaction (the write is only flushed).
"""

from typing import TypeVar, Generic, Optional, List, Type, Any
from sqlmodel import Session, select, SQLModel
from sqlmodel.sql.expression import SelectOfScalar

T = TypeVar("T", bound=SQLModel)


class BaseRepository(Generic[T]):
    """
    Generic base repository with common CRUD operations.

    Type Parameters:
        T: SQLModel entity type
    """

    def __init__(self, db_session: Session, model_class: Type[T]):
        """
        Initialize repository.

        Args:
            db_session: SQLModel database session
            model_class: The SQLModel class this repository manages
        """
        self.db = db_session
        self.model_class = model_class

    def get_by_id(self, id: Any) -> Optional[T]:
        """
        Get entity by ID.

        Args:
            id: Primary key

        Returns:
            Entity if found, None otherwise
        """
        return self.db.get(self.model_class, id)

    def get_all(self, limit: int = 100, offset: int = 0) -> List[T]:
        """
        Get all entities with pagination.

        Args:
            limit: Maximum number of results
            offset: Number of records to skip

        Returns:
            List of entities
        """
        statement = select(self.model_class).offset(offset).limit(limit)
        return list(self.db.exec(statement).all())

    def create(self, entity: T, commit: bool = True) -> T:
        """
        Create a new entity.

        Args:
            entity: Entity to create
            commit: Commit immediately (False: flush only)

        Returns:
            Created entity with ID
        """
        self.db.add(entity)
        return self._save(entity, commit)

    def update(self, entity: T, commit: bool = True) -> T:
        """
        Update an existing entity.

        Args:
            entity: Entity with updated values
            commit: Commit immediately (False: flush only)

        Returns:
            Updated entity
        """
        self.db.add(entity)
        return self._save(entity, commit)

    def delete(self, entity: T, commit: bool = True) -> bool:
        """
        Delete an entity.

        Args:
            entity: Entity to delete
            commit: Commit immediately (False: flush only)

        Returns:
            True if deleted
        """
        self.db.delete(entity)
        if commit:
            self.db.commit()
        else:
            self.db.flush()
        return True

    def delete_by_id(self, id: Any, commit: bool = True) -> bool:
        """
        Delete entity by ID.

        Args:
            id: Primary key

        Returns:
            True if deleted, False if not found
        """
        entity = self.get_by_id(id)
        if entity:
            return self.delete(entity, commit=commit)
        return False

    def exists(self, id: Any) -> bool:
        """
        Check if entity exists.

        Args:
            id: Primary key

        Returns:
            True if exists
        """
        return self.get_by_id(id) is not None

    def _save(self, entity: T, commit: bool) -> T:
        if commit:
            self.db.commit()
            self.db.refresh(entity)
        else:
            self.db.flush()
        return entity


class TenantRepository(BaseRepository[T]):
    """
    Repository bound to one organization.

    Every query built through `_select()` carries the organization filter and
    every insert is forced into the organization, so a row owned by another
    tenant behaves exactly like a missing row.
    """

    def __init__(self, db_session: Session, model_class: Type[T], organization_id: int):
        super().__init__(db_session, model_class)
        if organization_id is None:
            raise ValueError("organization_id is required for tenant-scoped access")
        self.organization_id = organization_id

    def _select(self) -> SelectOfScalar[T]:
        return select(self.model_class).where(
            self.model_class.organization_id == self.organization_id
        )

    def get_by_id(self, id: Any) -> Optional[T]:
        statement = self._select().where(self.model_class.id == id)
        return self.db.exec(statement).first()

    def get_by_id_for_update(self, id: Any) -> Optional[T]:
        """Fetch and row-lock (SELECT ... FOR UPDATE) until the transaction ends."""
        statement = self._select().where(self.model_class.id == id).with_for_update()
        return self.db.exec(statement).first()

    def get_all(self, limit: int = 100, offset: int = 0) -> List[T]:
        statement = self._select()
        if hasattr(self.model_class, "created_at"):
            statement = statement.order_by(self.model_class.created_at.desc())
        statement = statement.offset(offset).limit(limit)
        return list(self.db.exec(statement).all())

    def create(self, entity: T, commit: bool = True) -> T:
        entity.organization_id = self.organization_id
        return super().create(entity, commit=commit)

    def update(self, entity: T, commit: bool = True) -> T:
        self._check_owned(entity)
        return super().update(entity, commit=commit)

    def delete(self, entity: T, commit: bool = True) -> bool:
        self._check_owned(entity)
        return super().delete(entity, commit=commit)

    def _check_owned(self, entity: T) -> None:
        if entity.organization_id != self.organization_id:
            raise ValueError(
                f"{self.model_class.__name__} {entity.id} is outside organization {self.organization_id}"
            )
