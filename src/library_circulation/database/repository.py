"""
Repository pattern implementation for the library circulation entity store.

Services never touch SQLAlchemy objects directly. Every repository method
takes and returns Pydantic models, so a caller always holds a detached
snapshot: mutating a returned model changes nothing until it is passed back
to ``save``.

The base repository provides the keyed-store contract shared by every
entity kind (save, get_by_id, get_all, exists, delete, count); specialized
repositories add the finders the services need.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, literal_column, select
from sqlalchemy.orm import Session

from ..database.schema import Base
from ..database.session import safe_commit, safe_query

# Type variables for generic repository
ModelType = TypeVar("ModelType", bound=Base)
ResponseSchemaType = TypeVar("ResponseSchemaType", bound=BaseModel)


class BaseRepository(ABC, Generic[ModelType, ResponseSchemaType]):
    """
    Abstract base repository providing keyed CRUD operations.

    ``save`` is an upsert: inserting a new entity and replacing an existing
    one under the same key are the same operation. ``get_all`` returns
    entities in insertion order.
    """

    def __init__(self, session: Session):
        """Initialize repository with database session."""
        self.session = session

    @property
    @abstractmethod
    def model_class(self) -> type[ModelType]:
        """Return the SQLAlchemy model class."""

    @property
    @abstractmethod
    def response_schema(self) -> type[ResponseSchemaType]:
        """Return the Pydantic response schema."""

    @property
    def key_field(self) -> str:
        """Name of the identifying attribute on both model and schema."""
        return "id"

    @property
    def _key_column(self):
        return getattr(self.model_class, self.key_field)

    def _to_response_model(self, db_obj: ModelType) -> ResponseSchemaType:
        """Convert database model to Pydantic response model."""
        return self.response_schema.model_validate(db_obj, from_attributes=True)

    def _to_row_values(self, entity: ResponseSchemaType) -> dict[str, Any]:
        """Column values for an entity; enums stay as members for ``Enum`` columns."""
        return entity.model_dump()

    def _ordered(self, query):
        """Apply insertion ordering to a select."""
        return query.order_by(self.model_class.created_at, literal_column("rowid"))

    def _fetch(self, key: str) -> ModelType | None:
        query = select(self.model_class).where(self._key_column == key)
        return safe_query(
            self.session,
            lambda s: s.execute(query).scalar_one_or_none(),
            f"Failed to get {self.model_class.__name__} by {self.key_field}",
        )

    def _fetch_all(self, query, error_msg: str) -> list[ResponseSchemaType]:
        results = safe_query(
            self.session,
            lambda s: s.execute(self._ordered(query)).scalars().all(),
            error_msg,
        )
        return [self._to_response_model(item) for item in results]

    def save(self, entity: ResponseSchemaType) -> ResponseSchemaType:
        """
        Insert or replace an entity under its key.

        Args:
            entity: Pydantic model to store

        Returns:
            A fresh snapshot of the stored entity

        Raises:
            RepositoryException: On database errors
        """
        values = self._to_row_values(entity)
        key = values[self.key_field]

        db_obj = self._fetch(key)
        if db_obj is None:
            db_obj = self.model_class(**values)
            self.session.add(db_obj)
        else:
            for field, value in values.items():
                setattr(db_obj, field, value)

        safe_commit(self.session, f"save {self.model_class.__name__}")
        return self._to_response_model(db_obj)

    def get_by_id(self, key: str) -> ResponseSchemaType | None:
        """
        Get entity by key.

        Returns:
            Pydantic model or None if not found

        Raises:
            RepositoryException: On database errors
        """
        db_obj = self._fetch(key)
        if db_obj is None:
            return None
        return self._to_response_model(db_obj)

    def get_all(self) -> list[ResponseSchemaType]:
        """All entities, oldest first."""
        return self._fetch_all(
            select(self.model_class),
            f"Failed to list {self.model_class.__name__} entities",
        )

    def exists(self, key: str) -> bool:
        query = select(func.count()).select_from(self.model_class).where(self._key_column == key)
        count = safe_query(
            self.session, lambda s: s.execute(query).scalar(), "Failed to check existence"
        )
        return count > 0

    def delete(self, key: str) -> bool:
        """
        Delete entity by key.

        Returns:
            True if deleted, False if not found

        Raises:
            RepositoryException: On database errors
        """
        db_obj = self._fetch(key)
        if db_obj is None:
            return False

        self.session.delete(db_obj)
        safe_commit(self.session, f"delete {self.model_class.__name__}")
        return True

    def count(self) -> int:
        query = select(func.count()).select_from(self.model_class)
        return (
            safe_query(
                self.session,
                lambda s: s.execute(query).scalar(),
                f"Failed to count {self.model_class.__name__} entities",
            )
            or 0
        )
