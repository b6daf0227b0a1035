"""
Generic repository over a single mapped model.

Repositories never commit. They flush so generated ids and defaults are
visible to the calling service, which owns the transaction.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import Select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.logging import get_logger
from app.core.exceptions import NotFoundError
from app.models.base import BaseModel

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)


class RepositoryError(Exception):
    """Wraps a SQLAlchemy failure with the repository operation that hit it."""

    def __init__(self, operation: str, model: str, cause: Exception):
        self.operation = operation
        self.model = model
        super().__init__(f"{model} {operation} failed: {cause}")


class BaseRepository(Generic[ModelType]):
    def __init__(self, model: Type[ModelType], db: Session):
        self.model = model
        self.db = db

    def _fail(self, operation: str, exc: SQLAlchemyError) -> RepositoryError:
        logger.error(f"{self.model.__name__} {operation} failed: {exc}")
        return RepositoryError(operation, self.model.__name__, exc)

    def _all(self, stmt: Select) -> List[Any]:
        """Run a select and materialize the scalar rows."""
        try:
            return list(self.db.scalars(stmt))
        except SQLAlchemyError as e:
            raise self._fail("query", e) from e

    def create(self, entity: ModelType) -> ModelType:
        try:
            self.db.add(entity)
            self.db.flush()
        except SQLAlchemyError as e:
            raise self._fail("create", e) from e
        logger.debug(f"Created {self.model.__name__} {entity.id}")
        return entity

    def find_by_id(self, id: Optional[str]) -> Optional[ModelType]:
        if id is None:
            return None
        try:
            return self.db.get(self.model, id)
        except SQLAlchemyError as e:
            raise self._fail("lookup", e) from e

    def get_by_id(self, id: str) -> ModelType:
        """Like ``find_by_id`` but raises ``NotFoundError`` for a missing row."""
        entity = self.find_by_id(id)
        if entity is None:
            raise NotFoundError(self.model.__name__, id)
        return entity

    def update(self, entity: ModelType, data: Dict[str, Any]) -> ModelType:
        """Set the given attributes on ``entity`` and flush."""
        for key, value in data.items():
            if not hasattr(entity, key):
                raise AttributeError(f"{self.model.__name__} has no field '{key}'")
            setattr(entity, key, value)
        try:
            self.db.flush()
        except SQLAlchemyError as e:
            raise self._fail("update", e) from e
        return entity

    def delete(self, entity: ModelType) -> None:
        try:
            self.db.delete(entity)
            self.db.flush()
        except SQLAlchemyError as e:
            raise self._fail("delete", e) from e
        logger.debug(f"Deleted {self.model.__name__} {entity.id}")
