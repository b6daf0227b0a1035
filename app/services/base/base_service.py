"""
Service base class and operation timing.

Services own the unit of work: repositories flush, ``BaseService.transaction``
commits on success and rolls back on any exception.
"""

import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Dict, Generic, Optional, TypeVar

from sqlalchemy.orm import Session

from app.config.logging import get_logger
from app.core.exceptions import BaseAppException

logger = logging.getLogger(__name__)

TModel = TypeVar("TModel")
TRepo = TypeVar("TRepo")


def track_performance(operation_name: str):
    """Log duration and outcome of a service operation.

    Domain rejections (``BaseAppException``) log at warning with their error
    code; anything else logs at error with a traceback. Both re-raise.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            started = time.perf_counter()
            context = {"operation": operation_name}
            try:
                result = func(*args, **kwargs)
            except BaseAppException as e:
                elapsed = time.perf_counter() - started
                logger.warning(
                    f"{operation_name} rejected after {elapsed:.3f}s: {e}",
                    extra={**context, "error_code": e.error_code.value},
                )
                raise
            except Exception as e:
                elapsed = time.perf_counter() - started
                logger.error(
                    f"{operation_name} failed after {elapsed:.3f}s: {e}",
                    extra=context,
                    exc_info=True,
                )
                raise
            elapsed = time.perf_counter() - started
            logger.info(f"{operation_name} completed in {elapsed:.3f}s", extra=context)
            return result
        return wrapper
    return decorator


class BaseService(Generic[TModel, TRepo]):
    """Holds the session, the primary repository and a class-scoped logger."""

    def __init__(self, repository: Optional[TRepo], db_session: Session):
        self.repository: Optional[TRepo] = repository
        self.db: Session = db_session
        self._logger = get_logger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    @contextmanager
    def transaction(self):
        """Commit when the block exits cleanly, roll back and re-raise otherwise."""
        try:
            yield self.db
        except BaseAppException:
            self._rollback()
            raise
        except Exception as e:
            self._rollback()
            self._logger.error(f"Transaction failed: {e}", exc_info=True)
            raise
        self._commit()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception as e:
            self._logger.error(f"Commit failed: {e}", exc_info=True)
            self._rollback()
            raise

    def _rollback(self) -> None:
        try:
            self.db.rollback()
        except Exception as e:
            # the caller re-raises the failure that triggered the rollback
            self._logger.warning(f"Rollback failed: {e}")

    def _log_operation(self, operation: str, entity_id: Optional[Any] = None, extra: Optional[Dict[str, Any]] = None) -> None:
        context: Dict[str, Any] = {"operation": operation}
        if entity_id is not None:
            context["entity_id"] = str(entity_id)
        context.update(extra or {})
        self._logger.info(f"{operation}: {entity_id}" if entity_id is not None else operation, extra=context)
