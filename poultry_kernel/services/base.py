"""
BaseService -- abstract base for all kernel services.

Responsibility:
    Provides the common constructor and session-handling contract for the
    kernel's write services.  Kernel services receive a SQLAlchemy
    ``Session`` and use ``session.flush()`` -- never ``session.commit()``.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.

Invariants enforced:
    - Transaction boundaries: kernel services flush within the caller's
      transaction and never commit or roll back themselves.  The module
      service (or LedgerAPI, or the test harness) owns commit/rollback, so a
      distribution's batch counters, customer debt and waste entry land in
      one atomic unit.
    - Lost updates on versioned rows surface as OptimisticLockError.
"""

from abc import ABC
from contextlib import contextmanager
from typing import Generic, Iterator, TypeVar
from uuid import UUID

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from poultry_kernel.db.base import Base
from poultry_kernel.exceptions import OptimisticLockError

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for all kernel services.

    Guarantees:
        - The service never calls ``session.commit()`` or
          ``session.rollback()``.

    Non-goals:
        - Does NOT provide query-only (read) methods -- those belong in
          ``poultry_kernel/selectors/``.
    """

    def __init__(self, session: Session):
        self.session = session

    def _flush_versioned(self, entity_type: str, entity_id: UUID) -> None:
        """Flush, translating a version mismatch into OptimisticLockError."""
        try:
            self.session.flush()
        except StaleDataError as exc:
            raise OptimisticLockError(entity_type, str(entity_id)) from exc


@contextmanager
def owned_transaction(
    session: Session,
    entity_type: str,
    entity_id: UUID | str | None = None,
) -> Iterator[None]:
    """
    Transaction boundary for module services that own their commit.

    Commits on normal exit.  On any exception the session is rolled back
    and the exception re-raised; a version mismatch detected while
    committing is raised as OptimisticLockError.
    """
    try:
        yield
        session.commit()
    except StaleDataError as exc:
        session.rollback()
        raise OptimisticLockError(entity_type, str(entity_id or "unknown")) from exc
    except Exception:
        session.rollback()
        raise
