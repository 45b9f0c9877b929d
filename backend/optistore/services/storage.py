# Overview: Transaction helpers shared by the services.

from __future__ import annotations

from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from .errors import ServiceError, StorageError


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    """
    return query.with_for_update()


@contextmanager
def storage_errors(action: str):
    """
    Roll back and re-raise database failures as StorageError.

    ServiceErrors raised inside the block also roll back the session but
    propagate unchanged. There is no retry: the caller decides whether to
    try again.
    """
    try:
        yield
    except ServiceError:
        db.session.rollback()
        raise
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError(f"Failed to {action}") from exc
