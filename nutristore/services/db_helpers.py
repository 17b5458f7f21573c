"""
Database Helper Functions

Transaction boundary used by every mutating store operation.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from nutristore.extensions import db
from nutristore.services.errors import ConflictError, NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE codes
_PG_UNIQUE_VIOLATION = "23505"
_PG_FOREIGN_KEY_VIOLATION = "23503"


def _violation_kind(exc: IntegrityError) -> str:
    orig = exc.orig
    pgcode = getattr(orig, "pgcode", None)
    text = str(orig)
    if pgcode == _PG_UNIQUE_VIOLATION or "UNIQUE constraint failed" in text:
        return "unique"
    if pgcode == _PG_FOREIGN_KEY_VIOLATION or "FOREIGN KEY constraint failed" in text:
        return "foreign_key"
    return "other"


@contextmanager
def atomic() -> Iterator[Session]:
    """
    Run a block as a single transaction.

    Commits when the block finishes and rolls back on any error. Database
    errors are translated into store errors.

    Raises:
        ConflictError: A unique constraint was violated
        NotFoundError: A foreign key referenced a missing row
        ValidationError: A CHECK or NOT NULL constraint rejected the data
        StorageError: Any other database failure
    """
    session = db.session
    try:
        yield session
        session.commit()
    except IntegrityError as e:
        session.rollback()
        kind = _violation_kind(e)
        if kind == "unique":
            raise ConflictError("Record conflicts with an existing one") from e
        if kind == "foreign_key":
            raise NotFoundError("Referenced record does not exist") from e
        raise ValidationError(f"Rejected by database constraint: {e.orig}") from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Database failure: {e}")
        raise StorageError(f"Database failure: {e}") from e
    except Exception:
        session.rollback()
        raise


@contextmanager
def reading() -> Iterator[Session]:
    """Run a read-only block, translating database failures into StorageError."""
    try:
        yield db.session
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Database failure: {e}")
        raise StorageError(f"Database failure: {e}") from e
