"""
Classification of database failures into errors the HTTP layer understands.

Drivers report constraint violations differently (psycopg exposes SQLSTATE
codes, sqlite only a message), so both are inspected.
"""

from __future__ import annotations

from sqlalchemy.exc import (
    IntegrityError,
    NoResultFound,
    OperationalError,
    ProgrammingError,
    SQLAlchemyError,
)

UNIQUE_VIOLATION = "UNIQUE_VIOLATION"
FOREIGN_KEY_VIOLATION = "FOREIGN_KEY_VIOLATION"
UNDEFINED_TABLE = "UNDEFINED_TABLE"
DATABASE_ERROR = "DATABASE_ERROR"

_PG_CODES = {
    "23505": UNIQUE_VIOLATION,
    "23503": FOREIGN_KEY_VIOLATION,
    "42P01": UNDEFINED_TABLE,
}

MESSAGES = {
    UNIQUE_VIOLATION: "user with a given email or username already exist",
    FOREIGN_KEY_VIOLATION: "invalid reference code",
    UNDEFINED_TABLE: "database error: invalid table",
    DATABASE_ERROR: "database error",
}


class RepositoryError(Exception):
    """Base class for persistence failures."""


class DBError(RepositoryError):
    """A classified database failure. Two DBErrors are equal when their codes are."""

    def __init__(self, code: str, message: str | None = None):
        self.code = code
        self.message = message or MESSAGES.get(code, MESSAGES[DATABASE_ERROR])
        super().__init__(self.message)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DBError):
            return NotImplemented
        return self.code == other.code

    def __hash__(self) -> int:
        return hash(self.code)


class NotFoundError(RepositoryError):
    def __init__(self, message: str = "data not found"):
        super().__init__(message)
        self.message = message


def _classify(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if pgcode in _PG_CODES:
        return _PG_CODES[pgcode]
    text = str(orig if orig is not None else exc).lower()
    if isinstance(exc, IntegrityError):
        if "unique" in text:
            return UNIQUE_VIOLATION
        if "foreign key" in text:
            return FOREIGN_KEY_VIOLATION
    if isinstance(exc, (OperationalError, ProgrammingError)) and "no such table" in text:
        return UNDEFINED_TABLE
    return DATABASE_ERROR


def translate_db_error(exc: SQLAlchemyError) -> RepositoryError:
    """Map a SQLAlchemy exception to a DBError or NotFoundError."""
    if isinstance(exc, NoResultFound):
        return NotFoundError()
    return DBError(_classify(exc))
