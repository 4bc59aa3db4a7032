"""
Typed constraint violations.

The database enforces every rule of the schema. When it rejects a statement the
driver raises ``sqlalchemy.exc.IntegrityError`` (MySQL reports some CHECK and
NOT NULL failures as ``OperationalError``). :func:`translate_integrity_error`
and :func:`classify_database_error` turn it into one of the exceptions below so
that callers can tell a duplicate email from a bad time window without parsing
driver messages themselves.
"""
import re
from typing import Optional

from sqlalchemy.exc import DBAPIError, IntegrityError


class ConstraintViolation(Exception):
    """A statement was rejected by a schema constraint."""

    def __init__(self, message: str, constraint: Optional[str] = None, table: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.constraint = constraint
        self.table = table


class UniqueViolation(ConstraintViolation):
    """Duplicate value in a unique column or a duplicate composite key."""


class CheckViolation(ConstraintViolation):
    """A CHECK rule (time window, duration, amount, enumerated set) failed."""


class ForeignKeyViolation(ConstraintViolation):
    """Missing parent row on insert, or a RESTRICT rule blocked a delete."""


class NotNullViolation(ConstraintViolation):
    """A required column was left empty."""


# PostgreSQL SQLSTATE class 23
_PG_CODES = {
    "23505": UniqueViolation,
    "23514": CheckViolation,
    "23503": ForeignKeyViolation,
    "23502": NotNullViolation,
}

# MySQL server error numbers
_MYSQL_CODES = {
    1062: UniqueViolation,
    1586: UniqueViolation,
    3819: CheckViolation,
    1216: ForeignKeyViolation,
    1217: ForeignKeyViolation,
    1451: ForeignKeyViolation,
    1452: ForeignKeyViolation,
    1048: NotNullViolation,
    1364: NotNullViolation,
}

# SQLite reports only a message
_SQLITE_PREFIXES = (
    ("UNIQUE constraint failed", UniqueViolation),
    ("CHECK constraint failed", CheckViolation),
    ("FOREIGN KEY constraint failed", ForeignKeyViolation),
    ("NOT NULL constraint failed", NotNullViolation),
)

_SQLITE_DETAIL = re.compile(r"constraint failed: (?P<detail>.+)$")
_MYSQL_CHECK_NAME = re.compile(r"Check constraint '(?P<name>[^']+)'")
_MYSQL_FK_NAME = re.compile(r"CONSTRAINT `(?P<name>[^`]+)`")
_MYSQL_KEY_NAME = re.compile(r"for key '(?:(?P<table>[^'.]+)\.)?(?P<name>[^']+)'")


def _driver_error(exc: DBAPIError):
    return getattr(exc, "orig", None) or exc


def _first_attr(sources, name: str):
    for source in sources:
        value = getattr(source, name, None)
        if value:
            return value
    return None


def _classify_pg(orig) -> Optional[ConstraintViolation]:
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    cls = _PG_CODES.get(code)
    if cls is None:
        return None
    # psycopg exposes the details on .diag, asyncpg on the wrapped exception
    sources = (orig, getattr(orig, "diag", None), getattr(orig, "__cause__", None))
    constraint = _first_attr(sources, "constraint_name")
    table = _first_attr(sources, "table_name")
    return cls(str(orig), constraint=constraint, table=table)


def _classify_mysql(orig) -> Optional[ConstraintViolation]:
    args = getattr(orig, "args", ())
    if not args or not isinstance(args[0], int):
        return None
    cls = _MYSQL_CODES.get(args[0])
    if cls is None:
        return None
    message = str(args[1]) if len(args) > 1 else str(orig)
    constraint = table = None
    for pattern in (_MYSQL_CHECK_NAME, _MYSQL_FK_NAME, _MYSQL_KEY_NAME):
        match = pattern.search(message)
        if match:
            constraint = match.group("name")
            table = match.groupdict().get("table")
            break
    return cls(message, constraint=constraint, table=table)


def _classify_sqlite(orig) -> Optional[ConstraintViolation]:
    message = str(orig)
    for prefix, cls in _SQLITE_PREFIXES:
        if not message.startswith(prefix):
            continue
        constraint = table = None
        match = _SQLITE_DETAIL.search(message)
        if match:
            detail = match.group("detail")
            if cls is CheckViolation:
                constraint = detail
            else:
                # "patients.email" or "doctor_specialty.doctor_id, doctor_specialty.specialty_id"
                table = detail.split(",")[0].split(".")[0].strip()
                constraint = detail
        return cls(message, constraint=constraint, table=table)
    return None


def classify_database_error(exc: DBAPIError) -> Optional[ConstraintViolation]:
    """
    Recognise a constraint failure in any driver error.

    Returns None when the error is not a known constraint failure, e.g. a lost
    connection reported as ``OperationalError``.
    """
    orig = _driver_error(exc)
    for classify in (_classify_pg, _classify_mysql, _classify_sqlite):
        violation = classify(orig)
        if violation is not None:
            return violation
    return None


def translate_integrity_error(exc: IntegrityError) -> ConstraintViolation:
    """Map a driver ``IntegrityError`` onto the matching :class:`ConstraintViolation`."""
    violation = classify_database_error(exc)
    if violation is None:
        violation = ConstraintViolation(str(_driver_error(exc)))
    return violation
