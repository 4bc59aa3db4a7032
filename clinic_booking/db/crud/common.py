import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.db.errors import classify_database_error, translate_integrity_error

logger = logging.getLogger(__name__)


def _reject(action: str, exc: DBAPIError):
    if isinstance(exc, IntegrityError):
        violation = translate_integrity_error(exc)
    else:
        # MySQL reports some CHECK and NOT NULL failures as OperationalError
        violation = classify_database_error(exc)
        if violation is None:
            raise exc
    logger.warning(
        f"CRUD: {action} rejected ({type(violation).__name__}, "
        f"constraint={violation.constraint}): {violation.message}"
    )
    raise violation from exc


@asynccontextmanager
async def write_or_raise(db: AsyncSession, action: str) -> AsyncIterator[None]:
    """
    Run the writes of the block inside a SAVEPOINT, then commit.

    Objects must be added or changed inside the block. If the database rejects
    the write, only the savepoint is rolled back: objects the caller already
    holds stay loaded and the session remains usable, and the matching
    ConstraintViolation is raised.
    """
    try:
        async with db.begin_nested():
            yield
    except DBAPIError as exc:
        _reject(action, exc)
    await db.commit()


async def execute_or_raise(db: AsyncSession, stmt: Any, action: str):
    """Execute a DML statement and commit it, translating constraint errors."""
    async with write_or_raise(db, action):
        result = await db.execute(stmt)
    return result


async def delete_or_raise(db: AsyncSession, stmt: Any, action: str) -> bool:
    """
    Execute a single DELETE and commit it.

    The database applies CASCADE / SET NULL to dependent rows, so objects
    already loaded in the session may be stale afterwards; the identity map
    is cleared once the delete has gone through.

    Returns:
        bool: True if a row was deleted
    """
    result = await execute_or_raise(db, stmt.execution_options(synchronize_session=False), action)
    db.expunge_all()
    return result.rowcount > 0
