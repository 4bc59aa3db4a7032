"""
Create, drop and render the clinic schema.

The declarative models are the only definition of the schema; everything here
derives from ``Base.metadata``.
"""
import logging
from typing import List

from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.schema import CreateIndex, CreateTable

import clinic_booking.db.models  # noqa: F401  (registers every table)
from clinic_booking.db.base import Base

logger = logging.getLogger(__name__)

DIALECTS = {
    "mysql": mysql.dialect,
    "postgresql": postgresql.dialect,
    "sqlite": sqlite.dialect,
}


def table_names() -> List[str]:
    """Table names in creation (dependency) order."""
    return [table.name for table in Base.metadata.sorted_tables]


async def create_schema(engine: AsyncEngine) -> None:
    """Create every missing table, index and constraint on ``engine``."""
    logger.info("Creating clinic schema on %s", engine.url.render_as_string(hide_password=True))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    logger.info("Schema ready: %d tables", len(Base.metadata.tables))


async def drop_schema(engine: AsyncEngine) -> None:
    """Drop every table of the clinic schema, dependents first."""
    logger.warning("Dropping clinic schema on %s", engine.url.render_as_string(hide_password=True))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all, checkfirst=True)


def render_schema(dialect: str = "mysql") -> str:
    """
    Render the schema as a DDL script for ``dialect``.

    Each table is followed by its indexes; every statement ends with ``;``.

    Args:
        dialect (str): one of ``mysql``, ``postgresql`` or ``sqlite``

    Returns:
        str: the script, statements separated by blank lines

    Raises:
        ValueError: if the dialect is not supported
    """
    try:
        target = DIALECTS[dialect]()
    except KeyError:
        raise ValueError(
            f"Unsupported dialect '{dialect}', expected one of {sorted(DIALECTS)}"
        ) from None

    statements = []
    for table in Base.metadata.sorted_tables:
        statements.append(str(CreateTable(table).compile(dialect=target)).strip())
        for index in sorted(table.indexes, key=lambda ix: ix.name):
            statements.append(str(CreateIndex(index).compile(dialect=target)).strip())

    logger.debug("Rendered %d DDL statements for dialect %s", len(statements), dialect)
    return "\n\n".join(f"{statement};" for statement in statements) + "\n"
