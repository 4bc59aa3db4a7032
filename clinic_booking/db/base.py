import logging

from sqlalchemy import BigInteger, Enum, Integer, MetaData, event
from sqlalchemy.dialects import mysql
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

# Deterministic constraint names for Alembic and for error translation
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table)s",
    "pk": "pk_%(table_name)s",
}
metadata_obj = MetaData(naming_convention=convention)

Base = declarative_base(metadata=metadata_obj)

# BIGINT UNSIGNED on MySQL; SQLite only autoincrements a plain INTEGER primary key
Identifier = (
    BigInteger()
    .with_variant(mysql.BIGINT(unsigned=True), "mysql")
    .with_variant(Integer(), "sqlite")
)

MYSQL_TABLE_OPTIONS = {"mysql_engine": "InnoDB", "mysql_default_charset": "utf8mb4"}


def table_args(*items):
    """Build ``__table_args__`` with the MySQL storage options appended."""
    return (*items, dict(MYSQL_TABLE_OPTIONS))


def enum_column_type(enum_cls, name: str) -> Enum:
    """
    Enum type persisted by member *value* ("CheckedIn", "AB+", ...).

    Native ENUM on MySQL/PostgreSQL, a named CHECK constraint elsewhere.
    """
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        create_constraint=True,
        validate_strings=True,
    )


def _configure_sqlite_connection(dbapi_connection, connection_record):
    # the driver must not issue BEGIN itself, or SAVEPOINT does not nest
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _begin_sqlite_transaction(conn):
    conn.exec_driver_sql("BEGIN")


# Async engine and session factory
async def get_engine(database_url: str, echo: bool = False):
    engine = create_async_engine(database_url, echo=echo)
    if engine.dialect.name == "sqlite":
        # referential actions are off by default on SQLite
        event.listen(engine.sync_engine, "connect", _configure_sqlite_connection)
        event.listen(engine.sync_engine, "begin", _begin_sqlite_transaction)
        logger.debug("SQLite foreign keys and savepoints enabled for %s", database_url)
    return engine

async def get_session_factory(engine):
    return sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
