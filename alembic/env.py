# alembic/env.py
from logging.config import fileConfig
import asyncio

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine

from clinic_booking.db.base import Base          # import your MetaData
import clinic_booking.db.models  # noqa: F401
from clinic_booking.config.settings import settings

#####################################################################
# 1.  URLs
#####################################################################

config = context.config

# an explicit sqlalchemy.url (alembic.ini or Config object) wins over settings
ASYNC_URL = config.get_main_option("sqlalchemy.url") or str(settings.database_url)
_url = make_url(ASYNC_URL)
SYNC_URL = _url.set(drivername=_url.get_backend_name())  # sqlite://, mysql://, postgresql://

#####################################################################
# 2.  Logging
#####################################################################

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

#####################################################################
# 3.  Metadata for 'autogenerate'
#####################################################################

target_metadata = Base.metadata

#####################################################################
# 4.  Offline migrations (no DB connection)
#####################################################################

def run_migrations_offline() -> None:
    context.configure(
        url=SYNC_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=SYNC_URL.get_backend_name() == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()

#####################################################################
# 5.  Online migrations
#####################################################################

def do_run_migrations(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()

async def run_async_migrations() -> None:
    engine = create_async_engine(
        ASYNC_URL,
        poolclass=pool.NullPool,
    )
    async with engine.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await engine.dispose()

def run_migrations_online() -> None:
    # a caller (tests, scripts) may hand over an already open sync connection
    connection = config.attributes.get("connection")
    if connection is not None:
        do_run_migrations(connection)
    else:
        asyncio.run(run_async_migrations())

#####################################################################
# 6.  Entrypoint
#####################################################################

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
