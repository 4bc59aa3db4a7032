# scripts/create_schema.py
import argparse
import asyncio
import logging

from clinic_booking.config.settings import settings
from clinic_booking.db.base import get_engine
from clinic_booking.db.schema import create_schema, drop_schema, table_names

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("create_schema")


async def main(drop: bool) -> None:
    engine = await get_engine(settings.database_url, echo=settings.database_echo)
    try:
        if drop:
            await drop_schema(engine)
        await create_schema(engine)
        logger.info("Tables: %s", ", ".join(table_names()))
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Create the clinic schema on the configured database."
    )
    parser.add_argument("--drop", action="store_true", help="drop every table first")
    args = parser.parse_args()
    asyncio.run(main(args.drop))
