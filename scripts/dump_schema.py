# scripts/dump_schema.py
"""Print (or write) the CREATE TABLE script of the clinic schema."""
import argparse
import logging
from pathlib import Path

from clinic_booking.config.constants import DATABASE_NAME
from clinic_booking.config.settings import settings
from clinic_booking.db.schema import DIALECTS, render_schema

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("dump_schema")


def build_script(dialect: str) -> str:
    script = render_schema(dialect)
    if dialect == "mysql":
        header = (
            f"CREATE DATABASE IF NOT EXISTS {DATABASE_NAME} "
            f"CHARACTER SET utf8mb4 COLLATE utf8mb4_0900_ai_ci;\n"
            f"USE {DATABASE_NAME};\n\n"
        )
        script = header + script
    return script


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--dialect",
        choices=sorted(DIALECTS),
        default=settings.ddl_dialect,
        help="SQL dialect to render (default: %(default)s)",
    )
    parser.add_argument("--output", type=Path, help="write to this file instead of stdout")
    args = parser.parse_args()

    script = build_script(args.dialect)
    if args.output:
        args.output.write_text(script, encoding="utf-8")
        logger.info(f"Wrote {args.dialect} schema to {args.output}")
    else:
        print(script)


if __name__ == "__main__":
    main()
