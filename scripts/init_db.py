#!/usr/bin/env python3
"""
Create the database schema.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --drop --force
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import inspect

from app.db.database import drop_db, engine, init_db

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def main_async(drop: bool = False) -> None:
    """Main async function."""
    if drop:
        logger.info("Dropping existing tables...")
        await drop_db()

    logger.info("Creating tables...")
    await init_db()

    async with engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    logger.info(f"Tables present: {', '.join(sorted(tables))}")

    await engine.dispose()


def main():
    parser = argparse.ArgumentParser(description="Create the database schema")
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Drop all tables before creating them",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Do not ask for confirmation before dropping",
    )

    args = parser.parse_args()

    if args.drop and not args.force:
        confirm = input("All tables and data will be deleted. Continue? (y/N): ")
        if confirm.lower() != "y":
            logger.info("Cancelled.")
            return

    asyncio.run(main_async(drop=args.drop))


if __name__ == "__main__":
    main()
