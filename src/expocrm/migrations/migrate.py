"""
Database Migration Runner

Applies the SQL files of this directory in name order:

    python -m expocrm.migrations.migrate
"""
import asyncio
import logging
import sys
from pathlib import Path

import asyncpg

from ..config import Config

logger = logging.getLogger("expocrm.migrations")


async def run_migrations(dsn: str = None) -> int:
    """
    Run all SQL migrations in order.

    A failing file is logged and the remaining files still run.

    Returns:
        Number of files that failed
    """
    migrations_dir = Path(__file__).parent
    dsn = dsn or Config.get_postgres_dsn()

    logger.info("Connecting to database...")
    conn = await asyncpg.connect(dsn)
    failed = 0
    try:
        for sql_file in sorted(migrations_dir.glob("*.sql")):
            logger.info(f"Running migration: {sql_file.name}")
            try:
                await conn.execute(sql_file.read_text(encoding="utf-8"))
                logger.info(f"  {sql_file.name} completed")
            except asyncpg.PostgresError as e:
                logger.error(f"  Error in {sql_file.name}: {e}")
                failed += 1
    finally:
        await conn.close()

    logger.info("Migrations complete")
    return failed


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    try:
        failed = asyncio.run(run_migrations())
    except (OSError, asyncpg.PostgresError) as e:
        logger.error(f"Connection failed: {e}")
        sys.exit(1)
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
