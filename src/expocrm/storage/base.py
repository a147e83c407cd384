"""
Base Storage

Base class for PostgreSQL storage with a shared connection pool.
"""
import asyncpg
import asyncio
import logging
import os
import time
from typing import Optional, Any, Iterable

from ..config import Config

logger = logging.getLogger("expocrm.storage")


class BaseStorage:
    """
    Base storage class with PostgreSQL connection pool.

    One storage creates the pool (init()); the others borrow it
    (init(pool=...)) and never close it.
    """

    def __init__(self, postgres_dsn: str = "postgresql://postgres@localhost/expocrm"):
        """
        Initialize base storage.

        Args:
            postgres_dsn: PostgreSQL connection DSN
        """
        self.pg_pool: Optional[asyncpg.Pool] = None
        self.pg_dsn = postgres_dsn
        self.process_id = os.getpid()
        self._owns_pool = False
        self._initialized = False

    async def init(self, pool: Optional[asyncpg.Pool] = None):
        """Initialize storage - connect to PostgreSQL or borrow an existing pool"""
        if self._initialized:
            return

        if pool is not None:
            self.pg_pool = pool
            self._initialized = True
            return

        start_time = time.time()
        logger.info(f"Initializing {type(self).__name__}...")

        try:
            await self._init_postgres()
            self._owns_pool = True
            self._initialized = True

            duration_ms = round((time.time() - start_time) * 1000, 2)
            logger.info(f"{type(self).__name__} initialized in {duration_ms}ms")
        except Exception as e:
            logger.error(f"Failed to initialize {type(self).__name__}: {e}")
            raise

    async def _init_postgres(self):
        """Initialize PostgreSQL connection pool with retries"""
        max_retries = 3
        retry_delay = 1

        current_pid = os.getpid()

        # Handle process fork - need new pool
        if self.pg_pool is not None and self.process_id != current_pid:
            logger.info(f"New process detected (old: {self.process_id}, new: {current_pid}), creating new pool")
            self.pg_pool = None

        self.process_id = current_pid

        for attempt in range(1, max_retries + 1):
            try:
                self.pg_pool = await asyncpg.create_pool(
                    self.pg_dsn,
                    min_size=Config.DB_POOL_MIN_SIZE,
                    max_size=Config.DB_POOL_MAX_SIZE,
                    command_timeout=60
                )

                # Test connection
                async with self.pg_pool.acquire() as conn:
                    await conn.fetchval("SELECT 1")

                logger.info(f"PostgreSQL connected (attempt {attempt}/{max_retries})")
                return

            except (OSError, asyncpg.PostgresError) as e:
                logger.error(f"PostgreSQL connection failed (attempt {attempt}/{max_retries}): {e}")
                if attempt < max_retries:
                    logger.info(f"Retrying in {retry_delay}s...")
                    await asyncio.sleep(retry_delay)

        raise ConnectionError("Failed to connect to PostgreSQL after all retries")

    async def close(self):
        """Close database connections (only the pool owner closes the pool)"""
        if self.pg_pool and self._owns_pool:
            await self.pg_pool.close()
            logger.info(f"{type(self).__name__} closed")
        self.pg_pool = None
        self._owns_pool = False
        self._initialized = False

    async def execute(self, query: str, *args) -> str:
        """Execute a query and return status"""
        async with self.pg_pool.acquire() as conn:
            return await conn.execute(query, *args)

    async def fetch(self, query: str, *args) -> list:
        """Fetch multiple rows"""
        async with self.pg_pool.acquire() as conn:
            return await conn.fetch(query, *args)

    async def fetchrow(self, query: str, *args) -> Optional[asyncpg.Record]:
        """Fetch single row"""
        async with self.pg_pool.acquire() as conn:
            return await conn.fetchrow(query, *args)

    async def fetchval(self, query: str, *args) -> Any:
        """Fetch single value"""
        async with self.pg_pool.acquire() as conn:
            return await conn.fetchval(query, *args)

    async def ping(self) -> bool:
        """True if the pool answers a trivial query"""
        if not self.pg_pool:
            return False
        try:
            return await self.fetchval("SELECT 1") == 1
        except (OSError, asyncpg.PostgresError) as e:
            logger.warning(f"PostgreSQL ping failed: {e}")
            return False

    async def update_columns(
        self,
        table: str,
        row_id,
        updates: dict,
        allowed: Iterable[str],
    ) -> Optional[asyncpg.Record]:
        """
        Partial update: SET only the allowed keys present in updates.

        updated_at is always bumped. Returns the updated row, or None if
        no row has this id.
        """
        columns = [key for key in allowed if key in updates]
        assignments = [f"{col} = ${i + 2}" for i, col in enumerate(columns)]
        assignments.append("updated_at = NOW()")
        query = f"UPDATE {table} SET {', '.join(assignments)} WHERE id = $1 RETURNING *"
        return await self.fetchrow(query, row_id, *[updates[col] for col in columns])

    @staticmethod
    def affected(status: str) -> int:
        """Row count from an asyncpg status string ('DELETE 3' -> 3)"""
        try:
            return int(status.split()[-1])
        except (AttributeError, IndexError, ValueError):
            return 0
