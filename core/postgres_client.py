"""
PostgreSQL Client Wrapper

asyncpg connection pool with the small query surface the repositories use.

Usage:
    from core.postgres_client import PostgresClient

    db = PostgresClient(settings.postgres, service_name="task_service")
    await db.connect()
    rows = await db.query("SELECT * FROM tasks WHERE status = $1", ["TODO"])
"""

import logging
from typing import Any, Dict, List, Optional

import asyncpg

from core.config.infra_config import PostgresConfig

logger = logging.getLogger(__name__)


class PostgresClient:
    """
    PostgreSQL client wrapper.

    Rows are returned as plain dicts so repositories never leak
    asyncpg.Record objects into the service layer.
    """

    def __init__(self, config: PostgresConfig, service_name: str):
        self.config = config
        self.service_name = service_name
        self._pool: Optional[asyncpg.Pool] = None

    async def connect(self):
        """Create the connection pool"""
        if self._pool is not None:
            return
        self._pool = await asyncpg.create_pool(
            dsn=self.config.dsn,
            min_size=self.config.min_pool_size,
            max_size=self.config.max_pool_size,
        )
        logger.info(
            f"PostgreSQL pool initialized for {self.service_name}: "
            f"{self.config.host}:{self.config.port}/{self.config.database}"
        )

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def query(self, sql: str, params: Optional[List[Any]] = None) -> List[Dict[str, Any]]:
        """Execute query and return results"""
        pool = self._require_pool()
        rows = await pool.fetch(sql, *(params or []))
        return [dict(row) for row in rows]

    async def query_row(self, sql: str, params: Optional[List[Any]] = None) -> Optional[Dict[str, Any]]:
        """Execute query and return single row"""
        pool = self._require_pool()
        row = await pool.fetchrow(sql, *(params or []))
        return dict(row) if row is not None else None

    async def execute(self, sql: str, params: Optional[List[Any]] = None) -> int:
        """Execute SQL statement, returning the affected row count"""
        pool = self._require_pool()
        status = await pool.execute(sql, *(params or []))
        # asyncpg returns the command tag, e.g. "DELETE 1"
        try:
            return int(status.split()[-1])
        except (ValueError, IndexError):
            return 0

    async def close(self):
        """Close the pool"""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info(f"PostgreSQL pool closed for {self.service_name}")

    def _require_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError(f"PostgreSQL pool for {self.service_name} is not connected")
        return self._pool
