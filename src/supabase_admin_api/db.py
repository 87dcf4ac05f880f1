from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import asyncpg

from .errors import DatabaseError, DatabaseUnavailableError

_DB_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError, TimeoutError)


@dataclass(frozen=True)
class PoolConfig:
    max_size: int = 10
    min_size: int = 0
    # seconds
    idle_timeout: float = 20.0
    connect_timeout: float = 10.0

    @classmethod
    def from_settings(cls, settings: Any) -> PoolConfig:
        return cls(
            max_size=int(settings.db_pool_max),
            min_size=int(settings.db_pool_min),
            idle_timeout=float(settings.db_pool_idle_timeout),
            connect_timeout=float(settings.db_connect_timeout),
        )


async def create_pool(dsn: str, config: PoolConfig | None = None) -> asyncpg.Pool:
    """
    Build the bounded connection pool.

    With `min_size=0` nothing is connected until the first acquire, so an
    unreachable database never delays startup. Acquirers beyond `max_size`
    wait inside asyncpg for a connection to be released.
    """
    config = config or PoolConfig()
    return await asyncpg.create_pool(
        dsn=dsn,
        min_size=min(config.min_size, config.max_size),
        max_size=config.max_size,
        max_inactive_connection_lifetime=config.idle_timeout,
        timeout=config.connect_timeout,
        # Transaction poolers cannot keep prepared statements across checkouts
        statement_cache_size=0,
    )


def _wrap(exc: Exception) -> DatabaseError:
    if isinstance(exc, asyncpg.PostgresError):
        return DatabaseError(str(exc), sqlstate=getattr(exc, "sqlstate", None), cause=exc)
    if isinstance(exc, (OSError, asyncio.TimeoutError, TimeoutError, asyncpg.InterfaceError)):
        return DatabaseUnavailableError(f"Database unreachable: {exc}", cause=exc)
    return DatabaseError(str(exc), cause=exc)


@dataclass(frozen=True)
class DirectDB:
    pool: asyncpg.Pool

    async def server_time(self) -> datetime:
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow("SELECT NOW() AS current_time;")
        except _DB_ERRORS as exc:
            raise _wrap(exc) from exc
        if row is None:
            raise DatabaseError("SELECT NOW() returned no row")
        return row["current_time"]

    async def database_info(self) -> dict[str, Any]:
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    """
                    SELECT
                        current_database() AS database,
                        current_user AS "user",
                        version() AS version,
                        NOW() AS timestamp;
                    """
                )
        except _DB_ERRORS as exc:
            raise _wrap(exc) from exc
        if not row:
            return {}
        return dict(row)

    async def close(self) -> None:
        await self.pool.close()
