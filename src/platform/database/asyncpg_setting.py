"""
asyncpg connection pool owned by the DI container.

One `Database` instance per container; the pool is created lazily on the
event loop that first needs it and re-created if the loop changes (TestClient
and the app lifespan run on different loops).
"""

import asyncio
from typing import Optional

import asyncpg

from src.platform.exception.exceptions import StoreUnavailableError
from src.platform.logging.loguru_io import Logger


class Database:
    def __init__(
        self,
        *,
        dsn: str,
        min_size: int = 2,
        max_size: int = 20,
        command_timeout: float = 60.0,
        acquire_timeout: float = 10.0,
    ) -> None:
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self.acquire_timeout = acquire_timeout
        self._pool: Optional[asyncpg.Pool] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    async def get_pool(self) -> asyncpg.Pool:
        current_loop = asyncio.get_running_loop()

        # Fast path: pool already exists for this loop
        if self._pool is not None and self._loop is current_loop:
            return self._pool

        if self._pool is not None:
            Logger.base.warning('🔄 [DB] Event loop changed, dropping old asyncpg pool')
            self._pool.terminate()

        self._pool = await asyncpg.create_pool(
            self._dsn,
            min_size=self._min_size,
            max_size=self._max_size,
            command_timeout=self._command_timeout,
        )
        self._loop = current_loop
        Logger.base.info(
            f'🏊 [DB] asyncpg pool ready (min={self._min_size}, max={self._max_size})'
        )
        return self._pool

    async def warmup(self) -> int:
        """Acquire MIN_SIZE connections once so the first requests do not pay for connecting."""
        try:
            pool = await self.get_pool()
        except (OSError, asyncpg.PostgresConnectionError, asyncpg.CannotConnectNowError) as e:
            raise StoreUnavailableError() from e
        connections = []
        try:
            for i in range(self._min_size):
                try:
                    connections.append(await pool.acquire(timeout=self.acquire_timeout))
                except asyncio.TimeoutError:
                    Logger.base.warning(f'⚠️  [DB] Pool warmup timeout at {i + 1} connections')
                    break
            Logger.base.info(f'🔥 [DB] Pool warmup completed: {len(connections)} connections')
            return len(connections)
        finally:
            for conn in connections:
                await pool.release(conn)

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            self._loop = None
