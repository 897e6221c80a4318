"""
Async SQLAlchemy engine and session management for the embedded SQLite store.
Uses the aiosqlite driver. One Database is built per process in the app lifespan.
CRITICAL: expire_on_commit=False keeps returned rows readable after the session closes.
"""
import logging
from pathlib import Path
from typing import Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class Database:
    """Owns the engine and session factory for a single database URL."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo)
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    @property
    def file_path(self) -> Optional[Path]:
        """Filesystem path of the SQLite file, None for memory or non-SQLite URLs."""
        url = make_url(self.url)
        if not url.drivername.startswith("sqlite") or not url.database:
            return None
        if url.database == ":memory:":
            return None
        return Path(url.database)

    def file_exists(self) -> bool:
        path = self.file_path
        return bool(path and path.exists())

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")
