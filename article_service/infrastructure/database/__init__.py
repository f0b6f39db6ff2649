"""
Database Infrastructure
=======================

Manages database connections, session lifecycle, and engine configuration.

Uses SQLAlchemy 2.0 with asyncpg for async PostgreSQL operations. One
``Database`` is created at startup, kept on ``app.state`` and disposed at
shutdown; there is no module-level engine.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional, Union

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from article_service.config import DatabaseSettings
from article_service.core import DatabaseConnectionException
from article_service.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    SQLAlchemy 2.0 style using DeclarativeBase.
    """
    pass


def build_database_url(db: DatabaseSettings) -> URL:
    """Build the asyncpg URL from connection settings, SSL disabled."""
    return URL.create(
        "postgresql+asyncpg",
        username=db.user,
        password=db.password or None,
        host=db.host,
        port=db.port,
        database=db.name,
        query={"ssl": "disable"},
    )


class Database:
    """
    Pooled async engine plus session factory.

    Args:
        url: SQLAlchemy URL (string or ``URL``)
        echo: Log every SQL statement
        pool_size: Pool size, ignored by pools that don't support it
        max_overflow: Overflow connections beyond ``pool_size``
    """

    def __init__(
        self,
        url: Union[str, URL],
        echo: bool = False,
        pool_size: Optional[int] = None,
        max_overflow: Optional[int] = None,
    ):
        engine_kwargs = {"echo": echo, "pool_pre_ping": True}
        if pool_size is not None:
            engine_kwargs["pool_size"] = pool_size
        if max_overflow is not None:
            engine_kwargs["max_overflow"] = max_overflow

        self._url = url
        self._engine: Optional[AsyncEngine] = create_async_engine(url, **engine_kwargs)
        self._session_maker = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Prevent lazy loading after commit
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, db: DatabaseSettings, echo: bool = False) -> "Database":
        return cls(
            build_database_url(db),
            echo=echo,
            pool_size=db.pool_size,
            max_overflow=db.max_overflow,
        )

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database has been closed")
        return self._engine

    async def ping(self) -> None:
        """
        Run a liveness query.

        Raises:
            DatabaseConnectionException: If the database is unreachable
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            raise DatabaseConnectionException(
                f"Database unreachable: {e}",
                {"url": self._safe_url()}
            ) from e

    async def connect(self) -> None:
        """Verify connectivity; called once during application startup."""
        await self.ping()
        logger.info("Database connection established", extra={"url": self._safe_url()})

    async def close(self) -> None:
        """Dispose of pooled connections. Safe to call more than once."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            logger.info("Database connections closed")

    async def create_tables(self) -> None:
        """
        Create all tables known to ``Base``.

        Used by tests and local development; production schemas are managed
        outside the application.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Async context manager for database sessions.

        Commits on clean exit, rolls back and re-raises on error.

        Usage:
            async with database.session() as session:
                result = await session.execute(select(ArticleModel))
        """
        async with self._session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    def _safe_url(self) -> str:
        return make_url(self._url).render_as_string(hide_password=True)


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Per-request session dependency.

    For use with FastAPI's Depends() - FastAPI handles the lifecycle.

    Yields:
        AsyncSession: SQLAlchemy async session bound to the app's database
    """
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database not initialized for this application")

    async with database.session() as session:
        yield session
