"""
OrderDesk Backend - Database Session Management
===============================================

What:  Async SQLAlchemy engine, session factory and caller-scoped sessions.
How:   One engine (connection pool) per process. Every domain query runs in
       `Database.caller_scope(caller)`, a transaction that assumes the
       `authenticated` role and publishes the caller's verified JWT claims so
       the store's row-level policies filter rows to the caller.
Who:   Used by the Authorizer and the Order Exporter.
When:  Engine is created by the application factory; scopes are opened per
       query and always rolled back (the handlers never write).

Row-level scoping:
    BEGIN;
    SELECT set_config('role', 'authenticated', true);
    SELECT set_config('request.jwt.claims', '<claims json>', true);
    SELECT set_config('request.jwt.claim.sub', '<user id>', true);
    ... caller queries ...
    ROLLBACK;

    The third argument (`is_local = true`) confines the settings to the
    transaction, so a pooled connection never carries one caller's identity
    into another caller's request.

Connection pooling:
    pool_size / max_overflow / pool_pre_ping come from Settings.
    pool_recycle=3600 recycles connections every hour.
"""

import json
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from orderdesk.config import Settings
from orderdesk.security import Caller


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    The tables are owned by the store; models only describe them for queries.
    """
    pass


_SCOPE_STATEMENT = text(
    "SELECT set_config('role', :role, true), "
    "set_config('request.jwt.claims', :claims, true), "
    "set_config('request.jwt.claim.sub', :sub, true)"
)


def create_engine(settings: Settings) -> AsyncEngine:
    """Builds the async engine from the configured URL and pool settings."""
    return create_async_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
        echo=settings.log_level == "DEBUG",
    )


class Database:
    """Owns the engine and hands out caller-scoped sessions."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        # expire_on_commit=False: rows stay readable after the scope closes
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(create_engine(settings))

    @asynccontextmanager
    async def caller_scope(self, caller: Caller) -> AsyncGenerator[AsyncSession, None]:
        """
        Yield a session whose queries run under the caller's row-level policy.

        The transaction is rolled back on exit whether or not the body
        raised; database errors propagate to the caller unchanged.
        """
        async with self.session_factory() as session:
            try:
                await session.execute(
                    _SCOPE_STATEMENT,
                    {
                        "role": caller.role,
                        "claims": json.dumps(caller.claims, default=str),
                        "sub": caller.user_id,
                    },
                )
                yield session
            finally:
                await session.rollback()

    async def ping(self) -> None:
        """Runs SELECT 1; raises whatever the driver raises when unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Closes every pooled connection (application shutdown)."""
        await self.engine.dispose()
