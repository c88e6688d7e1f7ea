from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from typing import AsyncGenerator, Optional
from fastapi import Request
from contextlib import asynccontextmanager
import logging

logger = logging.getLogger(__name__)

# Global variable to hold the session factory
_global_session_factory: Optional[AsyncSession] = None

# Postgres setting read by the row level security policies
ACCOUNT_SETTING = "app.account_id"


def set_global_session_factory(factory):
    """Sets the globally accessible session factory. Called once at startup."""
    global _global_session_factory
    _global_session_factory = factory
    logger.info("Global SQLAlchemy session factory has been set.")


async def bind_account(session: AsyncSession, account_id: Optional[str]) -> None:
    """
    Expose the caller's account id to the row level security policies.
    Only PostgreSQL has the policies, other dialects are left alone.
    """
    if session.get_bind().dialect.name != "postgresql":
        return
    await session.execute(
        text("SELECT set_config(:name, :value, false)"),
        {"name": ACCOUNT_SETTING, "value": account_id or ""},
    )


# Session dependency for FastAPI routes
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Create and yield a database session using the shared engine.
    The authenticated account (if any) is bound for the session's lifetime.
    """
    async_session = request.app.state.session_factory
    user = getattr(request.state, "user", None)

    async with async_session() as session:
        try:
            if user:
                await bind_account(session, user["user_id"])
            yield session
        finally:
            if user:
                # connection goes back to the pool, don't leak the binding
                await session.rollback()
                await bind_account(session, None)
                await session.commit()
            await session.close()


# Context manager for scripts and background tasks
@asynccontextmanager
async def script_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Provides a DB session outside a request using the globally set factory.
    """
    global _global_session_factory
    if _global_session_factory is None:
        logger.error("Global session factory accessed before being set.")
        raise RuntimeError("Database session factory not initialized globally.")

    session_factory = _global_session_factory
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            logger.exception("Error occurred within script_db_session context")
            raise
