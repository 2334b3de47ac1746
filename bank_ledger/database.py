"""
Database engine, session management, and base model class.

This module sets up SQLAlchemy 2.0 with async support. Key components:

  - engine: The async database engine (connection pool for production DBs)
  - AsyncSessionLocal: Factory for creating async database sessions
  - Base: Declarative base class that all ORM models inherit from
  - get_db(): FastAPI dependency that provides a session per request

Session lifecycle (the unit of work):
  Each API request gets its own session via get_db(). Everything a ledger
  operation writes — the account's new balance and its transaction record —
  is committed together when the request completes. ANY exception, including
  domain errors such as InsufficientFundsError, rolls the whole request back,
  so a failed operation leaves no partial effect behind.

  If the request task is cancelled before the commit, the CancelledError
  propagates through the `async with` block and closing the session discards
  the uncommitted work. Once the commit has returned the operation stands.
"""

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from bank_ledger.config import settings
from bank_ledger.exceptions import StorageError


# echo=True in debug mode logs all SQL statements.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
)

# expire_on_commit=False prevents lazy-load errors after commit —
# accessing attributes on a committed object would otherwise trigger
# a synchronous DB call, which fails in async context.
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


async def get_db():
    """
    FastAPI dependency that provides a database session.

    Usage in a route:
        @router.get("/items")
        async def list_items(db: AsyncSession = Depends(get_db)):
            ...

    The session is committed on success and rolled back on any exception,
    then closed when the request completes. A driver error from the commit
    itself (e.g. "database is locked") is raised as StorageError.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except (OperationalError, InterfaceError) as exc:
            await session.rollback()
            raise StorageError() from exc
        except Exception:
            await session.rollback()
            raise
