"""
Async SQLAlchemy engine and session factory.

The center table is small and read-mostly: every listing request loads
the (optionally type-filtered) rows and ranks them in Python, so a modest
pool is enough.  ``pool_pre_ping`` drops connections that PostgreSQL
closed while the API sat idle.
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.config import settings

engine = create_async_engine(
    settings.database_url,
    echo=settings.db_echo,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base; ``AutismCenterModel`` is the only mapped table."""
