"""Database session and engine configuration."""

import json
from typing import AsyncGenerator

from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.config import settings
from app.db.base import Base

# Load environment variables
load_dotenv()


def json_serializer(value) -> str:
    """JSON column serializer; non-ASCII text is stored unescaped."""
    return json.dumps(value, ensure_ascii=False)


def build_engine(database_url: str, **kwargs):
    """Create an async engine; pool sizing only applies to server databases."""
    options = {"echo": settings.DEBUG, "pool_pre_ping": True, "json_serializer": json_serializer}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
        )
    options.update(kwargs)
    return create_async_engine(database_url, **options)


# Create async engine
engine = build_engine(settings.DATABASE_URL)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def create_tables(bind=None) -> None:
    """Create all tables on the given engine (defaults to the app engine)."""
    # Import all models to register them
    from app.models import application, job, profile, user  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_db():
    """Initialize database tables (local development only, otherwise use Alembic)."""
    if settings.DB_CREATE_TABLES:
        await create_tables()
