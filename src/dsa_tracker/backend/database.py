"""Database connection and session management"""
import logging
from pathlib import Path

from sqlmodel import SQLModel
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession
from sqlalchemy.orm import sessionmaker

# Import all models to ensure they are registered with SQLModel
from .model import Account, Question  # noqa: F401

logger = logging.getLogger(__name__)


def build_async_database_url(database_url: str) -> str:
    """Convert a plain sqlite URL to its aiosqlite flavour

    URLs that already name an async driver are returned untouched.
    """
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return database_url


def _ensure_sqlite_directory(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    Path(url.database).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine for the configured store"""
    async_url = build_async_database_url(database_url)
    _ensure_sqlite_directory(async_url)

    engine = create_async_engine(async_url, echo=echo, future=True)
    logger.info(
        f"Using database backend={engine.url.get_backend_name()} "
        f"url={engine.url.render_as_string(hide_password=True)}"
    )
    return engine


def create_session_factory(engine: AsyncEngine) -> sessionmaker:
    """Create async session factory bound to ``engine``"""
    return sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )


async def create_db_and_tables(engine: AsyncEngine) -> None:
    """Create database tables if they do not exist"""
    logger.info("Creating database tables...")
    try:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Failed to create database tables: {e}")
        raise
