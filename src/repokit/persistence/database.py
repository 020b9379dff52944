"""
Database Wiring - Engines and Session Factories

🗃️ SQL Connection Setup:
Builds SQLAlchemy engines and SQLModel session factories from a
``DatabaseConfig``. Sessions created here are what repositories receive
as their persistence context; the caller owns and closes them.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from ..config import DatabaseConfig

logger = logging.getLogger(__name__)


def _is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def _engine_options(config: DatabaseConfig, url: str) -> Dict[str, Any]:
    """Engine keyword arguments suited to the target database"""
    options: Dict[str, Any] = {
        "echo": config.echo,
        "connect_args": dict(config.connect_args),
    }

    if make_url(url).get_backend_name() == "sqlite":
        options["connect_args"].setdefault("check_same_thread", False)
        if _is_memory_sqlite(url):
            # one shared connection, otherwise each session sees an empty database
            options["poolclass"] = StaticPool
        return options

    options.update(
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        pool_recycle=config.pool_recycle,
    )
    return options


def create_engine_from_config(config: DatabaseConfig) -> Engine:
    """Create a synchronous engine for ``config.url``."""
    logger.info(f"Creating engine for {make_url(config.url).render_as_string(hide_password=True)}")
    return create_engine(config.url, **_engine_options(config, config.url))


def create_async_engine_from_config(config: DatabaseConfig) -> AsyncEngine:
    """
    Create an asynchronous engine for ``config.async_url``.

    Raises:
        ValueError: If no async URL is configured
    """
    if not config.async_url:
        raise ValueError("DatabaseConfig.async_url is required for an async engine")
    logger.info(
        f"Creating async engine for {make_url(config.async_url).render_as_string(hide_password=True)}"
    )
    return create_async_engine(config.async_url, **_engine_options(config, config.async_url))


def create_session_factory(engine: Engine, expire_on_commit: bool = False) -> sessionmaker:
    """Session factory producing ``sqlmodel.Session`` bound to ``engine``."""
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=expire_on_commit)


def create_async_session_factory(engine: AsyncEngine, expire_on_commit: bool = False) -> async_sessionmaker:
    """
    Session factory producing SQLModel ``AsyncSession`` bound to ``engine``.

    Keep ``expire_on_commit`` off for async use: expired attributes would
    need a lazy load, which async sessions cannot perform implicitly.
    """
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=expire_on_commit)


def init_schema(engine: Engine, metadata: Optional[MetaData] = None) -> None:
    """Create all tables known to ``metadata`` (SQLModel's by default)."""
    (metadata or SQLModel.metadata).create_all(engine)


async def init_schema_async(engine: AsyncEngine, metadata: Optional[MetaData] = None) -> None:
    """Async variant of :func:`init_schema`."""
    async with engine.begin() as conn:
        await conn.run_sync((metadata or SQLModel.metadata).create_all)


__all__ = [
    "create_engine_from_config", "create_async_engine_from_config",
    "create_session_factory", "create_async_session_factory",
    "init_schema", "init_schema_async",
]
