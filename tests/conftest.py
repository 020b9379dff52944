"""
Shared fixtures for the repokit test suite.

Every test gets a fresh in-memory SQLite database: a synchronous one
behind ``session`` and an aiosqlite one behind ``async_session``.
"""

import pytest
import pytest_asyncio

from repokit import (
    Environment, RepoKitConfig,
    create_engine_from_config, create_async_engine_from_config,
    create_session_factory, create_async_session_factory,
    init_schema, init_schema_async,
)
from sample_models import Book, BookRepository

GENRES = ["fiction", "history", "science"]


def make_books(count: int = 25):
    """Books titled 'Book 01'..'Book NN' with cycling genres and ratings"""
    return [
        Book(
            title=f"Book {i:02d}",
            year=2000 + i,
            genre=GENRES[i % len(GENRES)],
            rating=i % 5 + 1,
        )
        for i in range(1, count + 1)
    ]


@pytest.fixture
def db_config():
    return RepoKitConfig.for_environment(Environment.TESTING).database


@pytest.fixture
def engine(db_config):
    engine = create_engine_from_config(db_config)
    init_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine, db_config):
    factory = create_session_factory(engine, db_config.expire_on_commit)
    with factory() as session:
        yield session


@pytest.fixture
def book_repo(session):
    return BookRepository(session)


@pytest.fixture
def seeded_books(session):
    books = make_books()
    session.add_all(books)
    session.commit()
    return books


@pytest_asyncio.fixture
async def async_engine(db_config):
    engine = create_async_engine_from_config(db_config)
    await init_schema_async(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def async_session(async_engine, db_config):
    factory = create_async_session_factory(async_engine, db_config.expire_on_commit)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_book_repo(async_session):
    return BookRepository(async_session)


@pytest_asyncio.fixture
async def async_seeded_books(async_session):
    books = make_books()
    async_session.add_all(books)
    await async_session.commit()
    return books
