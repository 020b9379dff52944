"""
repokit - Generic Repositories for SQLAlchemy

A small utility library for line-of-business data access: generic CRUD
and paged repositories over an injected SQLAlchemy session, composable
query-shaping helpers, configuration and JSON helpers.

Quick Start:
    from sqlmodel import select
    from repokit import UtilityRepository, page_by, to_paged_list

    class BookRepository(UtilityRepository[Book]):
        model = Book

        async def get_custom_page(self, predicate, page, page_size=10):
            stmt = page_by(select(Book).where(predicate), Book.title, page, page_size)
            items = (await self.async_db.scalars(stmt)).all()
            return to_paged_list(items, await self.count(predicate), page_size, page)

    with session_factory() as session:
        repo = BookRepository(session)
        repo.add_sync(Book(title="Dune", year=1965))
        page = repo.get_page_sync(Book.year > 1900, Book.title, page=1, page_size=20)
"""

from .persistence import (
    # Repositories
    IRepository, IBaseRepository, IUtilityRepository, SaveResult,
    Repository, BaseRepository, UtilityRepository,
    # Paging and query shaping
    PagedList, to_paged_list, page_slice, DEFAULT_PAGE_SIZE,
    where_if, include_if, order_by_key, page_by, remove_range, remove_range_async,
    filter_values, matches,
    # Errors
    RepositoryError, InvalidArgumentError, ContextMismatchError,
    # Database wiring
    create_engine_from_config, create_async_engine_from_config,
    create_session_factory, create_async_session_factory,
    init_schema, init_schema_async,
)
from .config import (
    Environment, DatabaseConfig, LoggingConfig, RepoKitConfig,
    configure_logging, get_config, set_config,
)
from .serialization import (
    serialize, serialize_safely, deserialize, deserialize_safely,
    JsonSerializeError, JsonDeserializeError,
)

__version__ = "0.1.0"

__all__ = [
    'IRepository', 'IBaseRepository', 'IUtilityRepository', 'SaveResult',
    'Repository', 'BaseRepository', 'UtilityRepository',
    'PagedList', 'to_paged_list', 'page_slice', 'DEFAULT_PAGE_SIZE',
    'where_if', 'include_if', 'order_by_key', 'page_by',
    'remove_range', 'remove_range_async',
    'filter_values', 'matches',
    'RepositoryError', 'InvalidArgumentError', 'ContextMismatchError',
    'create_engine_from_config', 'create_async_engine_from_config',
    'create_session_factory', 'create_async_session_factory',
    'init_schema', 'init_schema_async',
    'Environment', 'DatabaseConfig', 'LoggingConfig', 'RepoKitConfig',
    'configure_logging', 'get_config', 'set_config',
    'serialize', 'serialize_safely', 'deserialize', 'deserialize_safely',
    'JsonSerializeError', 'JsonDeserializeError',
]
