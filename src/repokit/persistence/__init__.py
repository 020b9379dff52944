"""
Persistence - Generic Repository Layer

💾 Thin Data Access over SQLAlchemy:
Repositories wrap an injected ``Session``/``AsyncSession`` and expose CRUD,
paging and accessory-entity verbs. Query planning, change tracking and
transactions stay inside SQLAlchemy.

Structure:
- repositories/: repository contracts and implementations
- query: conditional filtering, eager loading and paging of statements
- paging: page descriptors
- filters: structured attribute filters
- database: engine and session factories

Example:
    from repokit.persistence import UtilityRepository, page_by, to_paged_list

    class BookRepository(UtilityRepository[Book]):
        model = Book

        async def get_custom_page(self, predicate, page, page_size=10):
            stmt = page_by(select(Book).where(predicate), Book.year, page, page_size)
            items = (await self.async_db.scalars(stmt)).all()
            return to_paged_list(items, await self.count(predicate), page_size, page)
"""

from .exceptions import RepositoryError, InvalidArgumentError, ContextMismatchError
from .paging import (
    PagedList, to_paged_list, page_slice, page_offset,
    normalize_page, validate_page_size, DEFAULT_PAGE_SIZE,
)
from .query import (
    where_if, include_if, order_by_key, page_by,
    remove_range, remove_range_async,
)
from .filters import filter_values, matches
from .repositories import (
    IRepository, IBaseRepository, IUtilityRepository, SaveResult,
    Repository, BaseRepository, UtilityRepository, pending_changes,
)
from .database import (
    create_engine_from_config, create_async_engine_from_config,
    create_session_factory, create_async_session_factory,
    init_schema, init_schema_async,
)

__all__ = [
    "RepositoryError", "InvalidArgumentError", "ContextMismatchError",
    "PagedList", "to_paged_list", "page_slice", "page_offset",
    "normalize_page", "validate_page_size", "DEFAULT_PAGE_SIZE",
    "where_if", "include_if", "order_by_key", "page_by",
    "remove_range", "remove_range_async",
    "filter_values", "matches",
    "IRepository", "IBaseRepository", "IUtilityRepository", "SaveResult",
    "Repository", "BaseRepository", "UtilityRepository", "pending_changes",
    "create_engine_from_config", "create_async_engine_from_config",
    "create_session_factory", "create_async_session_factory",
    "init_schema", "init_schema_async",
]
