"""
Repository Interfaces

💾 Standard Data Access Contract:
This module defines the contracts every repository implements. Each verb
comes in a synchronous flavour (suffixed ``_sync``, driven by a SQLAlchemy
``Session``) and an asynchronous flavour (driven by an ``AsyncSession``).

Predicates are SQLAlchemy boolean expressions such as ``Book.year > 2000``;
ordering keys are mapped attributes such as ``Book.title``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, Iterable, List, Optional, Type, TypeVar

from ..paging import DEFAULT_PAGE_SIZE, PagedList

EntityType = TypeVar('EntityType')
AccessoryType = TypeVar('AccessoryType')


@dataclass(frozen=True)
class SaveResult:
    """Outcome of a save: either ok with an affected count, or the error"""
    ok: bool
    affected: int = 0
    error: Optional[Exception] = None

    def __bool__(self) -> bool:
        return self.ok


class IRepository(ABC):
    """
    Marker interface for repositories.

    Use it to declare a repository that exposes none of the generic verbs.
    """
    pass


class IBaseRepository(IRepository, Generic[EntityType]):
    """
    Basic CRUD contract over a single entity type.

    Only ``save``/``try_save`` absorb persistence errors; every other verb
    lets ``SQLAlchemyError`` reach the caller.
    """

    # Queries

    @abstractmethod
    def get_sync(self, predicate: Any) -> Optional[EntityType]:
        """
        Get the first entity matching a predicate.

        Args:
            predicate: Filter condition

        Returns:
            The entity, or None if nothing matched
        """
        pass

    @abstractmethod
    async def get(self, predicate: Any) -> Optional[EntityType]:
        """Async variant of :meth:`get_sync`."""
        pass

    @abstractmethod
    def get_range_sync(self, predicate: Any = None) -> List[EntityType]:
        """
        Get all entities matching a predicate.

        Use with care on large tables; prefer a paged query.

        Args:
            predicate: Filter condition, None returns every entity
        """
        pass

    @abstractmethod
    async def get_range(self, predicate: Any = None) -> List[EntityType]:
        pass

    # Inserts

    @abstractmethod
    def add_sync(self, entity: EntityType) -> bool:
        """
        Add an entity and commit.

        Returns:
            True if the commit wrote anything
        """
        pass

    @abstractmethod
    async def add(self, entity: EntityType) -> bool:
        pass

    @abstractmethod
    def add_range_sync(self, entities: Iterable[EntityType]) -> bool:
        pass

    @abstractmethod
    async def add_range(self, entities: Iterable[EntityType]) -> bool:
        pass

    # Updates

    @abstractmethod
    def update_sync(self, entity: EntityType) -> bool:
        """
        Merge an entity into the session and commit.

        Returns:
            True if the commit wrote anything
        """
        pass

    @abstractmethod
    async def update(self, entity: EntityType) -> bool:
        pass

    @abstractmethod
    def update_range_sync(self, entities: Iterable[EntityType]) -> bool:
        pass

    @abstractmethod
    async def update_range(self, entities: Iterable[EntityType]) -> bool:
        pass

    # Deletes

    @abstractmethod
    def delete_sync(self, entity: EntityType) -> bool:
        pass

    @abstractmethod
    async def delete(self, entity: EntityType) -> bool:
        pass

    @abstractmethod
    def delete_by_sync(self, predicate: Any) -> bool:
        """
        Delete the first entity matching a predicate.

        If several entities match, only the first is deleted. Deleting
        nothing still commits and counts as success.

        Returns:
            True if the entity was deleted or nothing matched
        """
        pass

    @abstractmethod
    async def delete_by(self, predicate: Any) -> bool:
        pass

    @abstractmethod
    def delete_range_sync(self, entities: Iterable[EntityType]) -> bool:
        pass

    @abstractmethod
    async def delete_range(self, entities: Iterable[EntityType]) -> bool:
        pass

    @abstractmethod
    def delete_range_by_sync(self, predicate: Any) -> bool:
        """
        Delete every entity matching a predicate.

        Returns:
            True if the entities were deleted or nothing matched
        """
        pass

    @abstractmethod
    async def delete_range_by(self, predicate: Any) -> bool:
        pass

    # Save

    @abstractmethod
    def save_sync(self) -> bool:
        """
        Commit pending changes.

        Persistence errors are logged, rolled back and reported as False.
        """
        pass

    @abstractmethod
    async def save(self) -> bool:
        pass

    @abstractmethod
    def try_save_sync(self) -> SaveResult:
        """Commit pending changes, returning the error instead of raising it."""
        pass

    @abstractmethod
    async def try_save(self) -> SaveResult:
        pass


class IUtilityRepository(IBaseRepository[EntityType]):
    """
    Extended contract with paged queries and accessory entity access.

    Accessory entities are other mapped types reachable through the same
    session, used for one-level related lookups.

    ``get_custom_page`` is the one verb without a ``_sync`` twin: it is the
    subclass hook, and only the async flavour is required. Repositories
    built on a synchronous ``Session`` may add their own synchronous hook.
    """

    # Paged queries

    @abstractmethod
    def get_page_sync(
        self,
        predicate: Any,
        order_by: Any,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        descending: bool = False,
    ) -> PagedList[EntityType]:
        """
        Get one page of the entities matching a predicate.

        Args:
            predicate: Filter condition, None for all entities
            order_by: Ordering key
            page: 1-based page number
            page_size: Entities per page, defaults to 10
            descending: Reverse the ordering

        Returns:
            The requested page
        """
        pass

    @abstractmethod
    async def get_page(
        self,
        predicate: Any,
        order_by: Any,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        descending: bool = False,
    ) -> PagedList[EntityType]:
        pass

    @abstractmethod
    def get_page_matching_sync(
        self,
        predicate: Any,
        order_by: Any,
        params: Any = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        descending: bool = False,
    ) -> PagedList[EntityType]:
        """
        Get one page of the entities matching a predicate and a filter value.

        Every non-None field of ``params`` must equal the entity attribute
        with the same name. For example, entities ``{"a": 1, "b": 2}`` match
        ``params={"a": 1}``. The match runs in memory over the whole filtered
        set, so keep it to small result sets.
        """
        pass

    @abstractmethod
    async def get_page_matching(
        self,
        predicate: Any,
        order_by: Any,
        params: Any = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        descending: bool = False,
    ) -> PagedList[EntityType]:
        pass

    @abstractmethod
    async def get_custom_page(
        self,
        predicate: Any,
        page: int,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> PagedList[EntityType]:
        """
        Custom paged query, implemented by each concrete repository.

        Typical implementation::

            stmt = page_by(select(Book).where(predicate), Book.id, page, page_size)
            items = (await self.async_db.scalars(stmt)).all()
            return to_paged_list(items, await self.count(predicate), page_size, page)
        """
        pass

    # Accessory entities

    @abstractmethod
    def get_accessory_sync(
        self,
        accessory: Type[AccessoryType],
        predicate: Any,
        include: Any = None,
    ) -> Optional[AccessoryType]:
        """
        Get the first accessory entity matching a predicate.

        Args:
            accessory: Accessory entity class
            predicate: Filter condition
            include: Relationship to eager-load, None loads nothing extra
        """
        pass

    @abstractmethod
    async def get_accessory(
        self,
        accessory: Type[AccessoryType],
        predicate: Any,
        include: Any = None,
    ) -> Optional[AccessoryType]:
        pass

    @abstractmethod
    def get_accessory_page_sync(
        self,
        accessory: Type[AccessoryType],
        predicate: Any,
        order_by: Any,
        page: int,
        page_size: int,
        descending: bool = False,
    ) -> PagedList[AccessoryType]:
        pass

    @abstractmethod
    async def get_accessory_page(
        self,
        accessory: Type[AccessoryType],
        predicate: Any,
        order_by: Any,
        page: int,
        page_size: int,
        descending: bool = False,
    ) -> PagedList[AccessoryType]:
        pass

    @abstractmethod
    def add_accessory_sync(self, entity: AccessoryType) -> bool:
        pass

    @abstractmethod
    async def add_accessory(self, entity: AccessoryType) -> bool:
        pass

    @abstractmethod
    def delete_accessory_sync(self, entity: AccessoryType) -> bool:
        pass

    @abstractmethod
    async def delete_accessory(self, entity: AccessoryType) -> bool:
        pass

    @abstractmethod
    def delete_accessory_by_sync(self, accessory: Type[AccessoryType], predicate: Any) -> bool:
        """
        Delete the first accessory entity matching a predicate.

        Deleting nothing counts as success.
        """
        pass

    @abstractmethod
    async def delete_accessory_by(self, accessory: Type[AccessoryType], predicate: Any) -> bool:
        pass


__all__ = [
    "IRepository", "IBaseRepository", "IUtilityRepository", "SaveResult",
    "EntityType", "AccessoryType",
]
