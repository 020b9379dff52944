"""
Utility Repository - Paged Queries and Accessory Entities

Extends the base CRUD verbs with paged queries, structured attribute
filters and access to accessory entity types through the same session.
"""

from abc import abstractmethod
from typing import Any, Optional, Type

from sqlalchemy import select

from ..filters import filter_values, matches
from ..paging import DEFAULT_PAGE_SIZE, PagedList, page_slice, to_paged_list, validate_page_size
from ..query import order_by_key, page_by, where_if
from .base import BaseRepository
from .interface import AccessoryType, EntityType, IUtilityRepository


class UtilityRepository(BaseRepository[EntityType], IUtilityRepository[EntityType]):
    """
    Repository with paged queries and accessory entity access.

    Concrete repositories must implement :meth:`get_custom_page`.
    """

    # Paging helpers, parameterised by entity class

    def _page_sync(self, model: Type, predicate: Any, order_by: Any,
                   page: int, page_size: int, descending: bool) -> PagedList:
        stmt = where_if(select(model), predicate is not None, predicate)
        stmt = page_by(stmt, order_by, page, page_size, descending)
        total = self._count_sync(model, predicate)
        items = self.sync_db.scalars(stmt).all()
        return to_paged_list(items, total, page_size, page)

    async def _page(self, model: Type, predicate: Any, order_by: Any,
                    page: int, page_size: int, descending: bool) -> PagedList:
        stmt = where_if(select(model), predicate is not None, predicate)
        stmt = page_by(stmt, order_by, page, page_size, descending)
        items = (await self.async_db.scalars(stmt)).all()
        total = await self._count(model, predicate)
        return to_paged_list(items, total, page_size, page)

    def _matching_statement(self, predicate: Any, order_by: Any, descending: bool):
        stmt = where_if(select(self.model), predicate is not None, predicate)
        return order_by_key(stmt, order_by, descending)

    def _page_matching(self, entities, values: dict, page: int, page_size: int) -> PagedList:
        if values:
            entities = [entity for entity in entities if matches(entity, values)]
        return to_paged_list(page_slice(entities, page, page_size), len(entities), page_size, page)

    # Paged queries

    def get_page_sync(
        self,
        predicate: Any,
        order_by: Any,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        descending: bool = False,
    ) -> PagedList[EntityType]:
        return self._page_sync(self.model, predicate, order_by, page, page_size, descending)

    async def get_page(
        self,
        predicate: Any,
        order_by: Any,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        descending: bool = False,
    ) -> PagedList[EntityType]:
        return await self._page(self.model, predicate, order_by, page, page_size, descending)

    def get_page_matching_sync(
        self,
        predicate: Any,
        order_by: Any,
        params: Any = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        descending: bool = False,
    ) -> PagedList[EntityType]:
        values = filter_values(params, self.model)
        validate_page_size(page_size)
        entities = self.sync_db.scalars(self._matching_statement(predicate, order_by, descending)).all()
        return self._page_matching(entities, values, page, page_size)

    async def get_page_matching(
        self,
        predicate: Any,
        order_by: Any,
        params: Any = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        descending: bool = False,
    ) -> PagedList[EntityType]:
        values = filter_values(params, self.model)
        validate_page_size(page_size)
        stmt = self._matching_statement(predicate, order_by, descending)
        entities = (await self.async_db.scalars(stmt)).all()
        return self._page_matching(entities, values, page, page_size)

    @abstractmethod
    async def get_custom_page(
        self,
        predicate: Any,
        page: int,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> PagedList[EntityType]:
        pass

    # Accessory queries

    def get_accessory_sync(
        self,
        accessory: Type[AccessoryType],
        predicate: Any,
        include: Any = None,
    ) -> Optional[AccessoryType]:
        return self._first_sync(accessory, predicate, include)

    async def get_accessory(
        self,
        accessory: Type[AccessoryType],
        predicate: Any,
        include: Any = None,
    ) -> Optional[AccessoryType]:
        return await self._first(accessory, predicate, include)

    def get_accessory_page_sync(
        self,
        accessory: Type[AccessoryType],
        predicate: Any,
        order_by: Any,
        page: int,
        page_size: int,
        descending: bool = False,
    ) -> PagedList[AccessoryType]:
        return self._page_sync(accessory, predicate, order_by, page, page_size, descending)

    async def get_accessory_page(
        self,
        accessory: Type[AccessoryType],
        predicate: Any,
        order_by: Any,
        page: int,
        page_size: int,
        descending: bool = False,
    ) -> PagedList[AccessoryType]:
        return await self._page(accessory, predicate, order_by, page, page_size, descending)

    # Accessory writes

    def add_accessory_sync(self, entity: AccessoryType) -> bool:
        if entity is not None:
            self.sync_db.add(entity)
        return self._commit_sync() > 0

    async def add_accessory(self, entity: AccessoryType) -> bool:
        if entity is not None:
            self.async_db.add(entity)
        return await self._commit() > 0

    def delete_accessory_sync(self, entity: AccessoryType) -> bool:
        if entity is not None:
            self.sync_db.delete(entity)
        return self._commit_sync() > 0

    async def delete_accessory(self, entity: AccessoryType) -> bool:
        if entity is not None:
            await self.async_db.delete(entity)
        return await self._commit() > 0

    def delete_accessory_by_sync(self, accessory: Type[AccessoryType], predicate: Any) -> bool:
        return self._delete_first_sync(accessory, predicate)

    async def delete_accessory_by(self, accessory: Type[AccessoryType], predicate: Any) -> bool:
        return await self._delete_first(accessory, predicate)


__all__ = ["UtilityRepository"]
