"""
Base Repository - Generic CRUD over a SQLAlchemy Session

🏗️ Shared Repository Foundation:
``Repository`` holds the injected persistence context and logger;
``BaseRepository`` adds the generic CRUD verbs for one entity type.

The session is owned by whoever built the repository. Repositories never
create, pool or close it, and an instance is not safe to share between
threads or concurrent tasks.
"""

import logging
from typing import Any, Iterable, List, Optional, Type, Union

from sqlalchemy import event, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from ..exceptions import ContextMismatchError, RepositoryError
from ..query import include_if, remove_range, remove_range_async, where_if
from .interface import EntityType, IBaseRepository, IRepository, SaveResult

PersistenceContext = Union[Session, AsyncSession]

_FLUSHED_KEY = "repokit.flushed"
_COMMITTED_KEY = "repokit.committed"


def pending_changes(session: Session) -> int:
    """
    Count the unit-of-work entries the next flush will write.

    New and deleted instances always count; instances in ``dirty`` only
    count when they carry a net attribute change.
    """
    modified = sum(1 for obj in session.dirty if session.is_modified(obj))
    return len(session.new) + modified + len(session.deleted)


def _count_flush(session: Session, flush_context, instances) -> None:
    session.info[_FLUSHED_KEY] = session.info.get(_FLUSHED_KEY, 0) + pending_changes(session)


def _close_count(session: Session) -> None:
    session.info[_COMMITTED_KEY] = session.info.pop(_FLUSHED_KEY, 0)


def _discard_count(session: Session, previous_transaction) -> None:
    session.info.pop(_FLUSHED_KEY, None)


_WRITE_LISTENERS = (
    ("before_flush", _count_flush),
    ("after_commit", _close_count),
    ("after_soft_rollback", _discard_count),
)


def track_writes(session: Session) -> Session:
    """
    Count the entries every flush writes, so a commit can report them.

    Queries and ``merge`` autoflush, so changes made before them are
    counted when they reach the database rather than at commit time. The
    total of the last commit is kept in ``session.info``; a rollback
    discards whatever was flushed since the previous commit. Installing
    twice on the same session is a no-op.
    """
    for name, listener in _WRITE_LISTENERS:
        if not event.contains(session, name, listener):
            event.listen(session, name, listener)
    return session


def committed_changes(session: Session) -> int:
    """Entries written by the most recent commit on a tracked session."""
    return session.info.pop(_COMMITTED_KEY, 0)


class Repository(IRepository):
    """
    Root of all repositories: the injected session plus a logger.

    Args:
        db: A ``Session`` for the ``*_sync`` verbs or an ``AsyncSession``
            for the async verbs
        logger: Diagnostic logger; defaults to one named after the
            concrete repository class
    """

    def __init__(self, db: PersistenceContext, logger: Optional[logging.Logger] = None):
        self.db = db
        self._logger = logger or logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}"
        )
        track_writes(db.sync_session if isinstance(db, AsyncSession) else db)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def sync_db(self) -> Session:
        """The session for synchronous verbs."""
        if isinstance(self.db, AsyncSession):
            raise ContextMismatchError(
                f"{self.__class__.__name__} wraps an AsyncSession; use the async verbs"
            )
        return self.db

    @property
    def async_db(self) -> AsyncSession:
        """The session for asynchronous verbs."""
        if not isinstance(self.db, AsyncSession):
            raise ContextMismatchError(
                f"{self.__class__.__name__} wraps a synchronous Session; use the *_sync verbs"
            )
        return self.db


class BaseRepository(Repository, IBaseRepository[EntityType]):
    """
    Generic CRUD repository for one entity type.

    Subclasses normally pin the entity class::

        class BookRepository(BaseRepository[Book]):
            model = Book

    Every write verb commits immediately and reports whether the commit
    wrote anything. Persistence errors roll the session back and are
    re-raised, except in ``save``/``try_save``.
    """

    model: Optional[Type[EntityType]] = None

    def __init__(
        self,
        db: PersistenceContext,
        logger: Optional[logging.Logger] = None,
        model: Optional[Type[EntityType]] = None,
    ):
        super().__init__(db, logger)
        if model is not None:
            self.model = model
        if self.model is None:
            raise RepositoryError(f"{self.__class__.__name__} has no entity model configured")

    # Shared helpers, parameterised by entity class so accessory verbs reuse them

    def _first_sync(self, model: Type, predicate: Any, include: Any = None):
        stmt = include_if(select(model).where(predicate), include)
        return self.sync_db.scalars(stmt.limit(1)).first()

    async def _first(self, model: Type, predicate: Any, include: Any = None):
        stmt = include_if(select(model).where(predicate), include)
        return (await self.async_db.scalars(stmt.limit(1))).first()

    def _all_sync(self, model: Type, predicate: Any = None) -> list:
        stmt = where_if(select(model), predicate is not None, predicate)
        return list(self.sync_db.scalars(stmt).all())

    async def _all(self, model: Type, predicate: Any = None) -> list:
        stmt = where_if(select(model), predicate is not None, predicate)
        return list((await self.async_db.scalars(stmt)).all())

    def _count_sync(self, model: Type, predicate: Any = None) -> int:
        stmt = where_if(select(func.count()).select_from(model), predicate is not None, predicate)
        return self.sync_db.scalar(stmt) or 0

    async def _count(self, model: Type, predicate: Any = None) -> int:
        stmt = where_if(select(func.count()).select_from(model), predicate is not None, predicate)
        return (await self.async_db.scalar(stmt)) or 0

    def _commit_sync(self) -> int:
        session = self.sync_db
        session.info.pop(_COMMITTED_KEY, None)
        try:
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            self._logger.error(f"Commit failed for {self.model.__name__}: {e}")
            raise
        return committed_changes(session)

    async def _commit(self) -> int:
        session = self.async_db
        session.sync_session.info.pop(_COMMITTED_KEY, None)
        try:
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            self._logger.error(f"Commit failed for {self.model.__name__}: {e}")
            raise
        return committed_changes(session.sync_session)

    def _delete_first_sync(self, model: Type, predicate: Any) -> bool:
        entity = self._first_sync(model, predicate)
        if entity is None:
            self._logger.debug(f"No {model.__name__} matched for delete")
            self._commit_sync()
            return True
        self.sync_db.delete(entity)
        return self._commit_sync() > 0

    async def _delete_first(self, model: Type, predicate: Any) -> bool:
        entity = await self._first(model, predicate)
        if entity is None:
            self._logger.debug(f"No {model.__name__} matched for delete")
            await self._commit()
            return True
        await self.async_db.delete(entity)
        return await self._commit() > 0

    # Counting

    def count_sync(self, predicate: Any = None) -> int:
        """Count the entities matching a predicate (all if None)."""
        return self._count_sync(self.model, predicate)

    async def count(self, predicate: Any = None) -> int:
        return await self._count(self.model, predicate)

    # Queries

    def get_sync(self, predicate: Any) -> Optional[EntityType]:
        return self._first_sync(self.model, predicate)

    async def get(self, predicate: Any) -> Optional[EntityType]:
        return await self._first(self.model, predicate)

    def get_range_sync(self, predicate: Any = None) -> List[EntityType]:
        return self._all_sync(self.model, predicate)

    async def get_range(self, predicate: Any = None) -> List[EntityType]:
        return await self._all(self.model, predicate)

    # Inserts

    def add_sync(self, entity: EntityType) -> bool:
        if entity is not None:
            self.sync_db.add(entity)
        return self._commit_sync() > 0

    async def add(self, entity: EntityType) -> bool:
        if entity is not None:
            self.async_db.add(entity)
        return await self._commit() > 0

    def add_range_sync(self, entities: Iterable[EntityType]) -> bool:
        entities = list(entities)
        if entities:
            self.sync_db.add_all(entities)
        return self._commit_sync() > 0

    async def add_range(self, entities: Iterable[EntityType]) -> bool:
        entities = list(entities)
        if entities:
            self.async_db.add_all(entities)
        return await self._commit() > 0

    # Updates

    def update_sync(self, entity: EntityType) -> bool:
        if entity is not None:
            self.sync_db.merge(entity)
        return self._commit_sync() > 0

    async def update(self, entity: EntityType) -> bool:
        if entity is not None:
            await self.async_db.merge(entity)
        return await self._commit() > 0

    def update_range_sync(self, entities: Iterable[EntityType]) -> bool:
        for entity in list(entities):
            self.sync_db.merge(entity)
        return self._commit_sync() > 0

    async def update_range(self, entities: Iterable[EntityType]) -> bool:
        for entity in list(entities):
            await self.async_db.merge(entity)
        return await self._commit() > 0

    # Deletes

    def delete_sync(self, entity: EntityType) -> bool:
        if entity is not None:
            self.sync_db.delete(entity)
        return self._commit_sync() > 0

    async def delete(self, entity: EntityType) -> bool:
        if entity is not None:
            await self.async_db.delete(entity)
        return await self._commit() > 0

    def delete_by_sync(self, predicate: Any) -> bool:
        return self._delete_first_sync(self.model, predicate)

    async def delete_by(self, predicate: Any) -> bool:
        return await self._delete_first(self.model, predicate)

    def delete_range_sync(self, entities: Iterable[EntityType]) -> bool:
        for entity in list(entities):
            self.sync_db.delete(entity)
        return self._commit_sync() > 0

    async def delete_range(self, entities: Iterable[EntityType]) -> bool:
        for entity in list(entities):
            await self.async_db.delete(entity)
        return await self._commit() > 0

    def delete_range_by_sync(self, predicate: Any) -> bool:
        removed = remove_range(self.sync_db, self.model, predicate)
        affected = self._commit_sync()
        return removed == 0 or affected > 0

    async def delete_range_by(self, predicate: Any) -> bool:
        removed = await remove_range_async(self.async_db, self.model, predicate)
        affected = await self._commit()
        return removed == 0 or affected > 0

    # Save

    def try_save_sync(self) -> SaveResult:
        try:
            affected = self._commit_sync()
        except SQLAlchemyError as e:
            return SaveResult(ok=False, error=e)
        return SaveResult(ok=affected > 0, affected=affected)

    async def try_save(self) -> SaveResult:
        try:
            affected = await self._commit()
        except SQLAlchemyError as e:
            return SaveResult(ok=False, error=e)
        return SaveResult(ok=affected > 0, affected=affected)

    def save_sync(self) -> bool:
        return self.try_save_sync().ok

    async def save(self) -> bool:
        return (await self.try_save()).ok


__all__ = [
    "Repository", "BaseRepository", "PersistenceContext",
    "pending_changes", "track_writes", "committed_changes",
]
