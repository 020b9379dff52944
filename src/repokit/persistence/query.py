"""
Query Shaping - Composable Select Extensions

🔎 Conditional Query Building:
Small helpers that shape a SQLAlchemy ``Select`` before it reaches the
session: conditional filtering, conditional eager loading, ordering and
paging. Each helper returns a new statement and never executes anything,
except the ``remove_range`` helpers which only mark rows for deletion.
"""

import logging
from typing import Any, Optional, Type

from sqlalchemy import asc, desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.interfaces import LoaderOption
from sqlalchemy.sql import Select

from .paging import DEFAULT_PAGE_SIZE, page_offset

logger = logging.getLogger(__name__)


def where_if(stmt: Select, condition: bool, predicate: Any) -> Select:
    """
    Apply a predicate only when a condition holds.

    Args:
        stmt: The statement to filter
        condition: Whether the predicate should be applied
        predicate: SQLAlchemy boolean expression

    Returns:
        The filtered statement, or ``stmt`` unchanged
    """
    if not condition:
        return stmt
    return stmt.where(predicate)


def include_if(stmt: Select, relationship: Any = None) -> Select:
    """
    Eager-load a related entity when a relationship is given.

    ``relationship`` is either a relationship attribute (loaded with
    ``selectinload``) or a ready-made loader option.
    """
    if relationship is None:
        return stmt
    option = relationship if isinstance(relationship, LoaderOption) else selectinload(relationship)
    logger.debug(f"Eager loading {relationship}")
    return stmt.options(option)


def order_by_key(stmt: Select, key: Any, descending: bool = False) -> Select:
    """Order a statement by a single key."""
    return stmt.order_by(desc(key) if descending else asc(key))


def page_by(
    stmt: Select,
    key: Any,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    descending: bool = False,
) -> Select:
    """
    Order a statement and cut it down to one page.

    Pages below 1 are treated as the first page.

    Raises:
        InvalidArgumentError: If page_size < 1
    """
    offset = page_offset(page, page_size)
    return order_by_key(stmt, key, descending).offset(offset).limit(page_size)


def remove_range(session: Session, model: Type, predicate: Any) -> int:
    """
    Mark every row matching ``predicate`` for deletion, without committing.

    Returns:
        Number of entities marked
    """
    entities = session.scalars(select(model).where(predicate)).all()
    for entity in entities:
        session.delete(entity)
    return len(entities)


async def remove_range_async(session: AsyncSession, model: Type, predicate: Any) -> int:
    """Async variant of :func:`remove_range`."""
    entities = (await session.scalars(select(model).where(predicate))).all()
    for entity in entities:
        await session.delete(entity)
    return len(entities)


__all__ = [
    "where_if", "include_if", "order_by_key", "page_by",
    "remove_range", "remove_range_async",
]
