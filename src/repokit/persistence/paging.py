"""
Paging - Page Descriptors for Query Results

📄 Pagination Primitive:
Turns one already-sliced page of entities plus the size of the full
filtered set into an immutable page descriptor. Pure functions only; no
session access happens here.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterable, Iterator, List, Sequence, Tuple, TypeVar

from .exceptions import InvalidArgumentError

T = TypeVar('T')

DEFAULT_PAGE_SIZE = 10


def normalize_page(page: int) -> int:
    """Floor page numbers below 1 to the first page."""
    return page if page >= 1 else 1


def validate_page_size(page_size: int) -> int:
    """Reject page sizes that cannot form a page."""
    if page_size < 1:
        raise InvalidArgumentError(f"page_size must be >= 1, got {page_size}")
    return page_size


def page_offset(page: int, page_size: int) -> int:
    """Number of rows skipped before the given page."""
    return (normalize_page(page) - 1) * validate_page_size(page_size)


@dataclass(frozen=True)
class PagedList(Generic[T]):
    """One page of a paginated query"""
    items: Tuple[T, ...]
    page: int
    page_size: int
    total_count: int

    def __post_init__(self):
        validate_page_size(self.page_size)
        if self.total_count < 0:
            raise InvalidArgumentError(f"total_count must be >= 0, got {self.total_count}")

    @property
    def total_pages(self) -> int:
        """ceil(total_count / page_size)"""
        return -(-self.total_count // self.page_size)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __getitem__(self, index):
        return self.items[index]

    def to_dict(self) -> Dict[str, Any]:
        """Convert page to dictionary"""
        return {
            "items": list(self.items),
            "page": self.page,
            "page_size": self.page_size,
            "total_count": self.total_count,
            "total_pages": self.total_pages,
        }


def to_paged_list(
    items: Iterable[T],
    total_count: int,
    page_size: int,
    page: int = 1,
) -> PagedList[T]:
    """
    Wrap one page of items into a page descriptor.

    Args:
        items: The entities of the current page, already ordered and sliced
        total_count: Size of the full filtered set
        page_size: Requested page size, must be >= 1
        page: 1-based page number; values below 1 mean the first page

    Returns:
        The page descriptor

    Raises:
        InvalidArgumentError: If page_size < 1 or total_count < 0
    """
    return PagedList(
        items=tuple(items),
        page=normalize_page(page),
        page_size=validate_page_size(page_size),
        total_count=total_count,
    )


def page_slice(items: Sequence[T], page: int, page_size: int) -> List[T]:
    """Slice an in-memory ordered sequence down to one page."""
    start = page_offset(page, page_size)
    return list(items[start:start + page_size])


__all__ = [
    "PagedList", "to_paged_list", "page_slice", "page_offset",
    "normalize_page", "validate_page_size", "DEFAULT_PAGE_SIZE",
]
