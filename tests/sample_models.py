"""Sample SQLModel entities and repositories shared by the test suite."""

from typing import Any, List, Optional

from pydantic import BaseModel
from sqlmodel import Field, Relationship, SQLModel, select

from repokit import UtilityRepository, page_by, to_paged_list


class Author(SQLModel, table=True):
    __tablename__ = "authors"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    country: Optional[str] = None

    books: List["Book"] = Relationship(back_populates="author")


class Book(SQLModel, table=True):
    __tablename__ = "books"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    year: int = 2000
    genre: Optional[str] = None
    rating: Optional[int] = None
    author_id: Optional[int] = Field(default=None, foreign_key="authors.id")

    author: Optional[Author] = Relationship(back_populates="books")


class BookFilter(BaseModel):
    """Structured filter value for attribute-matched paging"""
    genre: Optional[str] = None
    rating: Optional[int] = None


class BookRepository(UtilityRepository[Book]):
    model = Book

    async def get_custom_page(self, predicate: Any, page: int, page_size: int = 10):
        stmt = page_by(select(Book).where(predicate), Book.id, page, page_size)
        items = (await self.async_db.scalars(stmt)).all()
        return to_paged_list(items, await self.count(predicate), page_size, page)


class AuthorRepository(UtilityRepository[Author]):
    model = Author

    async def get_custom_page(self, predicate: Any, page: int, page_size: int = 10):
        stmt = page_by(select(Author).where(predicate), Author.name, page, page_size)
        items = (await self.async_db.scalars(stmt)).all()
        return to_paged_list(items, await self.count(predicate), page_size, page)
