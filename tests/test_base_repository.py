"""
Base Repository Tests

🏗️ Synchronous CRUD verbs, commit reporting and error handling.
"""

import logging

import pytest
from sqlalchemy.exc import IntegrityError

from repokit import BaseRepository, ContextMismatchError, RepositoryError, SaveResult
from repokit.persistence.repositories.base import pending_changes
from sample_models import Author, Book


@pytest.fixture
def repo(session):
    return BaseRepository(session, model=Book)


class TestConstruction:

    def test_requires_a_model(self, session):
        with pytest.raises(RepositoryError):
            BaseRepository(session)

    def test_model_from_class_attribute(self, session):
        class AuthorRepository(BaseRepository[Author]):
            model = Author

        assert AuthorRepository(session).model is Author

    def test_default_logger_is_named_after_class(self, repo):
        assert repo.logger.name == "repokit.persistence.repositories.base.BaseRepository"

    def test_injected_logger(self, session):
        custom = logging.getLogger("books")
        assert BaseRepository(session, logger=custom, model=Book).logger is custom

    def test_async_verbs_need_async_session(self, repo):
        with pytest.raises(ContextMismatchError):
            repo.async_db

    def test_context_mismatch_is_a_type_error(self, repo):
        with pytest.raises(TypeError):
            repo.async_db


class TestQueries:

    def test_get_returns_first_match(self, repo, seeded_books):
        book = repo.get_sync(Book.title == "Book 07")
        assert book is not None
        assert book.year == 2007

    def test_get_returns_none_without_match(self, repo, seeded_books):
        assert repo.get_sync(Book.title == "Missing") is None

    def test_get_range(self, repo, seeded_books):
        history = repo.get_range_sync(Book.genre == "history")
        assert sorted(book.title for book in history) == [
            "Book 01", "Book 04", "Book 07", "Book 10", "Book 13",
            "Book 16", "Book 19", "Book 22", "Book 25",
        ]

    def test_get_range_without_predicate_returns_all(self, repo, seeded_books):
        assert len(repo.get_range_sync()) == 25

    def test_count(self, repo, seeded_books):
        assert repo.count_sync() == 25
        assert repo.count_sync(Book.genre == "science") == 8


class TestWrites:

    def test_add_then_get(self, repo):
        assert repo.add_sync(Book(title="Dune", year=1965, genre="fiction")) is True

        stored = repo.get_sync(Book.title == "Dune")
        assert stored.id is not None
        assert (stored.year, stored.genre) == (1965, "fiction")

    def test_add_range(self, repo):
        assert repo.add_range_sync([Book(title="A"), Book(title="B")]) is True
        assert repo.count_sync() == 2

    def test_add_range_of_nothing_writes_nothing(self, repo):
        assert repo.add_range_sync([]) is False

    def test_update(self, repo, seeded_books):
        book = repo.get_sync(Book.title == "Book 05")
        book.rating = 0

        assert repo.update_sync(book) is True
        assert repo.get_sync(Book.title == "Book 05").rating == 0

    def test_update_detached_copy(self, repo, seeded_books):
        original = repo.get_sync(Book.title == "Book 05")
        copy = Book(id=original.id, title="Book 05 (revised)", year=original.year,
                    genre=original.genre, rating=original.rating)

        assert repo.update_sync(copy) is True
        assert repo.get_sync(Book.id == original.id).title == "Book 05 (revised)"

    def test_update_without_changes_reports_nothing_written(self, repo, seeded_books):
        book = repo.get_sync(Book.title == "Book 05")
        assert repo.update_sync(book) is False

    def test_update_range(self, repo, seeded_books):
        fiction = repo.get_range_sync(Book.genre == "fiction")
        for book in fiction:
            book.rating = 0

        assert repo.update_range_sync(fiction) is True
        assert repo.count_sync(Book.rating == 0) == 8

    def test_delete(self, repo, seeded_books):
        book = repo.get_sync(Book.title == "Book 01")

        assert repo.delete_sync(book) is True
        assert repo.get_sync(Book.title == "Book 01") is None

    def test_delete_by(self, repo, seeded_books):
        assert repo.delete_by_sync(Book.genre == "history") is True
        assert repo.count_sync(Book.genre == "history") == 8

    def test_delete_by_without_match_succeeds(self, repo, seeded_books):
        assert repo.delete_by_sync(Book.title == "Missing") is True
        assert repo.count_sync() == 25

    def test_delete_range(self, repo, seeded_books):
        science = repo.get_range_sync(Book.genre == "science")

        assert repo.delete_range_sync(science) is True
        assert repo.count_sync() == 17

    def test_delete_range_by(self, repo, seeded_books):
        assert repo.delete_range_by_sync(Book.year > 2020) is True
        assert repo.count_sync() == 20

    def test_delete_range_by_without_match_succeeds(self, repo, seeded_books):
        assert repo.delete_range_by_sync(Book.year > 3000) is True
        assert repo.count_sync() == 25


class TestSave:

    def test_save_commits_pending_changes(self, repo, session):
        session.add(Book(title="Pending"))
        assert repo.save_sync() is True
        assert repo.count_sync() == 1

    def test_save_with_nothing_pending(self, repo):
        assert repo.save_sync() is False

    def test_try_save_reports_affected(self, repo, session):
        session.add_all([Book(title="One"), Book(title="Two")])

        result = repo.try_save_sync()
        assert result == SaveResult(ok=True, affected=2)
        assert bool(result) is True

    def test_pending_changes_counts_new_dirty_and_deleted(self, session, seeded_books):
        seeded_books[0].rating = 99
        session.delete(seeded_books[1])
        session.add(Book(title="New"))

        assert pending_changes(session) == 3


class TestErrors:

    def test_add_propagates_persistence_errors(self, repo):
        with pytest.raises(IntegrityError):
            repo.add_sync(Book(title=None))

    def test_session_is_usable_after_failed_commit(self, repo):
        with pytest.raises(IntegrityError):
            repo.add_sync(Book(title=None))

        assert repo.add_sync(Book(title="Recovered")) is True
        assert repo.count_sync() == 1

    def test_save_absorbs_errors_and_logs(self, repo, session, caplog):
        session.add(Book(title=None))

        with caplog.at_level(logging.ERROR):
            assert repo.save_sync() is False

        assert any("Commit failed for Book" in record.message for record in caplog.records)

    def test_try_save_carries_the_error(self, repo, session):
        session.add(Book(title=None))

        result = repo.try_save_sync()
        assert result.ok is False
        assert isinstance(result.error, IntegrityError)
        assert not result


class TestWritesAfterReads:
    """Changes flushed early by a query still count toward the commit"""

    def test_save_after_count(self, repo, session):
        session.add(Book(title="Pending"))
        assert repo.count_sync() == 1

        assert repo.save_sync() is True

    def test_update_after_query(self, repo, seeded_books):
        book = repo.get_sync(Book.title == "Book 05")
        book.rating = 0
        repo.get_range_sync(Book.genre == "fiction")

        assert repo.update_sync(book) is True
        assert repo.count_sync(Book.rating == 0) == 1

    def test_try_save_counts_every_flush_since_last_commit(self, repo, session):
        session.add(Book(title="One"))
        repo.count_sync()
        session.add(Book(title="Two"))

        assert repo.try_save_sync().affected == 2

    def test_commit_outside_the_repository_is_not_reported_twice(self, repo, session):
        session.add(Book(title="Direct"))
        session.commit()

        assert repo.save_sync() is False

    def test_failed_commit_discards_its_count(self, repo, session):
        session.add(Book(title=None))
        assert repo.save_sync() is False

        assert repo.try_save_sync() == SaveResult(ok=False, affected=0)

    def test_repositories_sharing_a_session_count_once(self, repo, session):
        other = BaseRepository(session, model=Author)
        session.add(Book(title="Shared"))
        other.count_sync()

        assert repo.try_save_sync().affected == 1
