"""
Persistence Exceptions

Error types raised by the repository layer. Persistence failures coming
from SQLAlchemy are not wrapped; they propagate as ``SQLAlchemyError``.
"""


class RepositoryError(Exception):
    """Base exception for repository operations"""
    pass


class InvalidArgumentError(RepositoryError, ValueError):
    """Raised for invalid paging input or unknown filter fields"""
    pass


class ContextMismatchError(RepositoryError, TypeError):
    """Raised when a verb is called with the wrong kind of session"""
    pass


__all__ = ["RepositoryError", "InvalidArgumentError", "ContextMismatchError"]
