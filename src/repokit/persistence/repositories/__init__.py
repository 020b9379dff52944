"""
Repositories - Generic Data Access

- interface: the repository contracts
- base: session holder and CRUD verbs
- utility: paged queries and accessory entities
"""

from .interface import (
    IRepository, IBaseRepository, IUtilityRepository, SaveResult,
    EntityType, AccessoryType,
)
from .base import (
    Repository, BaseRepository, PersistenceContext,
    pending_changes, track_writes, committed_changes,
)
from .utility import UtilityRepository

__all__ = [
    "IRepository", "IBaseRepository", "IUtilityRepository", "SaveResult",
    "EntityType", "AccessoryType",
    "Repository", "BaseRepository", "UtilityRepository",
    "PersistenceContext", "pending_changes", "track_writes", "committed_changes",
]
