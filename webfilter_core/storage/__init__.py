# webfilter_core/storage/__init__.py

from .models import StateEntry
from .provider import StateIterator, WorldStateStore
from .providers.memory_provider import InMemoryWorldState
from .providers.sqlite_provider import SQLiteWorldState
import os


def load_storage_provider(config: dict | None = None) -> WorldStateStore:
    """
    Factory resolver for the world state backend used outside a real host.

    Supported:
        - memory (default)
        - sqlite
    """
    config = config or {}
    provider = config.get("provider") or os.getenv("WEBFILTER_STORAGE_PROVIDER", "memory")

    if provider == "memory":
        return InMemoryWorldState()

    if provider == "sqlite":
        db_path = config.get("sqlite_path") or os.getenv("WEBFILTER_DB_PATH", "db/world_state.db")
        return SQLiteWorldState(db_path)

    raise ValueError(f"Unknown storage provider: {provider}")


__all__ = [
    "StateEntry",
    "StateIterator",
    "WorldStateStore",
    "InMemoryWorldState",
    "SQLiteWorldState",
    "load_storage_provider",
]
