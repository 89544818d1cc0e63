"""
webfilter_core.storage.provider
-------------------------------
The world state capability consumed by the record contract.

The host owns the real store (and its durability); the contract only sees
this narrow interface. Providers report faults as StoreReadError or
StoreWriteError.
"""

from __future__ import annotations
from typing import Optional
from webfilter_core.storage.models import StateEntry


class StateIterator:
    """
    Cursor over a range scan. Must be closed once the caller is done,
    on every exit path; use it as a context manager.
    """

    def has_next(self) -> bool:
        raise NotImplementedError

    def next(self) -> StateEntry:
        raise NotImplementedError

    def close(self) -> None:
        return

    def __enter__(self) -> "StateIterator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class WorldStateStore:
    # Interface
    def get_state(self, key: str) -> Optional[bytes]: ...
    def put_state(self, key: str, value: bytes) -> None: ...
    def del_state(self, key: str) -> None: ...

    def get_state_by_range(self, start_key: str, end_key: str) -> StateIterator:
        """
        Scan keys in [start_key, end_key). An empty start_key or end_key
        leaves that side of the range open; ("", "") is the whole key space.
        """
        raise NotImplementedError


def in_range(key: str, start_key: str, end_key: str) -> bool:
    if start_key and key < start_key:
        return False
    if end_key and key >= end_key:
        return False
    return True
