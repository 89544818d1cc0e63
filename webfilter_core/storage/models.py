# webfilter_core/storage/models.py
from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class StateEntry:
    """
    One (key, value) pair yielded by a world state range scan.

    Storage-agnostic; every provider's iterator returns these.
    """
    key: str
    value: bytes
