"""
webfilter_core.errors
---------------------
Typed failures surfaced by the record contract to the host.

Nothing here is retried or recovered locally: the host decides whether to
resubmit the whole transaction.
"""

from __future__ import annotations
from typing import Any, Dict, Optional


class RecordContractError(Exception):
    """Base class for every failure the contract reports.

    Attributes:
        message: Human-readable error description
        details: Additional context (key, function name, ...)
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ==================== Serialization ====================


class EncodingError(RecordContractError):
    """A record could not be serialized (wrong field types, bad values)."""


class DecodingError(RecordContractError):
    """Stored bytes are malformed or do not match the record schema."""


# ==================== Store faults ====================


class StoreError(RecordContractError):
    pass


class StoreReadError(StoreError):
    """The world state could not be read or scanned."""


class StoreWriteError(StoreError):
    """The world state rejected a put or delete."""


# ==================== Preconditions ====================


class NotFoundError(RecordContractError):
    """The key is absent where the operation requires it to exist."""


class DuplicateKeyError(RecordContractError):
    """The key is present where the operation requires it to be absent."""


class InvalidKeyError(RecordContractError):
    """The key is not a non-empty string."""


# ==================== Dispatch ====================


class UnknownFunctionError(RecordContractError):
    pass


class InvalidArgumentError(RecordContractError):
    pass
