"""
webfilter_core.contract
-----------------------
RecordContract: create/read/update/delete/transfer of FilterRecords over the
world state, one transaction per call.

Every operation receives the host's TransactionContext explicitly. The
contract never commits, rolls back, retries or caches; it validates, encodes
and issues store calls, and every failure propagates as a typed error.
"""

from __future__ import annotations
import os
from typing import List, Optional
from .context import TransactionContext
from .errors import (
    RecordContractError, StoreError, StoreReadError, StoreWriteError,
    NotFoundError, DuplicateKeyError, InvalidKeyError,
)
from .logger import get_logger
from .record import FilterRecord
from .seeds import DEFAULT_SEED_TABLE, SeedTable, load_seed_table

log = get_logger("WebFilter.Contract")


def _check_key(key) -> None:
    if not isinstance(key, str) or not key:
        raise InvalidKeyError(f"key must be a non-empty string, got {key!r}", {"key": key})


class RecordContract:
    def __init__(self, seeds: Optional[SeedTable] = None):
        self.seeds = seeds if seeds is not None else DEFAULT_SEED_TABLE

    @classmethod
    def from_config(cls, config: dict | None = None) -> "RecordContract":
        """Build a contract whose seed table comes from `seed_file` / WEBFILTER_SEED_FILE."""
        config = config or {}
        seed_file = config.get("seed_file") or os.getenv("WEBFILTER_SEED_FILE")
        if seed_file:
            return cls(load_seed_table(seed_file))
        return cls()

    # ------------------------------------------------------------------
    # Store access; anything a store raises that is not already typed
    # becomes StoreReadError / StoreWriteError
    # ------------------------------------------------------------------
    @staticmethod
    def _get_state(ctx: TransactionContext, key: str) -> Optional[bytes]:
        try:
            return ctx.get_stub().get_state(key)
        except StoreError:
            raise
        except Exception as e:
            raise StoreReadError(f"failed to read from world state: {e}", {"key": key}) from e

    @staticmethod
    def _put_state(ctx: TransactionContext, key: str, value: bytes) -> None:
        try:
            ctx.get_stub().put_state(key, value)
        except StoreError:
            raise
        except Exception as e:
            raise StoreWriteError(f"failed to put to world state: {e}", {"key": key}) from e

    @staticmethod
    def _del_state(ctx: TransactionContext, key: str) -> None:
        try:
            ctx.get_stub().del_state(key)
        except StoreError:
            raise
        except Exception as e:
            raise StoreWriteError(f"failed to delete from world state: {e}", {"key": key}) from e

    def _require(self, ctx: TransactionContext, key: str) -> None:
        if not self.exists(ctx, key):
            log.warning(f"[MISSING] key={key}")
            raise NotFoundError(f"the record {key} does not exist", {"key": key})

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def initialize(self, ctx: TransactionContext) -> None:
        """Write every seed record, without existence checks."""
        for rec in self.seeds:
            self._put_state(ctx, rec.key, rec.encode())
        log.info(f"[INIT] seeded {len(self.seeds)} records tx={ctx.tx_id}")

    def create(self, ctx: TransactionContext, key: str, blocklist: str, attribute2: int,
               attribute1: str, webfilterlist: int) -> None:
        _check_key(key)
        if self.exists(ctx, key):
            log.warning(f"[DUPLICATE] key={key}")
            raise DuplicateKeyError(f"the record {key} already exists", {"key": key})

        rec = FilterRecord(key, blocklist, attribute2, attribute1, webfilterlist)
        self._put_state(ctx, key, rec.encode())
        log.info(f"[CREATE] key={key} tx={ctx.tx_id}")

    def read(self, ctx: TransactionContext, key: str) -> FilterRecord:
        _check_key(key)
        log.debug(f"[READ] key={key}")
        data = self._get_state(ctx, key)
        if data is None:
            raise NotFoundError(f"the record {key} does not exist", {"key": key})
        return FilterRecord.decode(data)

    def update(self, ctx: TransactionContext, key: str, blocklist: str, attribute2: int,
               attribute1: str, webfilterlist: int) -> None:
        """Replace the whole record stored under `key`."""
        _check_key(key)
        self._require(ctx, key)

        rec = FilterRecord(key, blocklist, attribute2, attribute1, webfilterlist)
        self._put_state(ctx, key, rec.encode())
        log.info(f"[UPDATE] key={key} tx={ctx.tx_id}")

    def delete(self, ctx: TransactionContext, key: str) -> None:
        _check_key(key)
        self._require(ctx, key)
        self._del_state(ctx, key)
        log.info(f"[DELETE] key={key} tx={ctx.tx_id}")

    def exists(self, ctx: TransactionContext, key: str) -> bool:
        _check_key(key)
        return self._get_state(ctx, key) is not None

    def transfer(self, ctx: TransactionContext, key: str, new_value: str) -> str:
        """Set attribute1 to `new_value` and return the value it replaced."""
        rec = self.read(ctx, key)
        previous = rec.attribute1
        rec.attribute1 = new_value
        self._put_state(ctx, key, rec.encode())
        log.info(f"[TRANSFER] key={key} tx={ctx.tx_id}")
        return previous

    def get_all(self, ctx: TransactionContext) -> List[FilterRecord]:
        """
        Every record in world state, in the order the store iterates
        (not necessarily sorted by key).
        """
        try:
            it = ctx.get_stub().get_state_by_range("", "")
        except StoreError:
            raise
        except Exception as e:
            raise StoreReadError(f"failed to start range scan: {e}") from e

        records: List[FilterRecord] = []
        try:
            while True:
                try:
                    if not it.has_next():
                        break
                    entry = it.next()
                except RecordContractError:
                    raise
                except Exception as e:
                    raise StoreReadError(f"failed to advance range scan: {e}") from e
                records.append(FilterRecord.decode(entry.value))
        finally:
            it.close()

        log.debug(f"[GET ALL] count={len(records)}")
        return records
