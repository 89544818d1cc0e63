"""
webfilter_core.context
----------------------
Transaction context handed to every contract operation, plus a small
stand-in for the host's transaction boundary.

A real host supplies its own context and commits the read/write set itself.
TransactionStub and run_in_transaction reproduce that boundary for tests and
local runs: writes are buffered, reads see committed state only, and the
write set is applied all at once or rolled back.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple
from .logger import get_logger
from .storage.provider import StateIterator, WorldStateStore
from .utils import new_id

log = get_logger("WebFilter.Transaction")


@dataclass
class TransactionContext:
    stub: WorldStateStore
    tx_id: str = field(default_factory=new_id)

    def get_stub(self) -> WorldStateStore:
        return self.stub


class TransactionStub(WorldStateStore):
    def __init__(self, store: WorldStateStore):
        self.store = store
        # key -> value, None marks a delete; insertion order is write order
        self.write_set: Dict[str, Optional[bytes]] = {}

    def get_state(self, key: str) -> Optional[bytes]:
        return self.store.get_state(key)

    def put_state(self, key: str, value: bytes) -> None:
        self.write_set[key] = bytes(value)

    def del_state(self, key: str) -> None:
        self.write_set[key] = None

    def get_state_by_range(self, start_key: str, end_key: str) -> StateIterator:
        return self.store.get_state_by_range(start_key, end_key)

    def commit(self) -> None:
        """
        Apply the write set to the backing store. If the store rejects a
        write, every key already applied is restored to its prior value
        before the error propagates.
        """
        applied: List[Tuple[str, Optional[bytes]]] = []
        try:
            for key, value in self.write_set.items():
                applied.append((key, self.store.get_state(key)))
                if value is None:
                    self.store.del_state(key)
                else:
                    self.store.put_state(key, value)
        except Exception:
            log.warning(f"[TX ROLLBACK] restoring {len(applied)} keys")
            for key, prior in reversed(applied):
                if prior is None:
                    self.store.del_state(key)
                else:
                    self.store.put_state(key, prior)
            raise
        finally:
            self.write_set.clear()

    def abort(self) -> None:
        self.write_set.clear()


def run_in_transaction(store: WorldStateStore, operation: Callable[..., Any], *args: Any) -> Any:
    """
    Run one contract operation as a single transaction against `store`.

    Commits the buffered writes if the operation returns, drops them and
    re-raises if the operation or the commit fails.
    """
    stub = TransactionStub(store)
    ctx = TransactionContext(stub)
    try:
        result = operation(ctx, *args)
        writes = len(stub.write_set)
        stub.commit()
    except Exception:
        log.warning(f"[TX ABORT] tx={ctx.tx_id} writes={len(stub.write_set)}")
        stub.abort()
        raise
    log.debug(f"[TX COMMIT] tx={ctx.tx_id} writes={writes}")
    return result
