from typing import Dict, List, Optional
from webfilter_core.storage.models import StateEntry
from webfilter_core.storage.provider import StateIterator, WorldStateStore, in_range


class InMemoryStateIterator(StateIterator):
    def __init__(self, entries: List[StateEntry]):
        self._entries = entries
        self._pos = 0
        self.closed = False

    def has_next(self) -> bool:
        return not self.closed and self._pos < len(self._entries)

    def next(self) -> StateEntry:
        if not self.has_next():
            raise StopIteration("range scan exhausted")
        entry = self._entries[self._pos]
        self._pos += 1
        return entry

    def close(self) -> None:
        self.closed = True


class InMemoryWorldState(WorldStateStore):
    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self.state: Dict[str, bytes] = dict(initial or {})

    def get_state(self, key: str) -> Optional[bytes]:
        return self.state.get(key)

    def put_state(self, key: str, value: bytes) -> None:
        self.state[key] = bytes(value)

    def del_state(self, key: str) -> None:
        self.state.pop(key, None)

    # range scans see a key-sorted snapshot taken when the scan starts
    def get_state_by_range(self, start_key: str, end_key: str) -> InMemoryStateIterator:
        entries = [
            StateEntry(key, self.state[key])
            for key in sorted(self.state)
            if in_range(key, start_key, end_key)
        ]
        return InMemoryStateIterator(entries)

    def keys(self) -> List[str]:
        return sorted(self.state)
