from __future__ import annotations
from typing import Optional
import sqlite3, os
from webfilter_core.errors import StoreReadError, StoreWriteError
from webfilter_core.logger import get_logger
from webfilter_core.storage.models import StateEntry
from webfilter_core.storage.provider import StateIterator, WorldStateStore

log = get_logger("WebFilter.Storage.SQLite")


class SQLiteStateIterator(StateIterator):
    """Streams a range scan straight off a cursor, one row of lookahead."""

    def __init__(self, cursor: sqlite3.Cursor):
        self._cur = cursor
        self._row = None
        self.closed = False
        self._advance()

    def _advance(self) -> None:
        try:
            self._row = self._cur.fetchone()
        except sqlite3.Error as e:
            self.close()
            raise StoreReadError(f"failed to advance range scan: {e}") from e

    def has_next(self) -> bool:
        return not self.closed and self._row is not None

    def next(self) -> StateEntry:
        if not self.has_next():
            raise StopIteration("range scan exhausted")
        key, value = self._row
        self._advance()
        return StateEntry(key, bytes(value))

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._cur.close()


class SQLiteWorldState(WorldStateStore):
    def __init__(self, path="db/world_state.db"):
        # If no directory, default to current working directory
        dir_path = os.path.dirname(path) or "."
        os.makedirs(dir_path, exist_ok=True)
        self.db = sqlite3.connect(path, check_same_thread=False)

        self._init()

    def _init(self) -> None:
        self.db.execute("""CREATE TABLE IF NOT EXISTS world_state(
            state_key TEXT PRIMARY KEY,
            state_value BLOB NOT NULL
        )""")
        self.db.commit()

    def get_state(self, key: str) -> Optional[bytes]:
        try:
            cur = self.db.execute("SELECT state_value FROM world_state WHERE state_key=?", (key,))
            row = cur.fetchone()
        except sqlite3.Error as e:
            raise StoreReadError(f"failed to read {key!r} from world state: {e}", {"key": key}) from e
        if not row: return None
        return bytes(row[0])

    def put_state(self, key: str, value: bytes) -> None:
        try:
            self.db.execute(
                "INSERT INTO world_state(state_key,state_value) VALUES(?,?) "
                "ON CONFLICT(state_key) DO UPDATE SET state_value=excluded.state_value",
                (key, sqlite3.Binary(value))
            )
            self.db.commit()
        except sqlite3.Error as e:
            raise StoreWriteError(f"failed to put {key!r} to world state: {e}", {"key": key}) from e

    def del_state(self, key: str) -> None:
        try:
            self.db.execute("DELETE FROM world_state WHERE state_key=?", (key,))
            self.db.commit()
        except sqlite3.Error as e:
            raise StoreWriteError(f"failed to delete {key!r} from world state: {e}", {"key": key}) from e

    def get_state_by_range(self, start_key: str, end_key: str) -> SQLiteStateIterator:
        clauses, params = [], []
        if start_key:
            clauses.append("state_key >= ?")
            params.append(start_key)
        if end_key:
            clauses.append("state_key < ?")
            params.append(end_key)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        sql = f"SELECT state_key, state_value FROM world_state{where} ORDER BY state_key"

        try:
            cur = self.db.cursor()
            cur.execute(sql, tuple(params))
        except sqlite3.Error as e:
            raise StoreReadError(f"failed to start range scan: {e}") from e
        log.debug(f"[RANGE] start={start_key!r} end={end_key!r}")
        return SQLiteStateIterator(cur)

    def close(self):
        self.db.close()
