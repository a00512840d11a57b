"""Persistence layer for players, teams and released-player salaries."""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Protocol, Tuple, Type

from pydantic import BaseModel

from pyleague.models import Player, ReleasedPlayer, Team

logger = logging.getLogger(__name__)

# collection name -> (table, record model, key attribute)
COLLECTIONS: Dict[str, Tuple[str, Type[BaseModel], Optional[str]]] = {
    "players": ("players", Player, "pid"),
    "releasedPlayers": ("released_players", ReleasedPlayer, None),
    "teams": ("teams", Team, "tid"),
}


class Transaction(Protocol):
    """Read/write capability scoped to one unit of work.

    Writes are visible to later reads through the same transaction and to
    nobody else until it commits.
    """

    def get_all(self, collection: str) -> List[BaseModel]: ...

    def get(self, collection: str, key: int) -> Optional[BaseModel]: ...

    def put(self, collection: str, record: BaseModel) -> BaseModel: ...

    def add(self, collection: str, record: BaseModel) -> BaseModel: ...


def _collection(name: str) -> Tuple[str, Type[BaseModel], Optional[str]]:
    try:
        return COLLECTIONS[name]
    except KeyError:
        raise KeyError(f"Unknown collection '{name}'") from None


class StoreTransaction:
    """Transaction over a single SQLite connection."""

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def get_all(self, collection: str) -> List[BaseModel]:
        table, model, _ = _collection(collection)
        rows = self._conn.execute(f"SELECT payload FROM {table} ORDER BY id").fetchall()
        return [model.model_validate(json.loads(row["payload"])) for row in rows]

    def get(self, collection: str, key: int) -> Optional[BaseModel]:
        table, model, _ = _collection(collection)
        row = self._conn.execute(f"SELECT payload FROM {table} WHERE id = ?", (key,)).fetchone()
        if row is None:
            return None
        return model.model_validate(json.loads(row["payload"]))

    def require(self, collection: str, key: int) -> BaseModel:
        record = self.get(collection, key)
        if record is None:
            raise KeyError(f"{collection} record {key} not found")
        return record

    def put(self, collection: str, record: BaseModel) -> BaseModel:
        """Insert or replace ``record``; a missing key is assigned on insert."""

        return self._write(collection, record, replace=True)

    def add(self, collection: str, record: BaseModel) -> BaseModel:
        """Insert ``record``; an existing key raises ``ValueError``."""

        return self._write(collection, record, replace=False)

    def _write(self, collection: str, record: BaseModel, *, replace: bool) -> BaseModel:
        table, model, key_attr = _collection(collection)
        if not isinstance(record, model):
            raise TypeError(f"{collection} stores {model.__name__}, got {type(record).__name__}")

        key = getattr(record, key_attr) if key_attr else None
        if key is None:
            cursor = self._conn.execute(f"INSERT INTO {table} (payload) VALUES ('{{}}')")
            key = cursor.lastrowid
            if key_attr:
                record = record.model_copy(update={key_attr: key})
            replace = True

        payload = json.dumps(record.model_dump(mode="json", by_alias=True))
        verb = "INSERT OR REPLACE" if replace else "INSERT"
        try:
            self._conn.execute(f"{verb} INTO {table} (id, payload) VALUES (?, ?)", (key, payload))
        except sqlite3.IntegrityError as exc:
            raise ValueError(f"{collection} record {key} already exists") from exc
        return record


class LeagueStore:
    """SQLite-backed store with one table per collection."""

    def __init__(self, db_path: Path | str):
        self._use_uri = False
        env_db = os.getenv("PYLEAGUE_DB_PATH")
        if env_db:
            if env_db.startswith("file:"):
                self.db_path = env_db
                self._use_uri = True
            else:
                self.db_path = Path(env_db)
        elif isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
        self._keeper: sqlite3.Connection | None = None
        if self._use_uri and "mode=memory" in str(self.db_path):
            # Shared in-memory databases vanish with their last connection.
            self._keeper = self._connect()
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        else:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        conn = self._connect()
        try:
            for table, _, _ in COLLECTIONS.values():
                conn.execute(
                    f"""
                    CREATE TABLE IF NOT EXISTS {table} (
                        id INTEGER PRIMARY KEY,
                        payload TEXT NOT NULL
                    )
                    """
                )
            conn.commit()
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """Yield a transaction that commits on success and rolls back on error."""

        conn = self._connect()
        try:
            yield StoreTransaction(conn)
            conn.commit()
        except Exception:
            conn.rollback()
            logger.warning("Rolled back league store transaction on %s", self.db_path)
            raise
        finally:
            conn.close()

    def close(self) -> None:
        if self._keeper is not None:
            self._keeper.close()
            self._keeper = None


__all__ = ["COLLECTIONS", "LeagueStore", "StoreTransaction", "Transaction"]
