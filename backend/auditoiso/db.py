"""
Flat-file datastore.

Each collection lives in its own JSON file shaped ``{"<collection>": [...]}``.
Mutations run as read-modify-write under a per-collection lock and the file
is swapped in atomically, so a crash mid-write never leaves a truncated file.
The lock is process-local: several worker processes writing the same
DATA_DIR can still lose updates.
"""
import json
import os
import tempfile
from threading import Lock
from typing import Callable, Dict, List, Optional

from auditoiso.config import settings
from auditoiso.logger import logger

COLLECTIONS = ("users", "audits", "checklists")


class StoreError(Exception):
    """Raised when a collection file cannot be read or written."""


class JsonCollection:
    """One JSON file holding a list of records."""

    def __init__(self, path: str, name: str):
        self.path = path
        self.name = name
        self._lock = Lock()

    def _read_unlocked(self) -> List[dict]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Cannot read collection {self.name} at {self.path}: {e}")
            raise StoreError(f"collection {self.name} is unreadable") from e
        records = data.get(self.name) if isinstance(data, dict) else None
        return records or []

    def _write_unlocked(self, records: List[dict]):
        directory = os.path.dirname(self.path)
        fd, tmp_path = tempfile.mkstemp(prefix=f".{self.name}-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump({self.name: records}, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            logger.error(f"Cannot write collection {self.name} at {self.path}: {e}")
            raise StoreError(f"collection {self.name} is not writable") from e

    def all(self) -> List[dict]:
        with self._lock:
            return self._read_unlocked()

    def update(self, mutate: Callable[[List[dict]], Optional[List[dict]]]) -> List[dict]:
        """Apply ``mutate`` to the current records and persist the result.

        ``mutate`` may change the list in place (returning None) or return a
        new list. Returns the persisted records.
        """
        with self._lock:
            records = self._read_unlocked()
            result = mutate(records)
            if result is not None:
                records = result
            self._write_unlocked(records)
            return records

    def ensure_exists(self):
        with self._lock:
            if not os.path.exists(self.path):
                self._write_unlocked([])


class Database:
    """The set of collections under one data directory."""

    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        self.collections: Dict[str, JsonCollection] = {
            name: JsonCollection(os.path.join(data_dir, f"{name}.json"), name)
            for name in COLLECTIONS
        }

    @property
    def users(self) -> JsonCollection:
        return self.collections["users"]

    @property
    def audits(self) -> JsonCollection:
        return self.collections["audits"]

    @property
    def checklists(self) -> JsonCollection:
        return self.collections["checklists"]

    def status(self) -> dict:
        """Record count per collection, or the error that prevented reading it."""
        result = {}
        for name, collection in self.collections.items():
            try:
                result[name] = {"records": len(collection.all())}
            except StoreError as e:
                result[name] = {"error": str(e)}
        return {"data_dir": self.data_dir, "collections": result}


_db: Optional[Database] = None


def init_db(data_dir: Optional[str] = None) -> Database:
    """Create the data directory and empty collection files, then install the database."""
    global _db
    data_dir = data_dir or settings.DATA_DIR
    os.makedirs(data_dir, exist_ok=True)
    db = Database(data_dir)
    for collection in db.collections.values():
        collection.ensure_exists()
    _db = db
    logger.info(f"Data directory ready at {data_dir}")
    return db


def get_db() -> Database:
    """Get the database installed by ``init_db`` (initializing on first use)."""
    global _db
    if _db is None:
        _db = init_db()
    return _db
