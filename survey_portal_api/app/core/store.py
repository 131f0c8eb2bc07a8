"""
Record store: whole‑collection persistence for the portal.

Every collection (users, survey responses, login records) is an
ordered list of JSON objects.  Callers only see the ``RecordStore``
interface; ``JsonFileRecordStore`` keeps each collection in a single
pretty‑printed JSON array file, so the data stays human readable and
can be inspected or edited by hand.  Swapping in an embedded database
later means writing another ``RecordStore`` without touching the
services.

Read‑modify‑write cycles go through ``append`` or ``update``, which
hold a per‑collection lock for the whole cycle.  Writes land in a
temporary file that is then renamed over the collection file, so a
crash never leaves a half‑written array behind.
"""

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, TypeVar

Record = Dict[str, Any]
T = TypeVar("T")

USERS = "users"
RESPONSES = "responses"
LOGINS = "logins"
COLLECTIONS = (USERS, RESPONSES, LOGINS)

logger = logging.getLogger(__name__)


class CorruptCollectionError(RuntimeError):
    """A collection file exists but does not hold a JSON array."""


class RecordStore(ABC):
    """Persistence interface for whole‑collection load and save."""

    @abstractmethod
    def load(self, collection: str) -> List[Record]:
        """Return all records of ``collection`` in insertion order.

        A collection that was never written is empty, not an error.
        """

    @abstractmethod
    def save(self, collection: str, records: Iterable[Record]) -> None:
        """Replace the whole content of ``collection``."""

    @abstractmethod
    def update(self, collection: str, mutator: Callable[[List[Record]], T]) -> T:
        """Load, mutate in place and save ``collection`` atomically.

        ``mutator`` receives the record list and may change it; its
        return value is passed through.  If it raises, nothing is
        written.
        """

    def append(self, collection: str, record: Record) -> Record:
        """Append one record at the end of ``collection``."""
        self.update(collection, lambda records: records.append(record))
        return record

    def ensure_collections(self) -> None:
        """Make sure every known collection is readable."""
        for name in COLLECTIONS:
            self.load(name)


class JsonFileRecordStore(RecordStore):
    """``RecordStore`` backed by one JSON array file per collection."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self._locks = {name: threading.RLock() for name in COLLECTIONS}

    def path_for(self, collection: str) -> Path:
        self._check(collection)
        return self.data_dir / f"{collection}.json"

    def _check(self, collection: str) -> None:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection {collection!r}")

    def load(self, collection: str) -> List[Record]:
        path = self.path_for(collection)
        with self._locks[collection]:
            if not path.exists():
                logger.info("Creating empty collection file %s", path)
                self._write(path, [])
                return []
            raw = path.read_text(encoding="utf-8")
            try:
                data = json.loads(raw) if raw.strip() else []
            except json.JSONDecodeError as exc:
                raise CorruptCollectionError(
                    f"Collection file {path} is not valid JSON: {exc}"
                ) from exc
            if not isinstance(data, list):
                raise CorruptCollectionError(f"Collection file {path} does not hold a JSON array")
            return data

    def save(self, collection: str, records: Iterable[Record]) -> None:
        path = self.path_for(collection)
        with self._locks[collection]:
            self._write(path, list(records))

    def update(self, collection: str, mutator: Callable[[List[Record]], T]) -> T:
        self._check(collection)
        with self._locks[collection]:
            records = self.load(collection)
            result = mutator(records)
            self.save(collection, records)
            return result

    def ensure_collections(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        super().ensure_collections()

    def _write(self, path: Path, records: List[Record]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}-", suffix=".tmp", dir=str(path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
