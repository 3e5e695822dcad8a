"""Record store abstraction for score-card persistence.

A record store holds named collections of flat JSON-compatible records, each
identified by its ``id`` field. Collections are read whole, records are
inserted or replaced by id, and deletes of absent ids are no-ops.

The file-backed store keeps one JSON array per collection. Files are written
atomically via temp-file-then-rename with owner-only permissions (0o600)
inside an owner-only directory (0o700).
"""

from __future__ import annotations

import asyncio
import contextlib
import copy
import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Protocol

import structlog

logger = structlog.get_logger()

Record = dict[str, Any]

_DATA_DIR_MODE = 0o700
_DATA_FILE_MODE = 0o600

_COLLECTION_NAME_RE = re.compile(r"^[a-z][a-z0-9_]*$")


def _check_collection(collection: str) -> None:
    if not _COLLECTION_NAME_RE.match(collection):
        raise ValueError(f"Invalid collection name: {collection!r}")


def _record_id(record: Record) -> str:
    record_id = record.get("id")
    if not isinstance(record_id, str) or not record_id:
        raise ValueError("Record must have a non-empty string 'id'")
    return record_id


class RecordStore(Protocol):
    """Protocol for the key-value persistence gateway."""

    async def get(self, collection: str) -> list[Record]: ...

    async def put(self, collection: str, record: Record) -> None: ...

    async def delete(self, collection: str, record_id: str) -> None: ...


class MemoryRecordStore:
    """Dict-backed record store living in process memory.

    Records are deep-copied on the way in and out so callers can never
    alias stored state.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, Record]] = {}

    async def get(self, collection: str) -> list[Record]:
        _check_collection(collection)
        return [copy.deepcopy(r) for r in self._collections.get(collection, {}).values()]

    async def put(self, collection: str, record: Record) -> None:
        _check_collection(collection)
        record_id = _record_id(record)
        self._collections.setdefault(collection, {})[record_id] = copy.deepcopy(record)

    async def delete(self, collection: str, record_id: str) -> None:
        _check_collection(collection)
        self._collections.get(collection, {}).pop(record_id, None)


class FileRecordStore:
    """Record store keeping each collection in ``<data_dir>/<collection>.json``.

    Insertion order of records is preserved across rewrites. An asyncio.Lock
    serialises read-modify-write cycles within a single process; running
    several processes against the same directory is not supported.
    """

    def __init__(self, data_dir: str | Path) -> None:
        self._data_dir = Path(data_dir).resolve()
        self._lock = asyncio.Lock()

    def _path(self, collection: str) -> Path:
        _check_collection(collection)
        return self._data_dir / f"{collection}.json"

    def _read(self, collection: str) -> list[Record]:
        """Load a collection file. A missing file is an empty collection.

        Raises OSError when an existing file cannot be read or parsed, so a
        later write never clobbers data we failed to load.
        """
        path = self._path(collection)
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, ValueError, OSError) as exc:
            msg = f"Failed to load collection from {path}"
            raise OSError(msg) from exc
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            msg = f"Expected JSON array of objects in {path}"
            raise OSError(msg)
        return data

    def _write(self, collection: str, records: list[Record]) -> None:
        path = self._path(collection)
        self._data_dir.mkdir(mode=_DATA_DIR_MODE, parents=True, exist_ok=True)
        content = json.dumps(records, indent=2).encode("utf-8")

        fd, tmp_path = tempfile.mkstemp(dir=str(self._data_dir), prefix=f".{collection}_", suffix=".tmp")
        fd_owned = True
        try:
            with os.fdopen(fd, "wb") as f:
                fd_owned = False  # os.fdopen took ownership; it will close fd
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
                os.fchmod(f.fileno(), _DATA_FILE_MODE)
            Path(tmp_path).replace(path)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise

    async def get(self, collection: str) -> list[Record]:
        async with self._lock:
            return self._read(collection)

    async def put(self, collection: str, record: Record) -> None:
        record_id = _record_id(record)
        async with self._lock:
            records = self._read(collection)
            for i, existing in enumerate(records):
                if existing.get("id") == record_id:
                    records[i] = record
                    break
            else:
                records.append(record)
            self._write(collection, records)
        logger.debug("stored record", collection=collection, record_id=record_id)

    async def delete(self, collection: str, record_id: str) -> None:
        async with self._lock:
            records = self._read(collection)
            remaining = [r for r in records if r.get("id") != record_id]
            if len(remaining) == len(records):
                return
            self._write(collection, remaining)
        logger.debug("deleted record", collection=collection, record_id=record_id)
