"""JSON-file persistence for the demo store.

Layout under the data directory (created on first use):

  users.json        JSON array of user records
  credentials.json  JSON array of credential records
  counters.json     {"userCurrentId": n, "credentialCurrentId": n}

Every write replaces a whole file: the new content goes to a temp file
in the same directory and is moved over the old one with os.replace(),
which is atomic on POSIX and Windows.  A concurrent reader therefore
sees either the previous snapshot or the next one, never half a file.

There is no locking.  Two writers that read the same snapshot will both
write, and the last one wins.  That is acceptable for a single-process
demo and is why this module makes no durability promises.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

from vc_demo.core.metrics import STORAGE_ERRORS

logger = logging.getLogger(__name__)

USERS = "users"
CREDENTIALS = "credentials"

_COUNTER_KEYS = {
    USERS: "userCurrentId",
    CREDENTIALS: "credentialCurrentId",
}


class StorageError(RuntimeError):
    """A data file could not be read, parsed, or written."""


class JsonFileDB:
    """Owns the data directory: collection files plus the id counters."""

    def __init__(self, data_dir: str | Path) -> None:
        self._dir = Path(data_dir)
        self._counters_file = self._dir / "counters.json"
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            STORAGE_ERRORS.labels(operation="write").inc()
            raise StorageError(f"cannot create data dir {self._dir}: {e}") from e
        self._initialize_files()

    @property
    def data_dir(self) -> Path:
        return self._dir

    def _collection_file(self, name: str) -> Path:
        if name not in _COUNTER_KEYS:
            raise ValueError(f"unknown collection {name!r}")
        return self._dir / f"{name}.json"

    def _initialize_files(self) -> None:
        for name in _COUNTER_KEYS:
            path = self._collection_file(name)
            if not path.exists():
                self._write_json(path, [])
        if not self._counters_file.exists():
            self._write_json(self._counters_file, {key: 1 for key in _COUNTER_KEYS.values()})
        logger.debug("JSON store ready  data_dir=%s", self._dir)

    # --- low-level I/O ---------------------------------------------------

    def _read_json(self, path: Path) -> Any:
        try:
            with path.open(encoding="utf-8") as fh:
                return json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            STORAGE_ERRORS.labels(operation="read").inc()
            logger.error("Failed to read %s: %s", path, e)
            raise StorageError(f"cannot read {path.name}") from e

    def _write_json(self, path: Path, payload: Any) -> None:
        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self._dir, prefix=f".{path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            STORAGE_ERRORS.labels(operation="write").inc()
            logger.error("Failed to write %s: %s", path, e)
            raise StorageError(f"cannot write {path.name}") from e

    # --- collections -----------------------------------------------------

    def read_collection(self, name: str) -> list[dict[str, Any]]:
        path = self._collection_file(name)
        data = self._read_json(path)
        if not isinstance(data, list):
            STORAGE_ERRORS.labels(operation="read").inc()
            raise StorageError(f"{path.name} does not contain a JSON array")
        return data

    def write_collection(self, name: str, records: list[dict[str, Any]]) -> None:
        self._write_json(self._collection_file(name), records)

    # --- counters --------------------------------------------------------

    def read_counters(self) -> dict[str, int]:
        data = self._read_json(self._counters_file)
        if not isinstance(data, dict):
            STORAGE_ERRORS.labels(operation="read").inc()
            raise StorageError("counters.json does not contain a JSON object")
        return data

    def write_counters(self, counters: dict[str, int]) -> None:
        self._write_json(self._counters_file, counters)

    def insert(
        self, name: str, build: Callable[[int], dict[str, Any]]
    ) -> dict[str, Any]:
        """Allocate the next id for `name`, append build(id), persist both.

        `build` receives the allocated id and returns the record dict.
        Counters are written before the collection: a failure between the
        two writes leaves an unused id, never two records with one id.
        """
        records = self.read_collection(name)
        counters = self.read_counters()

        key = _COUNTER_KEYS[name]
        try:
            next_id = int(counters.get(key, 1))
        except (TypeError, ValueError) as e:
            raise StorageError(f"malformed counter {key}: {e!r}") from e
        counters[key] = next_id + 1

        record = build(next_id)
        records.append(record)

        self.write_counters(counters)
        self.write_collection(name, records)
        return record
