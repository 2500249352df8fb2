"""
JSON file persistence shared by the user and token stores.

Every read-modify-write cycle runs under a lock file next to the data file,
so separate processes (the API workers, scripts/create_user.py) see each
other's writes. Saves go to a temporary file that replaces the data file in
one step; an interrupted save leaves the previous contents in place.
"""

import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from filelock import FileLock

LOCK_TIMEOUT_SECONDS = 10


class JsonFileStore:
    """Base class for stores that keep one JSON object in one file."""

    def __init__(self, file_path: Path):
        self.file_path = Path(file_path)
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_lock = FileLock(f"{self.file_path}.lock", timeout=LOCK_TIMEOUT_SECONDS)

        with self.locked():
            if not self.file_path.exists():
                self._save_all({})

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the cross-process lock for a load, modify and save cycle."""
        with self._file_lock:
            yield

    def _load_all(self) -> dict[str, dict]:
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return {}

    def _save_all(self, records: dict[str, dict]):
        """Write records to a temporary file, then move it over the data file."""
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.file_path.parent,
            prefix=f".{self.file_path.name}.",
            suffix=".tmp",
            delete=False
        ) as tmp:
            tmp_path = tmp.name
            try:
                json.dump(records, tmp, indent=2, ensure_ascii=False)
                tmp.flush()
                os.fsync(tmp.fileno())
            except Exception:
                tmp.close()
                os.unlink(tmp_path)
                raise

        os.replace(tmp_path, self.file_path)
