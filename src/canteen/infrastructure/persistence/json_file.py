"""A JSON list on disk, shared safely between processes.

Writers take an exclusive ``flock`` on a sidecar ``.<name>.lock`` file for
the whole read-modify-write, and replace the data file atomically, so a
reader never sees a half-written file and never needs the lock.
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from canteen.domain.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


class JsonListFile:

    def __init__(self, path: Path, label: str) -> None:
        self.path = path
        self._label = label
        self._lock_path = path.with_name(f".{path.name}.lock")
        self._ensure()

    def _unavailable(self, action: str, exc: Exception) -> StoreUnavailableError:
        logger.error("Cannot %s %s %s: %s", action, self._label.lower(), self.path, exc)
        return StoreUnavailableError(f"{self._label} unavailable: {exc}")

    def _ensure(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                with self.locked():
                    if not self.path.exists():
                        self.save([])
        except OSError as exc:
            raise self._unavailable("create", exc) from exc

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the cross-process write lock for a read-modify-write."""
        try:
            lock_file = open(self._lock_path, "w")
        except OSError as exc:
            raise self._unavailable("lock", exc) from exc
        with lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def load(self) -> list[dict]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise self._unavailable("read", exc) from exc

    def save(self, records: list[dict]) -> None:
        """Write *records* to a temp file, then rename it over the data file."""
        try:
            fd, temp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.stem}_", suffix=".tmp"
            )
        except OSError as exc:
            raise self._unavailable("write", exc) from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
                f.write("\n")
            os.replace(temp_path, self.path)
        except OSError as exc:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise self._unavailable("write", exc) from exc
