"""Single JSON document holding every product and usage event.

Keeping both collections in one file lets a commit land atomically:
the new document is written to a temp file in the same directory and
swapped in with ``os.replace``. Readers therefore always see either the
old or the new document, never a mix.

Commits against the same file are serialized with a process-wide lock,
and each commit re-reads the document before applying its changes, so
concurrent commits for different products do not overwrite each other.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from collections.abc import Callable
from pathlib import Path

from depletion.domain.exceptions import PersistenceError

_EMPTY_DOCUMENT = {"products": [], "usages": []}

_file_locks: dict[Path, threading.Lock] = {}
_file_locks_guard = threading.Lock()


def _lock_for(file_path: Path) -> threading.Lock:
    with _file_locks_guard:
        lock = _file_locks.get(file_path)
        if lock is None:
            lock = _file_locks[file_path] = threading.Lock()
        return lock


class JsonDocumentStore:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = _lock_for(file_path.resolve())
        self._ensure_file()

    def load(self) -> dict:
        try:
            return self._read()
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Failed to read {self._file_path.name}") from exc

    def update(self, apply: Callable[[dict], None]) -> None:
        """Re-read the document, let ``apply`` mutate it, write it back atomically."""
        with self._lock:
            try:
                document = self._read()
                apply(document)
                self._write(document)
            except (OSError, ValueError) as exc:
                raise PersistenceError(f"Failed to write {self._file_path.name}") from exc

    # --- File helpers ---------------------------------------------------------

    def _read(self) -> dict:
        document = json.loads(self._file_path.read_text(encoding="utf-8"))
        document.setdefault("products", [])
        document.setdefault("usages", [])
        return document

    def _write(self, document: dict) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=f".{self._file_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(json.dumps(document, indent=2) + "\n")
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _ensure_file(self) -> None:
        if self._file_path.exists():
            return
        with self._lock:
            try:
                if not self._file_path.exists():
                    self._file_path.parent.mkdir(parents=True, exist_ok=True)
                    self._write(dict(_EMPTY_DOCUMENT))
            except OSError as exc:
                raise PersistenceError(
                    f"Failed to initialise {self._file_path.name}"
                ) from exc
