"""Account snapshot stores."""
from __future__ import annotations

import copy
import json
import os
import pathlib
import re
import tempfile
import threading
from typing import Any, Protocol

_SAFE_ID = re.compile(r"^[A-Za-z0-9_.@-]+$")


class AccountStore(Protocol):
    """Persistence contract for engine snapshots, keyed by account id."""

    def load(self, account_id: str) -> dict[str, Any] | None:
        """Return the stored snapshot, or None if the account is new."""
        ...

    def save(self, account_id: str, data: dict[str, Any]) -> None:
        """Write the snapshot. Last write wins."""
        ...


class MemoryStore:
    """Process-local store. Snapshots are deep-copied in and out."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data: dict[str, dict[str, Any]] = {}

    def load(self, account_id: str) -> dict[str, Any] | None:
        with self._lock:
            data = self._data.get(account_id)
            return copy.deepcopy(data) if data is not None else None

    def save(self, account_id: str, data: dict[str, Any]) -> None:
        with self._lock:
            self._data[account_id] = copy.deepcopy(data)

    def accounts(self) -> list[str]:
        with self._lock:
            return list(self._data)


class JsonFileStore:
    """One JSON file per account under *directory*, written atomically."""

    def __init__(self, directory: str | pathlib.Path) -> None:
        self._dir = pathlib.Path(directory)

    @property
    def directory(self) -> pathlib.Path:
        return self._dir

    def path_for(self, account_id: str) -> pathlib.Path:
        if not _SAFE_ID.match(account_id) or account_id in (".", ".."):
            raise ValueError(f"Unsafe account id {account_id!r}")
        return self._dir / f"{account_id}.json"

    def load(self, account_id: str) -> dict[str, Any] | None:
        path = self.path_for(account_id)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as handle:
            return json.load(handle)

    def save(self, account_id: str, data: dict[str, Any]) -> None:
        target = self.path_for(account_id)
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".tmp_", dir=target.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, separators=(",", ":"))
            os.replace(tmp_path, target)
        finally:
            try:
                os.remove(tmp_path)
            except OSError:
                pass
