"""Storage backend abstraction for routine data.

The engine never touches disk; this module is the adapter a caller uses to
persist state between sessions.
- StorageBackend: Abstract base class defining the interface.
- JsonStorageBackend: File-based JSON storage under <workspace>/routines/.
- load_json_file: Shared utility for safe JSON file loading.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import NamedTuple

from loguru import logger


class SaveResult(NamedTuple):
    """Result of a storage save operation.

    NamedTuple so ``ok, msg = save_tasks(data)`` unpacking works.
    """

    success: bool
    message: str


def load_json_file(path: Path, default: dict | None = None) -> dict:
    """Load a JSON file, returning default when missing or unreadable.

    A corrupt file is logged and read as the default; the next validated
    save rewrites it with a valid structure.
    """
    if not path.exists():
        return default or {}
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except Exception:
        logger.exception(f"[Storage] Could not read {path}, using defaults")
        return default or {}


# ============================================================================
# Storage Backend ABC
# ============================================================================


class StorageBackend(ABC):
    """Abstract storage backend for routine data.

    Each entity has a load/save pair:
    - load_* returns the full file-level dict (e.g., {"version": "1.0", "tasks": [...]}).
    - save_* validates, then delegates to _persist_* (Template Method pattern).

    Subclasses implement _persist_* (and load_*) only.
    """

    # --- Tasks ---
    @abstractmethod
    def load_tasks(self) -> dict: ...

    def save_tasks(self, data: dict) -> SaveResult:
        """Validate and persist task definitions."""
        try:
            from routinehub.routine.schema import validate_tasks_file

            validate_tasks_file(data)
        except Exception as e:
            return SaveResult(False, f"Validation error: {e}")
        return self._persist_tasks(data)

    @abstractmethod
    def _persist_tasks(self, data: dict) -> SaveResult: ...

    # --- Completions ---
    @abstractmethod
    def load_completions(self) -> dict: ...

    def save_completions(self, data: dict) -> SaveResult:
        """Validate and persist the completion ledger."""
        try:
            from routinehub.routine.schema import validate_completions_file

            validate_completions_file(data)
        except Exception as e:
            return SaveResult(False, f"Validation error: {e}")
        return self._persist_completions(data)

    @abstractmethod
    def _persist_completions(self, data: dict) -> SaveResult: ...

    # --- Lifecycle ---
    def close(self) -> None:
        """Release resources. No-op for stateless backends."""


# ============================================================================
# JSON Storage Backend
# ============================================================================


class JsonStorageBackend(StorageBackend):
    """File-based JSON storage.

    Reads/writes workspace/routines/tasks.json and completions.json.
    """

    def __init__(self, workspace: Path):
        self._workspace = Path(workspace)
        self._routines_dir = self._workspace / "routines"

    @property
    def routines_dir(self) -> Path:
        return self._routines_dir

    def _load_json(self, path: Path, default: dict | None = None) -> dict:
        return load_json_file(path, default)

    def _save_json(self, path: Path, data: dict) -> SaveResult:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            return SaveResult(True, "Saved successfully")
        except Exception as e:
            return SaveResult(False, f"Error: {e}")

    # --- Tasks ---

    def load_tasks(self) -> dict:
        return self._load_json(
            self._routines_dir / "tasks.json",
            default={"version": "1.0", "tasks": []},
        )

    def _persist_tasks(self, data: dict) -> SaveResult:
        return self._save_json(self._routines_dir / "tasks.json", data)

    # --- Completions ---

    def load_completions(self) -> dict:
        return self._load_json(
            self._routines_dir / "completions.json",
            default={"version": "1.0", "completions": {}},
        )

    def _persist_completions(self, data: dict) -> SaveResult:
        return self._save_json(self._routines_dir / "completions.json", data)


# ============================================================================
# In-memory backend
# ============================================================================


class MemoryStorageBackend(StorageBackend):
    """Keeps file-level dicts in memory. Useful per request or in tests."""

    def __init__(self, tasks: dict | None = None, completions: dict | None = None):
        self._tasks = tasks or {"version": "1.0", "tasks": []}
        self._completions = completions or {"version": "1.0", "completions": {}}

    def load_tasks(self) -> dict:
        return json.loads(json.dumps(self._tasks))

    def _persist_tasks(self, data: dict) -> SaveResult:
        self._tasks = json.loads(json.dumps(data))
        return SaveResult(True, "Saved successfully")

    def load_completions(self) -> dict:
        return json.loads(json.dumps(self._completions))

    def _persist_completions(self, data: dict) -> SaveResult:
        self._completions = json.loads(json.dumps(data))
        return SaveResult(True, "Saved successfully")
