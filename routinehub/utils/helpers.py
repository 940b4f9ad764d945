"""Utility functions for routinehub."""

import os
from pathlib import Path


def ensure_dir(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_path() -> Path:
    """Get the routinehub data directory (~/.routinehub or ROUTINEHUB_DATA_DIR)."""
    override = (os.environ.get("ROUTINEHUB_DATA_DIR") or "").strip() or None
    return ensure_dir(Path(override) if override else Path.home() / ".routinehub")


def get_workspace_path(workspace: str | None = None) -> Path:
    """
    Get the workspace path.

    Args:
        workspace: Optional workspace path. Defaults to <data dir>/workspace.

    Returns:
        Expanded and ensured workspace path.
    """
    if workspace:
        path = Path(workspace).expanduser()
    else:
        path = get_data_path() / "workspace"
    return ensure_dir(path)
