"""Load and save routinehub configuration (config.json in the data directory)."""

import json
from pathlib import Path
from typing import Any

from loguru import logger

from routinehub.config.schema import Config
from routinehub.utils.helpers import get_data_path


def get_config_path() -> Path:
    """Path of config.json (~/.routinehub/config.json or under ROUTINEHUB_DATA_DIR)."""
    return get_data_path() / "config.json"


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file, with environment overrides applied.

    Precedence, highest first: ROUTINEHUB_* environment variables, the
    config file, field defaults.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded configuration, or defaults if the file is missing or invalid.
    """
    path = config_path or get_config_path()
    # Only fields actually present in the environment count as "set".
    from_env = Config().model_dump(exclude_unset=True)

    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return Config(**_merge(data, from_env))
        except Exception as e:
            logger.warning(f"[Config] Failed to load {path}: {e}; using defaults")

    return Config()


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Write configuration to file."""
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(config.model_dump(), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
