"""Configuration module for routinehub."""

from routinehub.config.loader import get_config_path, load_config, save_config
from routinehub.config.schema import Config, RoutineConfig

__all__ = ["Config", "RoutineConfig", "get_config_path", "load_config", "save_config"]
