"""Configuration schema using Pydantic."""

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RoutineConfig(BaseModel):
    """Agenda and streak tuning."""

    lookahead_minutes: int = Field(120, ge=0)  # "Next reminders" window
    imminent_minutes: int = Field(45, ge=0)  # "Starts soon" highlight in today's list
    streak_lookback_days: int = Field(30, ge=1)


class Config(BaseSettings):
    """Root configuration for routinehub."""

    model_config = SettingsConfigDict(
        env_prefix="ROUTINEHUB_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    workspace: str = "~/.routinehub/workspace"
    routine: RoutineConfig = Field(default_factory=RoutineConfig)

    @property
    def workspace_path(self) -> Path:
        """Get expanded workspace path."""
        return Path(self.workspace).expanduser()
