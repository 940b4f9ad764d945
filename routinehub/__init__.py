"""routinehub - recurring routines, daily agendas and completion streaks."""

__version__ = "0.1.0"
__logo__ = "🗓️"
