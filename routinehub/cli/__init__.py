"""CLI module for routinehub."""
