"""Utility helpers for routinehub."""
