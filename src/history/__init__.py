"""Hostname input history."""

from src.history.history import DEFAULT_HISTORY_PATH, MAX_HISTORY_SIZE, HostnameHistory


__all__ = ["DEFAULT_HISTORY_PATH", "MAX_HISTORY_SIZE", "HostnameHistory"]
