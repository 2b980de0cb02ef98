"""Shared connection state with single-writer transitions."""

from src.connection.manager import ConnectionStateManager, StateListener
from src.connection.models import (
    ConnectionSnapshot,
    ConnectionState,
    ConnectionStateError,
)


__all__ = [
    "ConnectionSnapshot",
    "ConnectionState",
    "ConnectionStateError",
    "ConnectionStateManager",
    "StateListener",
]
