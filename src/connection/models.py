"""Data models for the shared connection state."""

from dataclasses import dataclass
from enum import Enum


class ConnectionState(Enum):
    """Connection lifecycle states.

    State transitions:
        DISCONNECTED -> CONNECTING: A candidate was selected
        CONNECTING -> CONNECTED: Tunnel established
        CONNECTING -> DISCONNECTING/DISCONNECTED: Attempt aborted or failed
        CONNECTED -> DISCONNECTING/DISCONNECTED: User or peer closed
        DISCONNECTING -> DISCONNECTED: Teardown finished
    """

    DISCONNECTED = "DISCONNECTED"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"
    DISCONNECTING = "DISCONNECTING"


@dataclass(frozen=True)
class ConnectionSnapshot:
    """One published, immutable view of the connection state.

    Attributes:
        state: Current lifecycle state.
        server_name: Host identifier of the selected endpoint.
        address: Network address of the selected endpoint.
        is_manual: Whether the user picked the endpoint by hand; only
            meaningful while CONNECTING or CONNECTED.
        revision: Incremented on every published change.
    """

    state: ConnectionState = ConnectionState.DISCONNECTED
    server_name: str | None = None
    address: str | None = None
    is_manual: bool = False
    revision: int = 0

    @property
    def is_active(self) -> bool:
        """Check whether a connection is being made or is up."""
        return self.state in (ConnectionState.CONNECTING, ConnectionState.CONNECTED)


class ConnectionStateError(Exception):
    """Raised when an invalid connection state transition is attempted."""

    def __init__(self, from_state: ConnectionState, to_state: ConnectionState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid connection state transition: {from_state.name} -> {to_state.name}"
        )
