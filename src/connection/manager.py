"""Single-writer manager for the shared connection state."""

from collections import deque
from collections.abc import Callable
from threading import Lock
from typing import ClassVar

import structlog

from src.connection.models import (
    ConnectionSnapshot,
    ConnectionState,
    ConnectionStateError,
)
from src.feed.models import CandidateRecord


logger = structlog.get_logger()

StateListener = Callable[[ConnectionSnapshot], None]


class ConnectionStateManager:
    """Owns the connection state consumed after ranking.

    Writers are serialized by a lock. Each transition publishes a new frozen
    ConnectionSnapshot by swapping a single reference, so lock-free readers
    always see a complete value. Listeners run after the lock is released and
    receive snapshots in revision order, even when a listener itself triggers
    a transition.
    """

    VALID_TRANSITIONS: ClassVar[dict[ConnectionState, set[ConnectionState]]] = {
        ConnectionState.DISCONNECTED: {ConnectionState.CONNECTING},
        ConnectionState.CONNECTING: {
            ConnectionState.CONNECTED,
            ConnectionState.DISCONNECTING,
            ConnectionState.DISCONNECTED,
        },
        ConnectionState.CONNECTED: {
            ConnectionState.DISCONNECTING,
            ConnectionState.DISCONNECTED,
        },
        ConnectionState.DISCONNECTING: {ConnectionState.DISCONNECTED},
    }

    def __init__(self) -> None:
        """Initialize in the DISCONNECTED state."""
        self._write_lock = Lock()
        self._snapshot = ConnectionSnapshot()
        self._listeners: list[StateListener] = []
        self._pending: deque[ConnectionSnapshot] = deque()
        self._delivering = False
        self._log = logger.bind(component="connection")

    @property
    def snapshot(self) -> ConnectionSnapshot:
        """The currently published state."""
        return self._snapshot

    @property
    def state(self) -> ConnectionState:
        """Current lifecycle state."""
        return self._snapshot.state

    def can_transition(self, to_state: ConnectionState) -> bool:
        """Check if a transition from the current state is valid."""
        return to_state in self.VALID_TRANSITIONS.get(self._snapshot.state, set())

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with every published snapshot.

        Args:
            listener: Callable receiving the new snapshot.

        Returns:
            A function that unsubscribes the listener.
        """
        with self._write_lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._write_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def set_state(
        self,
        new_state: ConnectionState,
        server_name: str | None = None,
        address: str | None = None,
        is_manual: bool = False,
    ) -> ConnectionSnapshot:
        """Publish a state transition.

        A missing ``server_name``/``address`` keeps the current value.

        Args:
            new_state: Target state.
            server_name: Host identifier of the endpoint, if changing.
            address: Address of the endpoint, if changing.
            is_manual: Whether the endpoint was picked by hand.

        Returns:
            The newly published snapshot.

        Raises:
            ConnectionStateError: If the transition is invalid.
        """
        with self._write_lock:
            current = self._snapshot
            if not self.can_transition(new_state):
                self._log.error(
                    "invariant_violation",
                    error_type="illegal_state_transition",
                    from_state=current.state.name,
                    to_state=new_state.name,
                )
                raise ConnectionStateError(current.state, new_state)

            snapshot = ConnectionSnapshot(
                state=new_state,
                server_name=server_name if server_name is not None else current.server_name,
                address=address if address is not None else current.address,
                is_manual=is_manual
                and new_state in (ConnectionState.CONNECTING, ConnectionState.CONNECTED),
                revision=current.revision + 1,
            )
            self._publish(current, snapshot)
        self._deliver_pending()
        return snapshot

    def select(
        self, candidate: CandidateRecord, is_manual: bool = False
    ) -> ConnectionSnapshot:
        """Hand a chosen candidate to the connection lifecycle.

        Args:
            candidate: Ranked record picked by the user or by ``best()``.
            is_manual: Whether the user picked it by hand.

        Returns:
            The CONNECTING snapshot.
        """
        return self.set_state(
            ConnectionState.CONNECTING,
            server_name=candidate.host_identifier,
            address=candidate.address,
            is_manual=is_manual,
        )

    def reset(self) -> ConnectionSnapshot:
        """Force the DISCONNECTED state from any state and clear the endpoint."""
        with self._write_lock:
            current = self._snapshot
            snapshot = ConnectionSnapshot(
                state=ConnectionState.DISCONNECTED,
                revision=current.revision + 1,
            )
            self._publish(current, snapshot)
        self._deliver_pending()
        return snapshot

    def _publish(
        self, previous: ConnectionSnapshot, snapshot: ConnectionSnapshot
    ) -> None:
        """Swap in the new snapshot and queue it for listeners (lock held)."""
        self._snapshot = snapshot
        self._pending.append(snapshot)
        self._log.info(
            "connection_state_transition",
            from_state=previous.state.name,
            to_state=snapshot.state.name,
            server_name=snapshot.server_name,
            is_manual=snapshot.is_manual,
            revision=snapshot.revision,
        )

    def _deliver_pending(self) -> None:
        """Notify listeners of queued snapshots, oldest first (lock not held).

        Only one caller drains the queue at a time. A transition made while
        another caller is delivering, including one made from inside a
        listener, is queued and delivered by that caller after the current
        snapshot has reached every listener.
        """
        with self._write_lock:
            if self._delivering:
                return
            self._delivering = True

        while True:
            with self._write_lock:
                if not self._pending:
                    self._delivering = False
                    return
                snapshot = self._pending.popleft()
                listeners = list(self._listeners)

            for listener in listeners:
                try:
                    listener(snapshot)
                except Exception as e:  # noqa: BLE001
                    self._log.exception("state_listener_failed", error=str(e))
