"""Most-recent-first history of manually entered hostnames."""

import json
from pathlib import Path
from threading import Lock

import structlog


logger = structlog.get_logger()

MAX_HISTORY_SIZE = 10
DEFAULT_HISTORY_PATH = Path.home() / ".endpoint-ranker" / "history.json"


class HostnameHistory:
    """Bounded, de-duplicated hostname history.

    Optionally mirrored to a JSON array on disk. A missing or unreadable
    file reads as an empty history.
    """

    def __init__(self, path: Path | None = None, max_size: int = MAX_HISTORY_SIZE) -> None:
        """Initialize the history.

        Args:
            path: Optional JSON file backing the history.
            max_size: Maximum number of hostnames kept.
        """
        self._path = path
        self._max_size = max_size
        self._lock = Lock()
        self._log = logger.bind(component="history")
        self._entries = self._load()

    def entries(self) -> list[str]:
        """Hostnames, most recent first."""
        with self._lock:
            return list(self._entries)

    def add(self, hostname: str) -> None:
        """Move ``hostname`` to the front, dropping the oldest past the cap.

        Blank hostnames are ignored.
        """
        hostname = hostname.strip()
        if not hostname:
            return

        with self._lock:
            entries = [h for h in self._entries if h != hostname]
            entries.insert(0, hostname)
            self._entries = entries[: self._max_size]
            self._save()

    def clear(self) -> None:
        """Remove every hostname."""
        with self._lock:
            self._entries = []
            if self._path is not None:
                self._path.unlink(missing_ok=True)

    def _load(self) -> list[str]:
        if self._path is None or not self._path.exists():
            return []

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            self._log.warning("history_unreadable", path=str(self._path), error=str(e))
            return []

        if not isinstance(data, list):
            self._log.warning("history_unreadable", path=str(self._path), error="not a list")
            return []
        return [h for h in data if isinstance(h, str) and h.strip()][: self._max_size]

    def _save(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self._entries), encoding="utf-8")
