"""Real-time notifier interface.

The service layer pushes notification payloads to connected clients through
a Notifier passed in at construction. The transport (sockets, SSE, a message
broker) lives outside this package.
"""

import logging
import threading
from typing import Any, Dict, List, Protocol, Tuple

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Anything that can push a payload to one user."""

    def send(self, user_id: str, payload: Dict[str, Any]) -> None: ...


class NullNotifier:
    """Notifier that drops every payload (no real-time transport configured)."""

    def send(self, user_id: str, payload: Dict[str, Any]) -> None:
        logger.debug(f"Real-time push skipped for user {user_id}: no transport")


class InMemoryNotifier:
    """Notifier that keeps every payload in memory, grouped by recipient on read."""

    def __init__(self):
        self._lock = threading.Lock()
        self.sent: List[Tuple[str, Dict[str, Any]]] = []

    def send(self, user_id: str, payload: Dict[str, Any]) -> None:
        with self._lock:
            self.sent.append((user_id, payload))

    def payloads_for(self, user_id: str) -> List[Dict[str, Any]]:
        with self._lock:
            return [payload for uid, payload in self.sent if uid == user_id]
