"""Session storage for webftp.

A SessionStore is the per-user key/value store that survives across
requests. SessionRegistry keeps the variables of every session in
memory, with one lock per session.
"""

import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

# Called with the session id and its variables after a session is dropped
DiscardCallback = Callable[[str, Dict[str, Any]], None]


class SessionStore(ABC):
    """Key/value variables of one user session."""

    @property
    @abstractmethod
    def session_id(self) -> str:
        """Identifier of the session."""

    @abstractmethod
    def start(self) -> None:
        """Create the session if it does not exist yet."""

    @abstractmethod
    def get_variable(self, key: str, default: Any = None) -> Any:
        """Return a stored value, or default if absent."""

    @abstractmethod
    def set_variable(self, key: str, value: Any) -> None:
        """Store a value under key."""

    @abstractmethod
    def remove_variable(self, key: str) -> None:
        """Forget a value; absent keys are ignored."""


class SessionRegistry:
    """In-memory variables of all sessions, keyed by session id."""

    def __init__(self, on_discard: Optional[DiscardCallback] = None):
        self._on_discard = on_discard
        self._sessions: Dict[str, Dict[str, Any]] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _ensure(self, session_id: str) -> None:
        # Caller holds _guard
        if session_id not in self._sessions:
            self._sessions[session_id] = {}
            self._locks[session_id] = threading.Lock()

    def create(self, session_id: str) -> Dict[str, Any]:
        """Return the variables of a session, creating them if needed."""
        with self._guard:
            self._ensure(session_id)
            return self._sessions[session_id]

    def lock_for(self, session_id: str) -> threading.Lock:
        """
        Lock that serializes requests of one session.

        Hold it for the whole request so no two operations run on the
        same adapter at once.
        """
        with self._guard:
            self._ensure(session_id)
            return self._locks[session_id]

    def exists(self, session_id: str) -> bool:
        """True if the session has been started."""
        with self._guard:
            return session_id in self._sessions

    def discard(self, session_id: str) -> None:
        """Drop a session and all of its variables, then notify on_discard."""
        with self._guard:
            variables = self._sessions.pop(session_id, None)
            self._locks.pop(session_id, None)
        if variables is not None and self._on_discard is not None:
            self._on_discard(session_id, variables)

    def store(self, session_id: str) -> "MemorySessionStore":
        """Get a SessionStore view of one session."""
        return MemorySessionStore(session_id, self)


class MemorySessionStore(SessionStore):
    """SessionStore backed by a SessionRegistry."""

    def __init__(self, session_id: str, registry: SessionRegistry):
        self._session_id = session_id
        self._registry = registry
        self._variables: Dict[str, Any] = {}

    @property
    def session_id(self) -> str:
        return self._session_id

    def start(self) -> None:
        self._variables = self._registry.create(self._session_id)

    def get_variable(self, key: str, default: Any = None) -> Any:
        return self._variables.get(key, default)

    def set_variable(self, key: str, value: Any) -> None:
        self._variables[key] = value

    def remove_variable(self, key: str) -> None:
        self._variables.pop(key, None)
