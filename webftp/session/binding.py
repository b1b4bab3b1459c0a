"""Binding of FTP adapters to user sessions for webftp.

The first request of a session opens an adapter and stores its state
(without the password) in the session. Later requests restore it:
the live connection held for the session is reused while it still
answers, otherwise a new one is opened from the stored state and the
password kept in the keyring.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from webftp.config.credentials import CredentialManager
from webftp.ftp.adapter import FTPAdapter
from webftp.ftp.connection import FTPConnectionConfig
from webftp.ftp.exceptions import FTPNotConnectedError
from webftp.session.store import SessionStore

logger = logging.getLogger("webftp.session")

# Session variable holding the adapter state
ADAPTER_KEY = "ftp_adapter"


class LiveAdapters:
    """Open adapters held in this process, keyed by session id."""

    def __init__(self):
        self._adapters: Dict[str, FTPAdapter] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._adapters)

    def get(self, session_id: str) -> Optional[FTPAdapter]:
        with self._lock:
            return self._adapters.get(session_id)

    def put(self, session_id: str, adapter: FTPAdapter) -> None:
        with self._lock:
            self._adapters[session_id] = adapter

    def pop(self, session_id: str) -> Optional[FTPAdapter]:
        with self._lock:
            return self._adapters.pop(session_id, None)

    def idle_sessions(self, max_idle: timedelta, now: Optional[datetime] = None) -> List[str]:
        """
        Sessions whose adapter has not run an operation for max_idle.

        Adapters that never recorded any activity count as idle.
        """
        cutoff = (now or datetime.now()) - max_idle
        with self._lock:
            return [
                session_id for session_id, adapter in self._adapters.items()
                if adapter.last_activity is None or adapter.last_activity < cutoff
            ]


def drop_session(
    session_id: str,
    state: Optional[dict],
    live: LiveAdapters,
    credentials: CredentialManager
) -> None:
    """
    Close a session's live connection and delete its stored password.

    Args:
        session_id: Session being dropped
        state: Adapter state stored in the session, if any
        live: Process-wide table of open adapters
        credentials: Password storage
    """
    adapter = live.pop(session_id)
    if adapter is not None:
        adapter.close()

    if state is not None:
        config_state = state["config"]
        credentials.delete_password(
            config_state["host"], config_state["port"], config_state["username"], session_id=session_id
        )


class AdapterSessionBinder:
    """Stores and restores the FTP adapter of one session."""

    def __init__(
        self,
        store: SessionStore,
        credentials: Optional[CredentialManager] = None,
        live: Optional[LiveAdapters] = None,
        adapter_factory: Callable[[], FTPAdapter] = FTPAdapter
    ):
        """
        Initialize the binder.

        Args:
            store: Session store of the current request
            credentials: Password storage (system keyring by default)
            live: Process-wide table of open adapters
            adapter_factory: Creates new adapters
        """
        self._store = store
        self._credentials = credentials or CredentialManager()
        self._live = live if live is not None else LiveAdapters()
        self._adapter_factory = adapter_factory

    def bind(self, config: FTPConnectionConfig) -> FTPAdapter:
        """
        Open an adapter for the session (first request).

        Args:
            config: Connection configuration supplied by the user

        Returns:
            Connected FTPAdapter

        Raises:
            FTPConnectionError: If connection fails
        """
        self._store.start()

        previous = self._live.pop(self._store.session_id)
        if previous is not None:
            previous.close()

        adapter = self._adapter_factory()
        adapter.open(config)

        if not self._credentials.save_password(
            config.host, config.port, config.username, config.password, session_id=self._store.session_id
        ):
            logger.warning(f"Could not store password for {config.username}@{config.host}")

        self._store.set_variable(ADAPTER_KEY, adapter.to_state())
        self._live.put(self._store.session_id, adapter)
        logger.info(f"Session {self._store.session_id} bound to {config.host}:{config.port}")
        return adapter

    def restore(self) -> FTPAdapter:
        """
        Get a connected adapter for the session (later requests).

        Returns:
            Connected FTPAdapter

        Raises:
            FTPNotConnectedError: If the session has no adapter or no stored password
            FTPConnectionError: If reconnecting fails
        """
        self._store.start()
        state = self._store.get_variable(ADAPTER_KEY)
        if state is None:
            raise FTPNotConnectedError("Restoring the session")

        adapter = self._live.get(self._store.session_id)
        if adapter is not None and adapter.config is not None \
                and adapter.config.to_state() == state["config"]:
            adapter.ensure_open()
            return adapter

        config_state = state["config"]
        password = self._credentials.get_password(
            config_state["host"], config_state["port"], config_state["username"],
            session_id=self._store.session_id,
        )
        if password is None:
            raise FTPNotConnectedError("Restoring the session")

        adapter = self._adapter_factory()
        adapter.open(FTPConnectionConfig.from_state(config_state, password))
        self._live.put(self._store.session_id, adapter)
        logger.info(f"Session {self._store.session_id} reconnected to {config_state['host']}")
        return adapter

    def release(self) -> None:
        """Close the session's connection and forget its state."""
        self._store.start()
        drop_session(
            self._store.session_id, self._store.get_variable(ADAPTER_KEY), self._live, self._credentials
        )
        self._store.remove_variable(ADAPTER_KEY)
