"""Application wiring for webftp.

FileManagerApp is the entry point for the web layer: it owns the
settings, session registry and credential store, and gives each
request a connected FTPAdapter for its session.
"""

from contextlib import contextmanager, nullcontext
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

from webftp.config.credentials import CredentialManager
from webftp.config.paths import get_log_file_path
from webftp.config.settings import ServerSettings, SettingsManager
from webftp.ftp.adapter import FTPAdapter
from webftp.ftp.connection import FTPConnectionConfig
from webftp.session.binding import ADAPTER_KEY, AdapterSessionBinder, LiveAdapters, drop_session
from webftp.session.store import SessionRegistry
from webftp.utils.logging import setup_logging
from webftp.web.error_handler import ErrorHandler, ReportCallback


class FileManagerApp:
    """
    Main application object.

    Coordinates settings, sessions and adapters; one instance serves
    every request of the process.
    """

    def __init__(
        self,
        settings: Optional[ServerSettings] = None,
        credentials: Optional[CredentialManager] = None,
        report: Optional[ReportCallback] = None,
        log_file: Optional[Path] = None
    ):
        """
        Initialize the application.

        Args:
            settings: Server settings (loaded from disk if omitted)
            credentials: Password storage (system keyring by default)
            report: Callback for uncaught errors (logs only if omitted)
            log_file: Log file path (from settings, else the platform default)
        """
        self._settings = settings or SettingsManager().load()
        if log_file is None:
            log_file = Path(self._settings.log_file) if self._settings.log_file else get_log_file_path()
        self._logger = setup_logging(level=self._settings.log_level, log_file=log_file)

        self._credentials = credentials or CredentialManager()
        self._registry = SessionRegistry(on_discard=self._session_discarded)
        self._live = LiveAdapters()
        self._error_handler = ErrorHandler(report or (lambda error: None))

        self._logger.info("Application initialized")

    @property
    def settings(self) -> ServerSettings:
        """Active server settings."""
        return self._settings

    @property
    def registry(self) -> SessionRegistry:
        """Session registry."""
        return self._registry

    @property
    def error_handler(self) -> ErrorHandler:
        """Process-wide error handler."""
        return self._error_handler

    def _binder(self, session_id: str) -> AdapterSessionBinder:
        return AdapterSessionBinder(
            self._registry.store(session_id),
            credentials=self._credentials,
            live=self._live,
        )

    def connect(self, session_id: str, params: Mapping[str, Any]) -> FTPAdapter:
        """
        Open a connection for a session from request parameters.

        Raises:
            ValueError: If a parameter is invalid
            FTPConnectionError: If connection fails
        """
        config = FTPConnectionConfig.from_params(params, self._settings)
        with self._registry.lock_for(session_id):
            return self._binder(session_id).bind(config)

    @contextmanager
    def session(self, session_id: str) -> Iterator[FTPAdapter]:
        """
        Run one request against the session's adapter.

        Holds the session lock for the duration of the block.

        Raises:
            FTPNotConnectedError: If the session never connected
        """
        with self._registry.lock_for(session_id):
            yield self._binder(session_id).restore()

    def disconnect(self, session_id: str) -> None:
        """Close a session's connection and drop the session."""
        with self._registry.lock_for(session_id):
            self._binder(session_id).release()
        self._registry.discard(session_id)

    def _session_discarded(self, session_id: str, variables: Dict[str, Any]) -> None:
        drop_session(session_id, variables.get(ADAPTER_KEY), self._live, self._credentials)

    def expire_idle(self, max_idle: Optional[float] = None) -> List[str]:
        """
        Close connections that have not been used for a while.

        Expired sessions keep their state, so their next request
        reconnects with the stored password.

        Args:
            max_idle: Seconds without an operation (settings.idle_timeout if omitted)

        Returns:
            Ids of the sessions whose connection was closed
        """
        limit = timedelta(seconds=self._settings.idle_timeout if max_idle is None else max_idle)
        expired = []
        for session_id in self._live.idle_sessions(limit):
            # A session dropped without disconnect has no lock left to wait on
            lock = self._registry.lock_for(session_id) if self._registry.exists(session_id) else nullcontext()
            with lock:
                # A request may have used the adapter while we waited
                if session_id not in self._live.idle_sessions(limit):
                    continue
                adapter = self._live.pop(session_id)
                if adapter is not None:
                    adapter.close()
                    expired.append(session_id)
        if expired:
            self._logger.info(f"Closed {len(expired)} idle connection(s)")
        return expired
