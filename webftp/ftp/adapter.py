"""Session-bound FTP adapter for webftp.

Provides FTPAdapter, which owns one FTP connection and exposes the
file manager operations (browse, tree, mutate, transfer) on it.
"""

import logging
from datetime import datetime
from ftplib import FTP
from pathlib import Path
from typing import Iterable, List, Optional, Union

from webftp.ftp.browser import DirectoryBrowser
from webftp.ftp.client import FTPOperationClient
from webftp.ftp.connection import (
    ConnectionState,
    FTPConnectionConfig,
    OpenOutcome,
    TransferSettings,
    close_connection,
    open_connection,
)
from webftp.ftp.exceptions import FTPClientError, FTPConnectionError, FTPNotConnectedError
from webftp.ftp.listing import DirectoryEntry
from webftp.ftp.mutator import FileMutator
from webftp.ftp.transfer import TransferManager
from webftp.web.response import HttpResponse

logger = logging.getLogger("webftp.adapter")


class FTPAdapter:
    """
    Owns one FTP connection and runs file manager operations on it.

    Operations are synchronous and must not run concurrently on the
    same adapter; the session layer serializes requests per session.
    """

    def __init__(self):
        """Initialize a disconnected adapter."""
        self._ftp: Optional[FTP] = None
        self._config: Optional[FTPConnectionConfig] = None
        self._settings: Optional[TransferSettings] = None
        self._client: Optional[FTPOperationClient] = None
        self._browser: Optional[DirectoryBrowser] = None
        self._mutator: Optional[FileMutator] = None
        self._transfer: Optional[TransferManager] = None
        self._state = ConnectionState.DISCONNECTED
        self._transport: Optional[OpenOutcome] = None
        self._connected_at: Optional[datetime] = None
        self._last_activity: Optional[datetime] = None

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """True if currently connected."""
        return self._state == ConnectionState.CONNECTED

    @property
    def config(self) -> Optional[FTPConnectionConfig]:
        """Configuration of the last open()."""
        return self._config

    @property
    def transfer_settings(self) -> Optional[TransferSettings]:
        """Transfer-mode settings of the open connection."""
        return self._settings

    @property
    def transport(self) -> Optional[OpenOutcome]:
        """Whether the connection is encrypted or plain."""
        return self._transport

    @property
    def connected_at(self) -> Optional[datetime]:
        """Timestamp when connection was established."""
        return self._connected_at

    @property
    def last_activity(self) -> Optional[datetime]:
        """Timestamp of last operation."""
        return self._last_activity

    @property
    def client(self) -> FTPOperationClient:
        """
        Get the operation client.

        Raises:
            FTPNotConnectedError: If not connected
        """
        self._require_connection("FTP access")
        return self._client

    def _require_connection(self, operation: str) -> None:
        if not self.is_connected or self._client is None:
            raise FTPNotConnectedError(operation)
        self._last_activity = datetime.now()

    def open(self, config: FTPConnectionConfig) -> None:
        """
        Open the connection described by config.

        Any previous connection of this adapter is closed first.

        Raises:
            FTPConnectionError: If connection fails (after the TLS fallback)
        """
        self.close()
        self._config = config
        self._state = ConnectionState.CONNECTING

        try:
            ftp, settings, outcome = open_connection(config)
        except FTPConnectionError:
            self._state = ConnectionState.ERROR
            raise

        self._ftp = ftp
        self._settings = settings
        self._transport = outcome
        self._client = FTPOperationClient(ftp, auto_seek=settings.auto_seek)
        self._browser = DirectoryBrowser(self._client)
        self._mutator = FileMutator(self._client)
        self._transfer = TransferManager(self._client)
        self._state = ConnectionState.CONNECTED
        self._connected_at = datetime.now()
        self._last_activity = self._connected_at

    def close(self) -> None:
        """Close the connection gracefully."""
        close_connection(self._ftp)
        self._ftp = None
        self._client = None
        self._browser = None
        self._mutator = None
        self._transfer = None
        self._state = ConnectionState.DISCONNECTED
        self._connected_at = None

    def is_alive(self) -> bool:
        """True if connected and the server still answers NOOP."""
        if not self.is_connected or self._client is None:
            return False
        try:
            self._client.noop()
        except FTPClientError as e:
            logger.info(f"Connection lost: {e}")
            return False
        return True

    def ensure_open(self) -> None:
        """
        Reuse the held connection, or reconnect with the held config.

        Raises:
            FTPNotConnectedError: If the adapter was never opened
            FTPConnectionError: If reconnecting fails
        """
        if self.is_alive():
            return
        if self._config is None:
            raise FTPNotConnectedError("Reconnect")
        logger.info(f"Reconnecting to {self._config.host}:{self._config.port}")
        self.open(self._config)

    def to_state(self) -> dict:
        """
        Serializable adapter state for the session store (no password).

        Raises:
            FTPNotConnectedError: If the adapter was never opened
        """
        if self._config is None:
            raise FTPNotConnectedError("Session storage")
        return {
            "config": self._config.to_state(),
            "transport": self._transport.value if self._transport else None,
        }

    # Directory browser

    def browse(self, path: str) -> List[DirectoryEntry]:
        """List one directory, directories first."""
        self._require_connection("Browse")
        return self._browser.browse(path)

    def get_directory_tree(self) -> List[DirectoryEntry]:
        """List every directory on the server."""
        self._require_connection("Directory tree")
        return self._browser.get_directory_tree()

    # File/directory mutator

    def create_file(self, path: str) -> bool:
        """Create an empty file."""
        self._require_connection("Create file")
        return self._mutator.create_file(path)

    def create_directory(self, path: str) -> bool:
        """Create a directory (no-op if it exists)."""
        self._require_connection("Create directory")
        return self._mutator.create_directory(path)

    def read_file(self, path: str) -> bytes:
        """Read a remote file."""
        self._require_connection("Read")
        return self._mutator.read_file(path)

    def overwrite_file(self, path: str, content: Union[bytes, str]) -> bool:
        """Replace the content of a remote file."""
        self._require_connection("Edit")
        return self._mutator.overwrite_file(path, content)

    def remove(self, paths: Iterable[str]) -> bool:
        """Remove files and directories, stopping at the first failure."""
        self._require_connection("Remove")
        return self._mutator.remove(paths)

    def rename(self, path: str, new_name: str) -> bool:
        """Rename a file or directory."""
        self._require_connection("Rename")
        return self._mutator.rename(path, new_name)

    def move(self, path: str, new_path: str) -> bool:
        """Move a file or directory."""
        self._require_connection("Move")
        return self._mutator.move(path, new_path)

    def set_permissions(self, path: str, permissions: Union[int, str]) -> bool:
        """Change permissions of a file or directory."""
        self._require_connection("Permission change")
        return self._mutator.set_permissions(path, permissions)

    # Transfer manager

    def download(self, path: str) -> HttpResponse:
        """Fetch a remote file as an attachment response."""
        self._require_connection("Download")
        return self._transfer.download(path)

    def upload(self, local_path: Union[str, Path], remote_path: str, resume: bool = False) -> bool:
        """Upload a local file, optionally resuming."""
        self._require_connection("Upload")
        return self._transfer.upload(local_path, remote_path, resume)
