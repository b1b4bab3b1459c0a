"""File and directory mutations for webftp.

Create, read, overwrite, delete, rename, move and chmod of
remote paths.
"""

import logging
import posixpath
import uuid
from typing import Iterable, Union
from urllib.parse import unquote_plus

from webftp.ftp.client import FTPOperationClient
from webftp.ftp.exceptions import FTPAdapterError, FTPClientError
from webftp.ftp.normalizer import adapter_errors

logger = logging.getLogger("webftp.mutator")


class FileMutator:
    """Write operations on remote files and directories."""

    def __init__(self, client: FTPOperationClient):
        """
        Initialize the mutator.

        Args:
            client: Operation client of an open connection
        """
        self._client = client

    def create_file(self, path: str) -> bool:
        """Create an empty file. The path is form-decoded ("+" is a space) and its leading slash dropped."""
        with adapter_errors():
            return self._client.create_file(unquote_plus(path.lstrip("/")))

    def create_directory(self, path: str) -> bool:
        """
        Create a directory and any missing parents.

        The path is form-decoded ("+" is a space) and its leading slash
        dropped. Creating a directory that already exists is a no-op.

        Raises:
            FTPAdapterError: If a file is in the way or the server refuses
        """
        with adapter_errors():
            return self._client.create_dir(unquote_plus(path.lstrip("/")))

    def read_file(self, path: str) -> bytes:
        """
        Read a remote file.

        Raises:
            FTPAdapterError: If the file does not exist or is not readable
        """
        with adapter_errors():
            return self._client.get_file_content(path)

    def overwrite_file(self, path: str, content: Union[bytes, str]) -> bool:
        """
        Replace the content of a remote file.

        The new content is staged next to the file first, then the old
        file is removed and the staged copy renamed into place, so the
        content is never only in memory. A missing original is not an error.

        Args:
            path: Remote file path
            content: New content

        Returns:
            True on success

        Raises:
            FTPAdapterError: If the file could not be written
        """
        directory, name = posixpath.split(path)
        staged = posixpath.join(directory, f".{name}.{uuid.uuid4().hex[:8]}.tmp")

        try:
            self._client.create_file(staged, content)
        except FTPClientError as e:
            logger.warning(f"Staging {path} failed: {e}")
            raise FTPAdapterError(f"Unable to edit file [{path}].", e) from e

        try:
            self._client.remove_file(path)
        except FTPClientError as e:
            logger.debug(f"Nothing to remove before writing {path}: {e}")

        try:
            return self._client.rename(staged, path)
        except FTPClientError as e:
            logger.error(f"Could not move staged content to {path}, kept at {staged}: {e}")
            raise FTPAdapterError(f"Unable to edit file [{path}].", e) from e

    def remove(self, paths: Iterable[str]) -> bool:
        """
        Remove files and directories (recursively).

        Stops at the first failure; paths after it are not attempted.

        Args:
            paths: Remote paths to remove

        Returns:
            True if every path was removed

        Raises:
            FTPAdapterError: On the first path that cannot be removed
        """
        with adapter_errors():
            for path in paths:
                if self._client.is_dir(path):
                    self._client.remove_dir(path)
                else:
                    self._client.remove_file(path)
                logger.info(f"Removed {path}")
        return True

    def rename(self, path: str, new_name: str) -> bool:
        """Rename a file or directory. Both arguments are used as given."""
        with adapter_errors():
            return self._client.rename(path, new_name)

    def move(self, path: str, new_path: str) -> bool:
        """
        Move a file or directory.

        The leading slash of the source path is dropped; the
        destination is used as given.
        """
        with adapter_errors():
            return self._client.move(path.lstrip("/"), new_path)

    def set_permissions(self, path: str, permissions: Union[int, str]) -> bool:
        """Change permissions; the mode is passed to the server unvalidated."""
        with adapter_errors():
            return self._client.set_permissions(path, permissions)
