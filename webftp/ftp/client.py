"""FTP operation client for webftp.

Implements the filesystem operation set (listing, create, remove,
rename, move, chmod, read, upload) on top of an open ftplib handle.
Every ftplib failure is re-raised as a tagged FTPClientError.
"""

import io
import logging
import posixpath
from ftplib import FTP, all_errors, error_perm
from pathlib import Path
from typing import Callable, List, Optional, Union

from webftp.ftp.exceptions import (
    FTPClientError,
    FTPCommandError,
    FTPTransferFailedError,
)
from webftp.ftp.listing import DirectoryEntry, EntryKind, parse_list_line

logger = logging.getLogger("webftp.client")


class FTPOperationClient:
    """Filesystem operations over a single FTP control connection."""

    # Block size for FTP transfers (8KB)
    BLOCK_SIZE = 8192

    def __init__(self, ftp: FTP, auto_seek: bool = True):
        """
        Initialize the client.

        Args:
            ftp: Open and logged-in FTP handle
            auto_seek: Position local files at the resume offset on resumed uploads
        """
        self._ftp = ftp
        self.auto_seek = auto_seek

    @property
    def ftp(self) -> FTP:
        """Underlying ftplib handle."""
        return self._ftp

    def _command(self, action: Callable, description: str):
        """Run an ftplib call, wrapping failures into FTPCommandError."""
        try:
            return action()
        except FTPClientError:
            raise
        except all_errors as e:
            raise FTPCommandError(f"{description}: {e}", e)

    def noop(self) -> None:
        """Send NOOP to verify the control connection is alive."""
        self._command(lambda: self._ftp.voidcmd("NOOP"), "NOOP failed")

    def _retr_list(self, command: str, path: str) -> List[str]:
        lines: List[str] = []
        try:
            self._ftp.retrlines(command, lines.append)
        except error_perm as e:
            raise FTPCommandError(f"Unable to list directory [{path or '/'}]: {e}", e)
        except all_errors as e:
            raise FTPTransferFailedError(f"Listing of [{path or '/'}] was interrupted: {e}", e)
        return lines

    def _raw_list(self, path: str, show_hidden: bool = False) -> List[str]:
        if show_hidden:
            try:
                return self._retr_list(f"LIST -a {path}".rstrip(), path)
            except FTPCommandError as e:
                # No ls options on this server; plain LIST is all it has
                logger.debug(f"LIST -a refused, listing [{path or '/'}] without it: {e}")
        return self._retr_list(f"LIST {path}".rstrip(), path)

    def list_details(
        self,
        path: str,
        recursive: bool = False,
        kind: Optional[EntryKind] = None,
        show_hidden: bool = False
    ) -> List[DirectoryEntry]:
        """
        List a directory with parsed details.

        Args:
            path: Remote directory ("" lists the working directory)
            recursive: Descend into subdirectories
            kind: Only return entries of this kind
            show_hidden: Ask for dotfiles with "LIST -a"

        Returns:
            Entries in server order; with recursive=True each directory is
            followed by its own descendants

        Raises:
            FTPClientError: If any listing fails
        """
        entries: List[DirectoryEntry] = []
        for line in self._raw_list(path, show_hidden):
            entry = parse_list_line(line, path)
            if entry is None:
                continue
            if kind is None or entry.kind == kind:
                entries.append(entry)
            if recursive and entry.is_dir:
                entries.extend(self.list_details(entry.path, recursive=True, kind=kind, show_hidden=show_hidden))
        return entries

    def is_dir(self, path: str) -> bool:
        """
        Check whether a remote path is a directory.

        Changes into the path and back, leaving the working directory untouched.
        """
        original = self._command(self._ftp.pwd, "Unable to get working directory")
        try:
            self._ftp.cwd(path)
        except error_perm:
            return False
        except all_errors as e:
            raise FTPCommandError(f"Unable to inspect [{path}]: {e}", e)
        self._command(lambda: self._ftp.cwd(original), "Unable to restore working directory")
        return True

    def size(self, path: str) -> int:
        """
        Get the size of a remote file in bytes.

        Raises:
            FTPCommandError: If the file does not exist
        """
        def action():
            # SIZE is refused in ASCII mode by most servers
            self._ftp.voidcmd("TYPE I")
            return self._ftp.size(path)

        result = self._command(action, f"Unable to get size of [{path}]")
        return int(result) if result is not None else 0

    def create_file(self, path: str, content: Union[bytes, str] = b"") -> bool:
        """
        Create (or replace) a remote file with the given content.

        Returns:
            True on success
        """
        if isinstance(content, str):
            content = content.encode("utf-8")
        try:
            self._ftp.storbinary(f"STOR {path}", io.BytesIO(content), blocksize=self.BLOCK_SIZE)
        except error_perm as e:
            raise FTPCommandError(f"Unable to create file [{path}]: {e}", e)
        except all_errors as e:
            raise FTPTransferFailedError(f"Upload of [{path}] was interrupted: {e}", e)
        return True

    def create_dir(self, path: str) -> bool:
        """
        Create a remote directory, including any missing parents.

        An existing directory is left as is.

        Returns:
            True on success
        """
        if self.is_dir(path):
            return True

        current = "/" if path.startswith("/") else ""
        for segment in [s for s in path.split("/") if s]:
            current = posixpath.join(current, segment)
            if self.is_dir(current):
                continue
            self._command(lambda: self._ftp.mkd(current), f"Unable to create directory [{current}]")
            logger.debug(f"Created directory: {current}")
        return True

    def get_file_content(self, path: str) -> bytes:
        """
        Read a remote file into memory.

        Raises:
            FTPClientError: If the file does not exist or cannot be read
        """
        buffer = io.BytesIO()
        try:
            self._ftp.retrbinary(f"RETR {path}", buffer.write, blocksize=self.BLOCK_SIZE)
        except error_perm as e:
            raise FTPCommandError(f"Unable to read file [{path}]: {e}", e)
        except all_errors as e:
            raise FTPTransferFailedError(f"Download of [{path}] was interrupted: {e}", e)
        return buffer.getvalue()

    def remove_file(self, path: str) -> bool:
        """Delete a remote file."""
        self._command(lambda: self._ftp.delete(path), f"Unable to remove file [{path}]")
        return True

    def remove_dir(self, path: str) -> bool:
        """Delete a remote directory and everything below it."""
        for entry in self.list_details(path, show_hidden=True):
            if entry.is_dir:
                self.remove_dir(entry.path)
            else:
                self.remove_file(entry.path)
        self._command(lambda: self._ftp.rmd(path), f"Unable to remove directory [{path}]")
        logger.debug(f"Removed directory: {path}")
        return True

    def rename(self, old_path: str, new_path: str) -> bool:
        """Rename a remote file or directory."""
        self._command(
            lambda: self._ftp.rename(old_path, new_path),
            f"Unable to rename [{old_path}] to [{new_path}]"
        )
        return True

    def move(self, source: str, destination: str) -> bool:
        """
        Move a remote file or directory.

        If destination is an existing directory the source keeps its
        name inside it, otherwise destination is the new full path.
        """
        if self.is_dir(destination):
            destination = posixpath.join(destination, posixpath.basename(source.rstrip("/")))
        return self.rename(source, destination)

    def set_permissions(self, path: str, permissions: Union[int, str]) -> bool:
        """
        Change permissions with SITE CHMOD.

        Args:
            path: Remote path
            permissions: Mode as an int (sent in octal) or a string sent as is
        """
        mode = f"{permissions:o}" if isinstance(permissions, int) else str(permissions)
        self._command(
            lambda: self._ftp.voidcmd(f"SITE CHMOD {mode} {path}"),
            f"Unable to set permissions of [{path}]"
        )
        return True

    def upload(self, local_path: Union[str, Path], remote_path: str, resume: bool = False) -> bool:
        """
        Upload a local file.

        Args:
            local_path: Local file to send
            remote_path: Destination on the server
            resume: Continue from the remote file's current size instead of
                overwriting from the start

        Returns:
            True on success
        """
        offset = 0
        if resume:
            try:
                offset = self.size(remote_path)
            except FTPCommandError:
                # Nothing uploaded yet
                offset = 0

        try:
            with open(local_path, "rb") as f:
                if offset and self.auto_seek:
                    f.seek(offset)
                self._ftp.storbinary(
                    f"STOR {remote_path}",
                    f,
                    blocksize=self.BLOCK_SIZE,
                    rest=offset or None
                )
        except error_perm as e:
            raise FTPCommandError(f"Unable to upload [{local_path}] to [{remote_path}]: {e}", e)
        except all_errors as e:
            raise FTPTransferFailedError(f"Unable to upload [{local_path}] to [{remote_path}]: {e}", e)

        logger.info(f"Uploaded {local_path} to {remote_path} (offset {offset})")
        return True
