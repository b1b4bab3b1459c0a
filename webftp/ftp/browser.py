"""Directory browsing for webftp.

Lists a single directory (directories first) or the whole
directory tree of the server.
"""

import logging
from typing import List

from webftp.ftp.client import FTPOperationClient
from webftp.ftp.listing import DirectoryEntry, EntryKind
from webftp.ftp.normalizer import adapter_errors

logger = logging.getLogger("webftp.browser")


class DirectoryBrowser:
    """Read-only directory listings."""

    def __init__(self, client: FTPOperationClient):
        """
        Initialize the browser.

        Args:
            client: Operation client of an open connection
        """
        self._client = client

    def browse(self, path: str) -> List[DirectoryEntry]:
        """
        List one directory.

        Directories come first, then every other entry, each group
        in the order the server returned them.

        Args:
            path: Remote directory; surrounding slashes are ignored

        Returns:
            Ordered list of DirectoryEntry, with paths relative to the
            login directory like the LIST that produced them

        Raises:
            FTPAdapterError: If the listing fails
        """
        directory = path.strip("/")
        with adapter_errors():
            entries = self._client.list_details(directory)

        dirs = [e for e in entries if e.kind == EntryKind.DIRECTORY]
        files = [e for e in entries if e.kind != EntryKind.DIRECTORY]
        logger.debug(f"Browsed /{directory}: {len(dirs)} directories, {len(files)} files")
        return dirs + files

    def get_directory_tree(self) -> List[DirectoryEntry]:
        """
        List every directory on the server, recursively from the root.

        Returns:
            Directory entries only; nesting is implied by each entry's path

        Raises:
            FTPAdapterError: If any listing fails
        """
        with adapter_errors():
            return self._client.list_details("/", recursive=True, kind=EntryKind.DIRECTORY)
