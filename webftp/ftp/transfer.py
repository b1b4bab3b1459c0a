"""File transfers for webftp.

Handles downloads to the browser and uploads from local files.
"""

import logging
import posixpath
from pathlib import Path
from typing import Union

from webftp.ftp.client import FTPOperationClient
from webftp.ftp.exceptions import FTPTransferError
from webftp.ftp.normalizer import adapter_errors
from webftp.web.response import HttpResponse

logger = logging.getLogger("webftp.transfer")


class TransferManager:
    """Downloads and uploads over an open connection."""

    def __init__(self, client: FTPOperationClient):
        """
        Initialize the transfer manager.

        Args:
            client: Operation client of an open connection
        """
        self._client = client

    def download(self, path: str) -> HttpResponse:
        """
        Fetch a remote file as an attachment response.

        The whole file is read before the response is built.

        Args:
            path: Remote file path

        Returns:
            HttpResponse with octet-stream content and the file's basename

        Raises:
            FTPTransferError: On any failure, with a generic message
        """
        try:
            content = self._client.get_file_content(path)
            response = (
                HttpResponse(content)
                .add_header("Content-Type", "application/octet-stream")
                .add_header("Content-Disposition", f"attachment; filename={posixpath.basename(path)}")
            )
        except Exception as e:
            logger.warning(f"Download of {path} failed: {e}")
            raise FTPTransferError(path, e) from e

        logger.info(f"Downloaded {path} ({len(content)} bytes)")
        return response

    def upload(self, local_path: Union[str, Path], remote_path: str, resume: bool = False) -> bool:
        """
        Upload a local file.

        Args:
            local_path: Local file to send
            remote_path: Destination on the server
            resume: Continue from the remote file's current size

        Returns:
            True on success

        Raises:
            FTPAdapterError: If the upload fails
        """
        with adapter_errors():
            return self._client.upload(local_path, remote_path, resume)
