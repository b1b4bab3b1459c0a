"""Pytest configuration and shared fixtures for webftp tests."""

from typing import Callable, Dict, List
from unittest.mock import MagicMock

import pytest

from webftp.ftp.client import FTPOperationClient
from webftp.ftp.connection import FTPConnectionConfig
from webftp.ftp.listing import DirectoryEntry, EntryKind


# Test constants
TEST_FTP_HOST = "127.0.0.1"
TEST_FTP_PORT = 2121
TEST_FTP_USER = "testuser"
TEST_FTP_PASS = "testpass"


def make_entry(name: str, kind: EntryKind = EntryKind.FILE, directory: str = "") -> DirectoryEntry:
    """Build a DirectoryEntry with plausible server fields."""
    return DirectoryEntry(
        name=name,
        kind=kind,
        size=4096 if kind == EntryKind.DIRECTORY else 120,
        day="19",
        month="Oct",
        time="05:12",
        permissions="drwxr-xr-x" if kind == EntryKind.DIRECTORY else "-rw-r--r--",
        path=f"/{directory}/{name}".replace("//", "/"),
        owner="ftp",
        group="ftp",
    )


def dir_line(name: str) -> str:
    """Unix LIST line for a directory."""
    return f"drwxr-xr-x   2 ftp      ftp          4096 Oct 19 05:12 {name}"


def file_line(name: str, size: int = 120) -> str:
    """Unix LIST line for a file."""
    return f"-rw-r--r--   1 ftp      ftp      {size:>8} Oct 19 05:12 {name}"


def fake_retrlines(listings: Dict[str, List[str]]) -> Callable:
    """
    Side effect for ftp.retrlines serving LIST output by command.

    Unknown directories answer like a server would: 550.
    """
    from ftplib import error_perm

    def retrlines(cmd, callback=None):
        if cmd not in listings:
            raise error_perm(f"550 No such file or directory: {cmd}")
        for line in listings[cmd]:
            callback(line)
        return "226 Transfer complete."

    return retrlines


@pytest.fixture
def ftp_config() -> FTPConnectionConfig:
    """Provide a connection configuration for tests."""
    return FTPConnectionConfig(
        host=TEST_FTP_HOST,
        port=TEST_FTP_PORT,
        username=TEST_FTP_USER,
        password=TEST_FTP_PASS,
        timeout=30,
    )


@pytest.fixture
def mock_ftp() -> MagicMock:
    """Provide a mocked ftplib handle rooted at /."""
    ftp = MagicMock()
    ftp.pwd.return_value = "/"
    return ftp


@pytest.fixture
def client(mock_ftp) -> FTPOperationClient:
    """Provide an operation client over the mocked handle."""
    return FTPOperationClient(mock_ftp)
