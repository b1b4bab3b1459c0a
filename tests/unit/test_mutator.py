"""Unit tests for FileMutator."""

import re
from ftplib import error_perm
from unittest.mock import Mock

import pytest

from webftp.ftp.client import FTPOperationClient
from webftp.ftp.exceptions import FTPAdapterError, FTPCommandError
from webftp.ftp.mutator import FileMutator


@pytest.fixture
def mock_client():
    """Create mock operation client."""
    return Mock(spec=FTPOperationClient)


@pytest.fixture
def mutator(mock_client):
    """Create a mutator over the mock client."""
    return FileMutator(mock_client)


class TestCreate:
    """Tests for create_file and create_directory."""

    def test_create_file_decodes_and_strips(self, mutator, mock_client):
        """Test the path is URL-decoded and loses its leading slash."""
        mock_client.create_file.return_value = True

        assert mutator.create_file("/docs/new%20file.txt") is True
        mock_client.create_file.assert_called_once_with("docs/new file.txt")

    def test_create_directory_decodes_and_strips(self, mutator, mock_client):
        """Test the directory path is URL-decoded and loses its leading slash."""
        mock_client.create_dir.return_value = True

        assert mutator.create_directory("/new%20dir") is True
        mock_client.create_dir.assert_called_once_with("new dir")

    def test_plus_decodes_to_space(self, mutator, mock_client):
        """Test form-encoded "+" becomes a space while "%2B" stays a plus."""
        mock_client.create_file.return_value = True
        mock_client.create_dir.return_value = True

        mutator.create_file("/my+report.txt")
        mutator.create_directory("/c%2B%2B+notes")

        mock_client.create_file.assert_called_once_with("my report.txt")
        mock_client.create_dir.assert_called_once_with("c++ notes")

    def test_create_file_error(self, mutator, mock_client):
        """Test refused creation raises FTPAdapterError."""
        mock_client.create_file.side_effect = FTPCommandError("Unable to create file [a]: 553 Denied")

        with pytest.raises(FTPAdapterError, match="553 Denied"):
            mutator.create_file("a")


class TestCreateDirectoryTwice:
    """Creating the same directory twice against a stateful fake server."""

    @pytest.fixture
    def server_ftp(self, mock_ftp):
        """Mock handle that remembers created directories and files."""
        dirs = {"/"}
        files = {"report.txt"}

        def cwd(path):
            if path not in dirs:
                raise error_perm("550 Not a directory")

        def mkd(path):
            if path in dirs or path in files:
                raise error_perm("550 File exists")
            dirs.add(path)
            return path

        mock_ftp.cwd.side_effect = cwd
        mock_ftp.mkd.side_effect = mkd
        return mock_ftp

    def test_second_call_is_noop(self, server_ftp):
        """Test the second create of the same directory succeeds without MKD."""
        mutator = FileMutator(FTPOperationClient(server_ftp))

        assert mutator.create_directory("/uploads") is True
        assert mutator.create_directory("/uploads") is True

        server_ftp.mkd.assert_called_once_with("uploads")

    def test_file_in_the_way_fails(self, server_ftp):
        """Test creating a directory over an existing file fails consistently."""
        mutator = FileMutator(FTPOperationClient(server_ftp))

        for _ in range(2):
            with pytest.raises(FTPAdapterError, match="Unable to create directory"):
                mutator.create_directory("/report.txt")


class TestReadFile:
    """Tests for read_file."""

    def test_read(self, mutator, mock_client):
        """Test content is returned as bytes."""
        mock_client.get_file_content.return_value = b"data"
        assert mutator.read_file("/a.txt") == b"data"
        mock_client.get_file_content.assert_called_once_with("/a.txt")

    def test_missing(self, mutator, mock_client):
        """Test a missing file raises FTPAdapterError."""
        mock_client.get_file_content.side_effect = FTPCommandError("Unable to read file [/a.txt]: 550")

        with pytest.raises(FTPAdapterError):
            mutator.read_file("/a.txt")


class TestOverwriteFile:
    """Tests for overwrite_file."""

    STAGED = re.compile(r"^docs/\.a\.txt\.[0-9a-f]{8}\.tmp$")

    def test_stage_remove_rename(self, mutator, mock_client):
        """Test content is staged, the old file removed, then the staged file renamed."""
        mock_client.rename.return_value = True

        assert mutator.overwrite_file("docs/a.txt", b"new") is True

        names = [c[0] for c in mock_client.method_calls]
        assert names == ["create_file", "remove_file", "rename"]
        staged, content = mock_client.create_file.call_args[0]
        assert self.STAGED.match(staged)
        assert content == b"new"
        mock_client.remove_file.assert_called_once_with("docs/a.txt")
        mock_client.rename.assert_called_once_with(staged, "docs/a.txt")

    def test_missing_original_still_written(self, mutator, mock_client):
        """Test a failed delete of a missing file does not abort the write."""
        mock_client.remove_file.side_effect = FTPCommandError("Unable to remove file [docs/a.txt]: 550")
        mock_client.rename.return_value = True

        assert mutator.overwrite_file("docs/a.txt", b"new") is True
        mock_client.rename.assert_called_once()

    def test_staging_failure(self, mutator, mock_client):
        """Test a failed upload leaves the original untouched."""
        mock_client.create_file.side_effect = FTPCommandError("553 Quota exceeded")

        with pytest.raises(FTPAdapterError) as exc_info:
            mutator.overwrite_file("docs/a.txt", b"new")

        assert str(exc_info.value) == "Unable to edit file [docs/a.txt]."
        mock_client.remove_file.assert_not_called()

    def test_rename_failure(self, mutator, mock_client):
        """Test a failed rename raises FTPAdapterError."""
        mock_client.rename.side_effect = FTPCommandError("550 Rename failed")

        with pytest.raises(FTPAdapterError, match=r"Unable to edit file \[docs/a.txt\]\."):
            mutator.overwrite_file("docs/a.txt", b"new")


class TestRemove:
    """Tests for remove."""

    def test_removes_directories_and_files(self, mutator, mock_client):
        """Test directories are removed recursively and files directly."""
        mock_client.is_dir.side_effect = lambda path: path == "/a"

        assert mutator.remove(["/a", "/b.txt"]) is True

        mock_client.remove_dir.assert_called_once_with("/a")
        mock_client.remove_file.assert_called_once_with("/b.txt")

    def test_aborts_on_first_failure(self, mutator, mock_client):
        """Test later paths are not attempted once one fails."""
        mock_client.is_dir.side_effect = lambda path: path == "/a"
        mock_client.remove_dir.side_effect = FTPCommandError("Unable to remove directory [/a]: 550")

        with pytest.raises(FTPAdapterError, match=r"Unable to remove directory \[/a\]"):
            mutator.remove(["/a", "/b.txt"])

        mock_client.remove_file.assert_not_called()
        mock_client.is_dir.assert_called_once_with("/a")

    def test_empty_list(self, mutator, mock_client):
        """Test removing nothing succeeds."""
        assert mutator.remove([]) is True


class TestRenameMove:
    """Tests for rename, move and set_permissions."""

    def test_rename_keeps_slashes(self, mutator, mock_client):
        """Test rename never strips slashes."""
        mutator.rename("/a/b.txt", "/a/c.txt")
        mock_client.rename.assert_called_once_with("/a/b.txt", "/a/c.txt")

    def test_move_strips_source_slash_only(self, mutator, mock_client):
        """Test move drops the leading slash of the source only."""
        mutator.move("/a/b.txt", "/c/b.txt")
        mock_client.move.assert_called_once_with("a/b.txt", "/c/b.txt")

    def test_rename_collision(self, mutator, mock_client):
        """Test a name collision raises FTPAdapterError."""
        mock_client.rename.side_effect = FTPCommandError("Unable to rename [a] to [b]: 550 File exists")

        with pytest.raises(FTPAdapterError, match="File exists"):
            mutator.rename("a", "b")

    def test_set_permissions_passthrough(self, mutator, mock_client):
        """Test permissions are passed through unvalidated."""
        mutator.set_permissions("/a.txt", "u+x")
        mock_client.set_permissions.assert_called_once_with("/a.txt", "u+x")
