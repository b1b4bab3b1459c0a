"""Unit tests for error message normalization."""

import pytest

from webftp.ftp.exceptions import (
    FTPAdapterError,
    FTPCommandError,
    FTPTransferFailedError,
)
from webftp.ftp.normalizer import (
    adapter_errors,
    normalize_exception_message,
    normalize_message,
)


class TestNormalizeMessage:
    """Tests for normalize_message."""

    def test_strips_bracketed_tag(self):
        """Test the library tag and separator are removed."""
        raw = "[ConnectionException] - Failed to connect to remote server."
        assert normalize_message(raw) == "Failed to connect to remote server."

    def test_strips_word_tag(self):
        """Test a plain word tag is removed as well."""
        assert normalize_message("FtpClientException - Unable to list.") == "Unable to list."

    def test_untagged_message_unchanged(self):
        """Test messages without a tag pass through."""
        assert normalize_message("Disk full") == "Disk full"

    def test_hyphen_without_spaces_kept(self):
        """Test hyphenated words are not mistaken for tags."""
        assert normalize_message("read-only file system") == "read-only file system"

    def test_empty_message(self):
        """Test empty input."""
        assert normalize_message("") == ""


class TestNormalizeExceptionMessage:
    """Tests for normalize_exception_message."""

    @pytest.mark.parametrize("raw", [
        "[ConnectionException] - Failed to connect to remote server.",
        "Disk full",
    ])
    def test_matches_string_variant(self, raw):
        """Test both variants produce identical output."""
        assert normalize_exception_message(Exception(raw)) == normalize_message(raw)

    def test_client_error_tag_removed(self):
        """Test tagged client errors lose their tag."""
        error = FTPCommandError("Unable to remove file [a.txt]: 550 No such file")
        assert str(error).startswith("[CommandException] - ")
        assert normalize_exception_message(error) == "Unable to remove file [a.txt]: 550 No such file"


class TestAdapterErrors:
    """Tests for the adapter_errors context manager."""

    def test_client_error_becomes_adapter_error(self):
        """Test client errors are re-raised with a clean message."""
        original = FTPTransferFailedError("Listing of [pub] was interrupted")

        with pytest.raises(FTPAdapterError) as exc_info:
            with adapter_errors():
                raise original

        assert str(exc_info.value) == "Listing of [pub] was interrupted"
        assert exc_info.value.original_error is original

    def test_other_errors_pass_through(self):
        """Test unrelated exceptions are not converted."""
        with pytest.raises(ValueError):
            with adapter_errors():
                raise ValueError("bad input")

    def test_no_error(self):
        """Test the block runs normally without errors."""
        with adapter_errors():
            value = 42
        assert value == 42
