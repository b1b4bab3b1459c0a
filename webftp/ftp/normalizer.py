"""Error message normalization for webftp.

Strips library tagging such as "[ConnectionException] - " from raw
error text so messages can be shown to end users.
"""

import logging
import re
from contextlib import contextmanager
from typing import Iterator

from webftp.ftp.exceptions import FTPAdapterError, FTPClientError

logger = logging.getLogger("webftp.normalizer")

# "<token> - " where token is a run of word characters and brackets
TAG_PATTERN = re.compile(r"([\[\w\]]+)\s-\s", re.IGNORECASE)


def normalize_message(message: str) -> str:
    """
    Remove library tags from a raw error message.

    Example:
        "[ConnectionException] - Failed to connect to remote server."
        becomes "Failed to connect to remote server."

    Messages without a tag are returned unchanged.

    Args:
        message: Raw error message

    Returns:
        Cleaned message
    """
    return TAG_PATTERN.sub("", message)


def normalize_exception_message(error: BaseException) -> str:
    """
    Normalize the message of a caught exception.

    Args:
        error: Caught exception

    Returns:
        Cleaned message, identical to normalize_message(str(error))
    """
    return normalize_message(str(error))


@contextmanager
def adapter_errors() -> Iterator[None]:
    """Re-raise operation client failures as FTPAdapterError with a clean message."""
    try:
        yield
    except FTPClientError as e:
        message = normalize_exception_message(e)
        logger.warning(f"Adapter operation failed: {message}")
        raise FTPAdapterError(message, e) from e
