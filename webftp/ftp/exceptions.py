"""FTP-specific exceptions for webftp.

Connection-level errors (connect, login, timeout) and tagged client
errors raised by individual operations. The adapter turns the latter
into plain messages.
"""


class FTPError(Exception):
    """Base exception for all FTP-related errors."""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class FTPClientError(FTPError):
    """
    Low-level failure raised by the operation client.

    Messages carry a library tag, e.g. "[CommandException] - 550 Not found",
    which the adapter strips before anything reaches the user.
    """

    tag = "FtpClientException"

    def __str__(self) -> str:
        return f"[{self.tag}] - {self.message}"


class FTPCommandError(FTPClientError):
    """An FTP command was rejected by the server."""

    tag = "CommandException"


class FTPTransferFailedError(FTPClientError):
    """A data transfer (LIST, RETR, STOR) failed mid-flight."""

    tag = "TransferException"


class FTPConnectionError(FTPError):
    """Failed to establish FTP connection."""

    def __init__(self, host: str, port: int, original_error: Exception = None):
        self.host = host
        self.port = port
        message = f"Failed to connect to {host}:{port}"
        super().__init__(message, original_error)


class FTPAuthenticationError(FTPConnectionError):
    """FTP authentication (login) failed."""

    def __init__(self, host: str, port: int, username: str, original_error: Exception = None):
        super().__init__(host, port, original_error)
        self.username = username
        self.message = f"Authentication failed for user '{username}'"


class FTPTimeoutError(FTPConnectionError):
    """FTP connection timed out."""

    def __init__(self, host: str, port: int, timeout: int = 30):
        super().__init__(host, port)
        self.timeout = timeout
        self.message = f"Connection to {host}:{port} timed out after {timeout} seconds"


class FTPNotConnectedError(FTPError):
    """Operation attempted without active FTP connection."""

    def __init__(self, operation: str = "Operation"):
        message = f"{operation} requires an active FTP connection"
        super().__init__(message)


class FTPAdapterError(FTPError):
    """
    An adapter operation failed.

    The message is already normalized and safe to show to end users,
    so the original error is kept for logging only.
    """

    def __str__(self) -> str:
        return self.message


class FTPTransferError(FTPError):
    """Download failed. Carries a generic message, never the raw transport error."""

    def __init__(self, path: str, original_error: Exception = None):
        self.path = path
        super().__init__(f"Failed to download file {path}.", original_error)

    def __str__(self) -> str:
        return self.message
