"""FTP connection establishment for webftp.

Provides FTPConnectionConfig, TransferSettings and the establisher
that opens an encrypted transport with fallback to plain FTP.
"""

import logging
import socket
from dataclasses import dataclass, asdict
from enum import Enum
from ftplib import FTP, FTP_TLS, all_errors, error_perm
from typing import Any, Mapping, Optional, Tuple

from webftp.config.settings import ServerSettings
from webftp.ftp.exceptions import (
    FTPAuthenticationError,
    FTPConnectionError,
    FTPTimeoutError,
)
from webftp.utils.validators import (
    parse_flag,
    validate_host,
    validate_port,
    validate_timeout,
)

logger = logging.getLogger("webftp.connection")


class ConnectionState(Enum):
    """FTP connection state."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


class OpenOutcome(Enum):
    """Result tag of an open attempt."""
    ENCRYPTED = "encrypted"
    PLAIN = "plain"
    FAILED = "failed"


@dataclass(frozen=True)
class FTPConnectionConfig:
    """FTP connection configuration."""
    host: str
    username: str = "anonymous"
    password: str = ""
    port: int = 21
    timeout: int = 90
    use_encryption: bool = False
    use_passive: bool = True
    auto_seek: bool = True

    def __post_init__(self):
        """Validate configuration after initialization."""
        for is_valid, error in (
            validate_host(self.host),
            validate_port(self.port),
            validate_timeout(self.timeout),
        ):
            if not is_valid:
                raise ValueError(error)

    def __repr__(self) -> str:
        return (
            f"FTPConnectionConfig(host={self.host!r}, username={self.username!r}, "
            f"port={self.port}, timeout={self.timeout}, use_encryption={self.use_encryption}, "
            f"use_passive={self.use_passive}, auto_seek={self.auto_seek})"
        )

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        settings: Optional[ServerSettings] = None
    ) -> "FTPConnectionConfig":
        """
        Build a config from caller-supplied request parameters.

        Accepts the keys host, username, password, port, timeout, useSsl,
        usePassive and autoSeek; string values are converted. Missing
        values fall back to the server settings.

        Args:
            params: Request parameters
            settings: Server defaults (built-in defaults if omitted)

        Returns:
            Validated FTPConnectionConfig

        Raises:
            ValueError: If a parameter is invalid
        """
        settings = settings or ServerSettings()

        port = params.get("port") or settings.default_port
        is_valid, error = validate_port(port)
        if not is_valid:
            raise ValueError(error)

        timeout = params.get("timeout") or settings.timeout
        is_valid, error = validate_timeout(timeout)
        if not is_valid:
            raise ValueError(error)

        return cls(
            host=str(params.get("host") or "").strip(),
            username=params.get("username") or "anonymous",
            password=params.get("password") or "",
            port=int(port),
            timeout=int(timeout),
            use_encryption=parse_flag(params.get("useSsl"), settings.use_encryption),
            use_passive=parse_flag(params.get("usePassive"), settings.use_passive),
            auto_seek=parse_flag(params.get("autoSeek"), settings.auto_seek),
        )

    def to_state(self) -> dict:
        """Serialize everything except the password."""
        state = asdict(self)
        del state["password"]
        return state

    @classmethod
    def from_state(cls, state: Mapping[str, Any], password: str) -> "FTPConnectionConfig":
        """Rebuild a config from to_state() output and a password."""
        return cls(password=password, **state)


@dataclass
class TransferSettings:
    """Transfer-mode settings of an open connection (protocol defaults)."""
    passive: bool = False
    auto_seek: bool = True

    def apply(self, ftp: FTP) -> None:
        """Push the passive flag to the handle."""
        ftp.set_pasv(self.passive)


@dataclass
class OpenResult:
    """Tagged result of establish()."""
    outcome: OpenOutcome
    ftp: Optional[FTP] = None
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        """True if a transport is open."""
        return self.outcome != OpenOutcome.FAILED


def close_connection(ftp: Optional[FTP]) -> None:
    """Close an FTP handle, best effort."""
    if ftp is None:
        return
    try:
        ftp.quit()
    except Exception:
        try:
            ftp.close()
        except Exception:
            pass


def _attempt(config: FTPConnectionConfig, encrypted: bool) -> OpenResult:
    """Make a single connect + login attempt."""
    ftp = FTP_TLS() if encrypted else FTP()
    ftp.set_debuglevel(0)
    try:
        ftp.connect(host=config.host, port=config.port, timeout=config.timeout)
        if encrypted:
            ftp.auth()
        ftp.login(user=config.username, passwd=config.password)
        if encrypted:
            ftp.prot_p()
    except all_errors as e:
        close_connection(ftp)
        return OpenResult(OpenOutcome.FAILED, error=e)

    # Protocol default until transfer options are applied
    ftp.set_pasv(False)
    outcome = OpenOutcome.ENCRYPTED if encrypted else OpenOutcome.PLAIN
    return OpenResult(outcome, ftp=ftp)


def establish(config: FTPConnectionConfig) -> OpenResult:
    """
    Open a transport for the config.

    With use_encryption an FTP_TLS attempt is made first. If it fails
    for any reason the same parameters are tried over plain FTP.

    Args:
        config: Connection configuration

    Returns:
        OpenResult tagged ENCRYPTED, PLAIN or FAILED
    """
    if config.use_encryption:
        result = _attempt(config, encrypted=True)
        if result.succeeded:
            return result
        logger.info(
            f"Encrypted connection to {config.host}:{config.port} failed "
            f"({result.error}), falling back to plain FTP"
        )
    return _attempt(config, encrypted=False)


def _open_error(config: FTPConnectionConfig, error: BaseException) -> FTPConnectionError:
    if isinstance(error, socket.timeout):
        return FTPTimeoutError(config.host, config.port, config.timeout)
    if isinstance(error, error_perm) and str(error).startswith("530"):
        return FTPAuthenticationError(config.host, config.port, config.username, error)
    return FTPConnectionError(config.host, config.port, error)


def open_connection(config: FTPConnectionConfig) -> Tuple[FTP, TransferSettings, OpenOutcome]:
    """
    Open a connection and apply transfer-mode options.

    Passive mode and auto-seek are only applied when use_passive is set.

    Args:
        config: Connection configuration

    Returns:
        Tuple of (ftp handle, transfer settings, open outcome)

    Raises:
        FTPAuthenticationError: If login is refused
        FTPTimeoutError: If the server does not answer in time
        FTPConnectionError: If the connection fails otherwise
    """
    result = establish(config)
    if not result.succeeded:
        error = _open_error(config, result.error)
        logger.error(f"Connection failed: {error}")
        raise error

    settings = TransferSettings()
    if config.use_passive:
        settings.passive = True
        settings.auto_seek = config.auto_seek
        settings.apply(result.ftp)

    logger.info(
        f"Connected to {config.host}:{config.port} as {config.username} "
        f"({result.outcome.value}, passive={settings.passive})"
    )
    return result.ftp, settings, result.outcome
