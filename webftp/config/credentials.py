"""FTP password storage for webftp.

Passwords are kept in the system keyring so they never appear in
session state, settings files or logs. Each entry is stored under
the "webftp" service with the account name "<user>@<host>:<port>",
prefixed with "<session>:" when it belongs to one user session.
"""

import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError

logger = logging.getLogger("webftp.credentials")


class CredentialManager:
    """Keyring-backed storage of FTP passwords."""

    SERVICE_NAME = "webftp"

    def __init__(self, service_name: Optional[str] = None):
        """
        Initialize the manager.

        Args:
            service_name: Keyring service, "webftp" by default
        """
        self._service = service_name or self.SERVICE_NAME

    @staticmethod
    def account_name(host: str, port: int, username: str, session_id: Optional[str] = None) -> str:
        """
        Keyring account for one login.

        Different ports never share a password, and neither do
        different sessions when session_id is given.
        """
        account = f"{username}@{host}:{port}"
        if session_id:
            return f"{session_id}:{account}"
        return account

    def save_password(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        session_id: Optional[str] = None
    ) -> bool:
        """
        Store a password, replacing any previous one.

        Returns:
            False if the keyring backend refused
        """
        account = self.account_name(host, port, username, session_id)
        try:
            keyring.set_password(self._service, account, password)
        except KeyringError as e:
            logger.warning(f"Keyring refused to store password for {account}: {e}")
            return False
        return True

    def get_password(
        self,
        host: str,
        port: int,
        username: str,
        session_id: Optional[str] = None
    ) -> Optional[str]:
        """Stored password, or None if absent or the keyring is unavailable."""
        account = self.account_name(host, port, username, session_id)
        try:
            return keyring.get_password(self._service, account)
        except KeyringError as e:
            logger.warning(f"Keyring lookup failed for {account}: {e}")
            return None

    def delete_password(
        self,
        host: str,
        port: int,
        username: str,
        session_id: Optional[str] = None
    ) -> bool:
        """
        Forget a password.

        Returns:
            False if nothing was stored or the keyring refused
        """
        try:
            keyring.delete_password(self._service, self.account_name(host, port, username, session_id))
        except KeyringError:
            return False
        return True
