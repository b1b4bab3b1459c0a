"""FTP operations module for webftp.

This module handles all FTP-related functionality:
- FTPConnectionConfig / establish: Connection setup with TLS fallback
- FTPOperationClient: Filesystem operations on top of ftplib
- DirectoryBrowser, FileMutator, TransferManager: Adapter capabilities
- FTPAdapter: The session-bound adapter composing the above
- Exceptions: FTP-specific error types
"""
