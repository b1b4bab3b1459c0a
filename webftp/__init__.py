"""webftp - web file manager backed by a remote FTP server.

Subpackages:
- ftp: Session-bound FTP adapter and the operations it exposes
- session: Session storage and adapter binding across requests
- web: HTTP response value and process-wide error handler
- config: Server settings and keyring credential storage
- utils: Logging and input validation
"""

__version__ = "0.3.0"
