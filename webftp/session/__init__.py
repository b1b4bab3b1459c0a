"""Session module for webftp.

- SessionStore / SessionRegistry: Per-session variables kept across requests
- AdapterSessionBinder: Stores and restores the FTP adapter of a session
"""
