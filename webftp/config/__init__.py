"""Configuration module for webftp.

This module handles server settings and credentials:
- SettingsManager: JSON-based settings persistence
- CredentialManager: Secure credential storage via keyring
- Paths: Application data directories
- ServerSettings: Settings dataclass
"""
