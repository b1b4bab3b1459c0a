"""Server settings for webftp.

ServerSettings holds the defaults applied to connection requests that
leave a parameter out, plus logging options. SettingsManager keeps
them in a JSON file.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from webftp.config.paths import get_settings_path
from webftp.utils.validators import validate_port, validate_timeout

logger = logging.getLogger("webftp.settings")


@dataclass
class ServerSettings:
    """Defaults applied to connection requests that omit a parameter."""

    # Connection defaults
    default_port: int = 21
    timeout: int = 90
    use_passive: bool = True
    auto_seek: bool = True
    use_encryption: bool = False

    # Seconds a session's connection may sit unused before expire_idle closes it
    idle_timeout: int = 900

    # Logging
    log_level: str = "INFO"
    log_file: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServerSettings":
        """
        Build settings from a dictionary.

        Unknown keys are ignored and missing keys keep their defaults.

        Raises:
            ValueError: If the port, timeout or idle timeout is out of range
        """
        known = {f.name for f in fields(cls)}
        settings = cls(**{k: v for k, v in data.items() if k in known})
        settings.validate()
        return settings

    def validate(self) -> None:
        """Raise ValueError if the connection defaults are unusable."""
        if not isinstance(self.idle_timeout, int) or self.idle_timeout < 1:
            raise ValueError(f"Idle timeout must be a positive number of seconds, got {self.idle_timeout}")
        for is_valid, error in (validate_port(self.default_port), validate_timeout(self.timeout)):
            if not is_valid:
                raise ValueError(error)


class SettingsManager:
    """Loads and stores ServerSettings as JSON."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            config_path: Settings file, defaults to the platform data directory
        """
        self._config_path = config_path or get_settings_path()
        self._settings: Optional[ServerSettings] = None

    @property
    def config_path(self) -> Path:
        """Path to settings file."""
        return self._config_path

    def load(self) -> ServerSettings:
        """
        Read settings from disk.

        A missing, unreadable or invalid file yields the defaults.
        """
        try:
            data = json.loads(self._config_path.read_text(encoding="utf-8"))
            self._settings = ServerSettings.from_dict(data)
        except FileNotFoundError:
            self._settings = ServerSettings()
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Ignoring settings file {self._config_path}: {e}")
            self._settings = ServerSettings()
        return self._settings

    def save(self, settings: ServerSettings) -> None:
        """Write settings to disk, replacing the file in one step."""
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        staged = self._config_path.with_suffix(".json.tmp")
        staged.write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")
        os.replace(staged, self._config_path)
        self._settings = settings

    def reset(self) -> ServerSettings:
        """Delete the settings file and return the defaults."""
        self._config_path.unlink(missing_ok=True)
        self._settings = ServerSettings()
        return self._settings

    def update(self, **kwargs: Any) -> ServerSettings:
        """
        Change some fields and save.

        Unknown field names are ignored.

        Raises:
            ValueError: If the result has an invalid port or timeout
        """
        current = self._settings or self.load()
        changes = {k: v for k, v in kwargs.items() if hasattr(current, k)}
        updated = ServerSettings.from_dict({**current.to_dict(), **changes})
        self.save(updated)
        return updated
