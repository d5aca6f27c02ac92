"""Persisted user settings: theme, access key and pending refresh."""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """The user's durable settings record."""

    dark_mode: bool = False
    api_key: str = ""
    refresh_requested: bool = False


class SettingsStore:
    """Load and save :class:`Settings` as a YAML document."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Settings:
        """Return the stored settings, or defaults when missing or unreadable."""
        if not self._path.exists():
            return Settings()
        try:
            data = yaml.safe_load(self._path.read_text()) or {}
            return Settings.model_validate(data)
        except (OSError, yaml.YAMLError, ValidationError) as exc:
            logger.warning("Could not read settings from %s, using defaults: %s", self._path, exc)
            return Settings()

    def save(self, settings: Settings) -> None:
        """Write *settings*, creating parent directories. Raises ``OSError`` on failure."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(yaml.safe_dump(settings.model_dump(), sort_keys=False))
