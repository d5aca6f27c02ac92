"""Configuration loading and validation."""

from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from headlines.feed.client import BASE_URL
from headlines.feed.models import Category, Country, FeedRequest, Language

DEFAULT_SETTINGS_PATH = Path.home() / ".config" / "headlines" / "settings.yaml"


class FeedConfig(BaseModel):
    """Provider endpoint and query selectors."""

    base_url: str = BASE_URL
    category: Category = Category.TOP
    country: Country = Country.GB
    language: Language = Language.EN
    timeout: float = 10.0
    api_key_env: str = "NEWSDATA_API_KEY"
    placeholder: str = "..."

    def request_template(self) -> FeedRequest:
        """A keyless request carrying the configured selectors."""
        return FeedRequest(api_key="", category=self.category, country=self.country, language=self.language)


class DisplayConfig(BaseModel):
    """Presentation loop configuration."""

    max_articles: int = 10
    tick_interval: float = 0.5


class MonitoringConfig(BaseModel):
    """Logging configuration."""

    structured_logging: bool = False
    log_file: str | None = None


class AppConfig(BaseModel):
    """Top-level application configuration."""

    feed: FeedConfig = Field(default_factory=FeedConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    settings_path: Path = DEFAULT_SETTINGS_PATH


def load_config(path: Path) -> AppConfig:
    """Load config from a YAML file."""
    load_dotenv(path.parent / ".env", override=False)
    return AppConfig(**(yaml.safe_load(path.read_text()) or {}))
