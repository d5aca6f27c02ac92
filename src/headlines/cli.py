"""CLI entry point for headlines."""

import asyncio
import logging
import time
from pathlib import Path
from typing import Annotated

import typer

from headlines import __version__
from headlines.app import HeadlinesApp
from headlines.config import AppConfig, load_config
from headlines.feed.client import FeedClient
from headlines.feed.errors import FeedError
from headlines.feed.mapper import to_display_records
from headlines.feed.models import DisplayRecord, FeedFailure
from headlines.monitoring.logging import setup_logging
from headlines.settings import SettingsStore

logger = logging.getLogger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"headlines {__version__}")
        raise typer.Exit()


app = typer.Typer(name="headlines", help="Headlines: top stories from newsdata.io in your terminal")


@app.callback()
def main(
    version: Annotated[
        bool, typer.Option("--version", "-V", help="Show version and exit", callback=_version_callback, is_eager=True)
    ] = False,
) -> None:
    """Headlines: top stories from newsdata.io in your terminal."""


DEFAULT_CONFIG = Path("config.yaml")

ConfigOption = Annotated[Path, typer.Option("--config", "-c", help="Path to config.yaml")]


def _load_config(config_path: Path) -> AppConfig:
    """Load config from file, warning if the file does not exist."""
    if config_path.exists():
        return load_config(config_path)
    logger.warning("Config file %s not found, using defaults", config_path)
    return AppConfig()


def _setup_logging(cfg: AppConfig) -> None:
    log_file = Path(cfg.monitoring.log_file) if cfg.monitoring.log_file else None
    setup_logging(structured=cfg.monitoring.structured_logging, log_file=log_file)


def _store(cfg: AppConfig) -> SettingsStore:
    return SettingsStore(cfg.settings_path.expanduser())


def _echo_record(record: DisplayRecord) -> None:
    typer.echo(f"▶ {record.title}")
    typer.echo(f"  {record.description}")
    typer.echo(f"  Read more: {record.link}")


def _echo_failure(failure: FeedFailure) -> None:
    typer.echo(f"Fetch failed ({failure.kind}): {failure.message}", err=True)


@app.command()
def run(
    config: ConfigOption = DEFAULT_CONFIG,
    ticks: Annotated[int | None, typer.Option("--ticks", help="Stop after this many ticks")] = None,
    interval: Annotated[float | None, typer.Option("--interval", help="Seconds between ticks")] = None,
) -> None:
    """Run the polling presentation loop, printing articles as they arrive."""
    cfg = _load_config(config)
    _setup_logging(cfg)
    tick_interval = interval if interval is not None else cfg.display.tick_interval

    headlines = HeadlinesApp(cfg, _store(cfg))
    headlines.start()
    try:
        if not headlines.api_key_initialized:
            typer.echo("Enter your API_KEY for newsdata.io (register at https://newsdata.io)")
            headlines.set_api_key(typer.prompt("API key", hide_input=True))

        last_error: FeedFailure | None = None
        count = 0
        while ticks is None or count < ticks:
            for record in headlines.poll():
                _echo_record(record)
            if headlines.last_error is not None and headlines.last_error is not last_error:
                _echo_failure(headlines.last_error)
            last_error = headlines.last_error
            count += 1
            time.sleep(tick_interval)
    except KeyboardInterrupt:
        typer.echo("\nStopped.")
    finally:
        headlines.close()


@app.command()
def fetch(
    config: ConfigOption = DEFAULT_CONFIG,
    key: Annotated[str | None, typer.Option("--key", "-k", help="Access key (defaults to the saved one)")] = None,
    use_async: Annotated[bool, typer.Option("--async", help="Use the asyncio transport")] = False,
) -> None:
    """Fetch the current top stories once and print them."""
    cfg = _load_config(config)
    _setup_logging(cfg)

    api_key = key or _store(cfg).load().api_key
    request = cfg.feed.request_template().with_key(api_key)
    with FeedClient(cfg.feed.base_url, timeout=cfg.feed.timeout) as client:
        try:
            if use_async:
                response = asyncio.run(client.fetch_async(request))
            else:
                response = client.fetch(request)
        except FeedError as exc:
            typer.echo(f"Fetch failed ({type(exc).__name__}): {exc}")
            raise typer.Exit(code=1) from exc

    records = to_display_records(response, placeholder=cfg.feed.placeholder)
    for record in records[: cfg.display.max_articles]:
        _echo_record(record)
    typer.echo(f"{len(records)} articles fetched")


@app.command("set-key")
def set_key(
    key: Annotated[str, typer.Argument(help="newsdata.io access key")],
    config: ConfigOption = DEFAULT_CONFIG,
) -> None:
    """Save the access key to the settings file."""
    cfg = _load_config(config)
    store = _store(cfg)
    settings = store.load()
    settings.api_key = key
    store.save(settings)
    typer.echo(f"Access key saved to {store.path}")


@app.command("toggle-theme")
def toggle_theme(config: ConfigOption = DEFAULT_CONFIG) -> None:
    """Switch between dark and light mode."""
    cfg = _load_config(config)
    store = _store(cfg)
    settings = store.load()
    settings.dark_mode = not settings.dark_mode
    store.save(settings)
    typer.echo(f"Dark mode: {'on' if settings.dark_mode else 'off'}")
