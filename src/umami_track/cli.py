# src/umami_track/cli.py
"""umami-track Command Line Interface.

Sends a single page view or event to the configured collector. Useful for
smoke-testing a collector deployment and for shell-scripted telemetry.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path

import httpx
import typer
from dynaconf.vendor.ruamel.yaml.parser import ParserError as YamlParserError
from dynaconf.vendor.ruamel.yaml.scanner import ScannerError as YamlScannerError
from pydantic import ValidationError

from umami_track import __version__
from umami_track.config import TrackerConfig, load_config
from umami_track.errors import TrackerError
from umami_track.logging import StructlogSink
from umami_track.tracker import Tracker

__all__ = ["app"]

app = typer.Typer(
    name="umami-track",
    help="Send page views and events to an Umami-compatible collector.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"umami-track version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from a .env file.

    Args:
        env_file: Explicit path to .env file. If None, searches for .env
                 in current directory and parent directories.

    Returns:
        True if .env was found and loaded, False otherwise.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(
                f"Error: .env file not found: {env_file}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)


def _format_error(
    title: str,
    message: str,
    hint: str | None = None,
    details: list[str] | None = None,
) -> None:
    """Display a formatted error with optional hint and details."""
    from rich.console import Console
    from rich.panel import Panel
    from rich.text import Text

    console = Console(stderr=True)

    content = Text()
    content.append(message, style="white")

    if details:
        content.append("\n\n")
        for detail in details:
            content.append(f"  • {detail}\n", style="dim")

    if hint:
        content.append("\n")
        content.append("Hint: ", style="yellow bold")
        content.append(hint, style="yellow")

    console.print(Panel(content, title=f"[red bold]{title}[/]", border_style="red", padding=(0, 1)))


def _parse_data(pairs: list[str]) -> dict[str, str]:
    """Parse repeated KEY=VALUE options into an ordered mapping."""
    data: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="--data")
        data[key] = value
    return data


def _load(config_path: Path | None) -> TrackerConfig:
    try:
        return load_config(config_path)
    except FileNotFoundError:
        _format_error(
            title="File Not Found",
            message=f"Config file does not exist: {config_path}",
            hint="Check the path and ensure the file exists.",
        )
        raise typer.Exit(1) from None
    except (YamlParserError, YamlScannerError) as e:
        # e.problem holds the specific error, e.g. "expected ',' or ']'"
        _format_error(
            title="YAML Syntax Error",
            message=str(e.problem),
            details=[f"in {config_path}"],
            hint="Check for unclosed brackets, incorrect indentation, or invalid characters.",
        )
        raise typer.Exit(1) from None
    except ValidationError as e:
        details = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            details.append(f"{loc}: {error['msg']}")
        _format_error(
            title="Configuration Validation Failed",
            message="Invalid tracker configuration",
            details=details,
            hint="Set UMAMI_ENDPOINT and UMAMI_WEBSITE_ID, or pass --config.",
        )
        raise typer.Exit(1) from None
    except OSError as e:
        # Creating the default user id writes under the state directory
        _format_error(
            title="State Directory",
            message=f"{type(e).__name__}: {e}",
            hint="Make $XDG_STATE_HOME writable, or set UMAMI_USER_ID.",
        )
        raise typer.Exit(1) from None


def _deliver(
    config: TrackerConfig,
    kind: str,
    call: Callable[[Tracker], Awaitable[None]],
) -> None:
    """Run one tracking call and translate failures into exit codes."""

    async def _run() -> None:
        async with Tracker(config, sink=StructlogSink()) as tracker:
            await call(tracker)

    try:
        asyncio.run(_run())
    except TrackerError as e:
        _format_error(title="Send Failed", message=str(e))
        raise typer.Exit(1) from None
    except httpx.HTTPError as e:
        _format_error(
            title="Network Error",
            message=f"{type(e).__name__}: {e}",
            hint="Check the endpoint is reachable.",
        )
        raise typer.Exit(1) from None

    typer.echo(f"Sent {kind} to {config.endpoint}")


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs.",
    ),
) -> None:
    """umami-track: analytics events from the command line."""
    from umami_track.logging import configure_logging

    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "WARNING")

    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho(
            "Warning: --env-file ignored because --no-dotenv is set.",
            fg=typer.colors.YELLOW,
            err=True,
        )


_CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to tracker YAML config (UMAMI_* environment variables override it).",
)


@app.command()
def pageview(
    url: str = typer.Option(..., "--url", "-u", help="Virtual URL of the screen, e.g. app://home."),
    title: str | None = typer.Option(None, "--title", "-t", help="Screen title."),
    referrer: str | None = typer.Option(None, "--referrer", "-r", help="Referrer URL."),
    config: Path | None = _CONFIG_OPTION,
) -> None:
    """Send a page view."""
    tracker_config = _load(config)
    _deliver(
        tracker_config,
        "pageview",
        lambda tracker: tracker.track_pageview(url, title=title, referrer=referrer),
    )


@app.command()
def event(
    name: str = typer.Option(..., "--name", "-n", help="Event name."),
    url: str = typer.Option(..., "--url", "-u", help="Virtual URL the event belongs to."),
    value: str | None = typer.Option(None, "--value", help="Event value (also sent as data.value)."),
    title: str | None = typer.Option(None, "--title", "-t", help="Screen title."),
    referrer: str | None = typer.Option(None, "--referrer", "-r", help="Referrer URL."),
    tag: str | None = typer.Option(None, "--tag", help="Tag description."),
    data: list[str] = typer.Option([], "--data", "-d", help="Event property as KEY=VALUE (repeatable)."),
    config: Path | None = _CONFIG_OPTION,
) -> None:
    """Send a custom event."""
    properties = _parse_data(data)
    tracker_config = _load(config)
    _deliver(
        tracker_config,
        "event",
        lambda tracker: tracker.track_event(
            name,
            url=url,
            value=value,
            title=title,
            referrer=referrer,
            tag=tag,
            data=properties,
        ),
    )
