"""Command line entry point for headershim."""

import json
from pathlib import Path
from typing import Annotated

import httpx
import typer
from rich.console import Console
from rich.table import Table

from headershim._version import __version__
from headershim.config.settings import ConfigurationError, Settings
from headershim.core.logging import get_logger, setup_logging
from headershim.utils.headers import mask_header_values, parse_headers_string
from headershim.utils.http_factory import create_client


app = typer.Typer(
    name="headershim",
    help="Inject extra headers into outbound HTTP requests.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)

console = Console()
err_console = Console(stderr=True)

logger = get_logger(__name__)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to a TOML config file"),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"headershim {__version__}")
        raise typer.Exit()


def _load_settings(config: Path | None) -> Settings:
    try:
        return Settings.from_config(config_path=config)
    except ConfigurationError as e:
        err_console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1) from e


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    log_level: Annotated[
        str, typer.Option("--log-level", help="Log level (DEBUG, INFO, ...)")
    ] = "WARNING",
    json_logs: Annotated[
        bool, typer.Option("--json-logs", help="Render logs as JSON")
    ] = False,
) -> None:
    setup_logging(json_logs=json_logs, log_level=log_level)


@app.command()
def parse(
    value: Annotated[str, typer.Argument(help='Headers as "Key: Value, Key2: Value2"')],
) -> None:
    """Parse a header string and print the result as JSON."""
    console.print_json(json.dumps(parse_headers_string(value)))


@app.command("show-config")
def show_config(config: ConfigOption = None) -> None:
    """Show resolved settings with header values masked."""
    settings = _load_settings(config)

    table = Table(title="headershim settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    masked = mask_header_values(settings.extra_headers)
    table.add_row(
        "extra_headers",
        ", ".join(f"{name}: {value}" for name, value in masked.items()) or "(none)",
    )
    for name, value in settings.http.model_dump().items():
        table.add_row(f"http.{name}", str(value))
    for name, value in settings.logging.model_dump().items():
        table.add_row(f"logging.{name}", str(value))

    console.print(table)


@app.command()
def request(
    url: Annotated[str, typer.Argument(help="Target URL")],
    method: Annotated[str, typer.Option("--method", "-X", help="HTTP method")] = "GET",
    header: Annotated[
        str | None,
        typer.Option(
            "--header",
            "-H",
            help='Extra headers as "Key: Value, ..."; replaces configured headers',
        ),
    ] = None,
    insecure: Annotated[
        bool, typer.Option("--insecure", "-k", help="Skip TLS verification")
    ] = False,
    config: ConfigOption = None,
) -> None:
    """Send one request with the extra headers and print the status code."""
    settings = _load_settings(config)
    headers = (
        parse_headers_string(header) if header is not None else settings.extra_headers
    )

    with create_client(
        headers,
        insecure=insecure or settings.http.insecure,
        ca_bundle=settings.http.ca_bundle,
        proxy_url=settings.http.proxy_url,
        timeout=settings.http.timeout,
    ) as client:
        try:
            response = client.request(method.upper(), url)
        except httpx.HTTPError as e:
            logger.debug("cli_request_failed", url=url, error=str(e))
            err_console.print(f"[red]Request failed:[/red] {e}")
            raise typer.Exit(1) from e

    console.print(f"{response.status_code} {response.reason_phrase}")
