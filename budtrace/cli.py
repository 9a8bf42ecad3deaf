"""Command-line entry point for budtrace.

Checks an exporter configuration file the way a component does at startup:
the file must exist, parse, and validate. Any failure exits non-zero.

Usage:
    budtrace --opentelemetry-config-file /etc/tracing/config.yaml
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from budtrace._internal.config import TracingSettings, exporter_endpoint, load_configuration
from budtrace._internal.exceptions import ConfigurationError
from budtrace._internal.logging import configure_logging


@click.command()
@click.option(
    "--opentelemetry-config-file",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar="BUDTRACE_CONFIG_FILE",
    required=True,
    help="File with opentelemetry exporter configuration.",
)
@click.option("--service-name", default=None, help="Service name reported on exported spans.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
def cli(config_file: Path, service_name: str | None, debug: bool) -> None:
    """Validate an opentelemetry exporter configuration file."""
    settings = TracingSettings()
    if debug:
        settings.debug = True
    configure_logging(settings)
    console = Console()

    try:
        config = load_configuration(config_file)
    except ConfigurationError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        for error in e.errors:
            console.print(f"  - {error}")
        sys.exit(1)

    table = Table(title="Tracing Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Service", service_name or settings.service_name)
    table.add_row("Exporter", "service" if config.service is not None else "url")
    table.add_row("Endpoint", exporter_endpoint(config))
    console.print(table)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
