"""Shared CLI app objects and helpers."""

import logging

import typer
from rich.console import Console

app = typer.Typer(
    name="zapctl",
    help="Drive OWASP ZAP scans and k6 load tests against an HTTP API",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    """Send library logs to stderr; DEBUG when verbose, else WARNING."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
