"""Shared CLI app objects and logging setup."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

app = typer.Typer(
    name="dnsweep",
    help="Resolve a domain and its subdomains, then probe TCP ports on every address",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Route log records through rich; DEBUG when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )
