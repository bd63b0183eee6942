"""dnsweep CLI - resolve a domain's subdomains and probe their TCP ports."""

from dnsweep.engine import (
    ConfigError,
    DNSResolver,
    PortSpec,
    RunConfig,
    TCPProber,
    load_wordlist,
    run_scan,
    write_report,
)
from dnsweep.utils.async_utils import safe_async_run

from .cli_commands import config_command, scan_command  # noqa: F401
from .cli_commands.shared import app, console

__all__ = [
    "ConfigError",
    "DNSResolver",
    "PortSpec",
    "RunConfig",
    "TCPProber",
    "app",
    "console",
    "load_wordlist",
    "main",
    "run_scan",
    "safe_async_run",
    "write_report",
]


@app.command()
def version() -> None:
    """Show the installed dnsweep version."""
    from importlib.metadata import PackageNotFoundError, version as pkg_version

    try:
        current_version = pkg_version("dnsweep")
    except PackageNotFoundError:
        current_version = "0.0.0+unknown"

    console.print(f"dnsweep {current_version}")


def main():
    """Entry point for the CLI."""
    app()
