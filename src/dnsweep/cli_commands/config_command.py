"""Configuration CLI command."""

import typer

from dnsweep.config import (
    create_global_config,
    get_concurrency,
    get_deadline,
    get_global_config_path,
    get_nameserver,
    get_probe_timeout,
    get_resolve_timeout,
    is_verbose,
)

from .shared import app, console


@app.command("config")
def config(
    action: str = typer.Argument("show", help="Action: show or init"),
) -> None:
    """Show effective settings or create the global config file."""
    if action == "init":
        config_path = create_global_config()
        console.print(f"[green]Global config:[/green] {config_path}")
    elif action == "show":
        config_path = get_global_config_path()
        source = str(config_path) if config_path.exists() else "defaults (no config file)"
        console.print(f"[bold]Effective configuration[/bold] [dim]({source})[/dim]")
        deadline = get_deadline()
        console.print(f"  DNSWEEP_CONCURRENCY={get_concurrency()}")
        console.print(f"  DNSWEEP_NAMESERVER={get_nameserver() or 'system'}")
        console.print(f"  DNSWEEP_RESOLVE_TIMEOUT={get_resolve_timeout()}")
        console.print(f"  DNSWEEP_PROBE_TIMEOUT={get_probe_timeout()}")
        console.print(f"  DNSWEEP_DEADLINE={deadline if deadline is not None else ''}")
        console.print(f"  DNSWEEP_VERBOSE={str(is_verbose()).lower()}")
    else:
        console.print(f"[red]Unknown action: {action}. Use 'show' or 'init'.[/red]")
        raise typer.Exit(1)
