"""Resolution-and-scan CLI command."""

from functools import partial
from pathlib import Path

import typer

from dnsweep.config import (
    get_concurrency,
    get_deadline,
    get_nameserver,
    get_probe_timeout,
    get_resolve_timeout,
    is_verbose,
)

from .deps import cli_module
from .scan_display import create_summary_table, format_stats, run_scan_with_live_display
from .shared import app, console, setup_logging


@app.command("scan")
def scan(
    target: str = typer.Argument(..., help="Root domain to scan"),
    subdomains_file: Path = typer.Option(
        Path("./dns.txt"), "--subdomains-file", "-s", help="Subdomain wordlist, one label per line"
    ),
    ports: str | None = typer.Option(
        None, "--ports", "-p", help="Ports to probe, e.g. 80,443,8000-8100 (omit for DNS only)"
    ),
    concurrency: int | None = typer.Option(
        None, "--concurrency", "-c", help="Worker pool size shared by lookups and probes"
    ),
    nameserver: str | None = typer.Option(
        None, "--nameserver", "-n", help="DNS server ip[:port], or 'system'"
    ),
    resolve_timeout: float | None = typer.Option(
        None, "--resolve-timeout", help="Seconds to wait for each DNS answer"
    ),
    probe_timeout: float | None = typer.Option(
        None, "--probe-timeout", help="Seconds to wait for each TCP connect"
    ),
    deadline: float | None = typer.Option(
        None, "--deadline", help="Stop starting new tasks after this many seconds"
    ),
    ipv6: bool = typer.Option(False, "--ipv6", help="Also query AAAA records"),
    include_filtered: bool = typer.Option(
        False, "--include-filtered", help="List filtered ports in the report"
    ),
    include_closed: bool = typer.Option(
        False, "--include-closed", help="List closed ports in the report"
    ),
    output: Path = typer.Option(
        Path("./port-scanner.json"), "--output", "-o", help="Where to write the JSON report"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Resolve TARGET and its wordlist subdomains, then probe ports on each address."""
    cli = cli_module()
    setup_logging(verbose or is_verbose())

    try:
        labels = cli.load_wordlist(subdomains_file)
    except OSError as exc:
        console.print(f"[red]Cannot read subdomains file {subdomains_file}: {exc}[/red]")
        raise typer.Exit(1) from exc

    if nameserver is None:
        nameserver_value = get_nameserver()
    elif nameserver.strip().lower() == "system":
        nameserver_value = None
    else:
        nameserver_value = nameserver

    try:
        config = cli.RunConfig(
            target=target,
            subdomains=tuple(labels),
            concurrency=concurrency if concurrency is not None else get_concurrency(),
            resolve_timeout=(
                resolve_timeout if resolve_timeout is not None else get_resolve_timeout()
            ),
            probe_timeout=probe_timeout if probe_timeout is not None else get_probe_timeout(),
            ports=cli.PortSpec.parse(ports) if ports is not None else None,
            deadline=deadline if deadline is not None else get_deadline(),
            nameserver=nameserver_value,
            record_types=("A", "AAAA") if ipv6 else ("A",),
            include_filtered=include_filtered,
            include_closed=include_closed,
        )
    except cli.ConfigError as exc:
        console.print(f"[red]Invalid input: {exc}[/red]")
        raise typer.Exit(2) from exc

    mode = f"{len(config.ports)} ports" if config.ports is not None else "DNS only"
    console.print(
        f"[blue]Scanning {config.target} with {len(labels)} candidate subdomains "
        f"({mode}, concurrency {config.concurrency})...[/blue]"
    )

    resolver = cli.DNSResolver.from_config(config)
    prober = cli.TCPProber()
    factory = partial(cli.run_scan, config, resolver, prober)

    try:
        run = cli.safe_async_run(run_scan_with_live_display(factory, config.target, console))
    except KeyboardInterrupt:
        console.print("[yellow]Scan interrupted.[/yellow]")
        raise typer.Exit(130) from None

    console.print(create_summary_table(run))
    console.print(f"[dim]{format_stats(run.stats)}[/dim]")
    if run.stats.deadline_expired:
        console.print("[yellow]Run deadline reached; the report is partial.[/yellow]")
    if run.stats.invalid_labels:
        console.print(
            f"[yellow]Ignored {run.stats.invalid_labels} invalid wordlist entries "
            "(not valid DNS labels).[/yellow]"
        )

    found = sum(1 for entry in run.report.subdomains or () if entry.addresses)
    console.print(f"[green]Found {found} subdomain(s) with addresses.[/green]")

    try:
        path = cli.write_report(run.report, output)
    except OSError as exc:
        console.print(f"[red]Cannot write report to {output}: {exc}[/red]")
        raise typer.Exit(1) from exc

    console.print(f"[green]Wrote report to[/green] {path}")
