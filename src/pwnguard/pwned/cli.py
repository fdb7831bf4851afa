"""
CLI commands for Pwned Passwords checks.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn
from rich.table import Table

from pwnguard.pwned.client import PwnedPasswordsClient
from pwnguard.pwned.config import PwnedConfig
from pwnguard.pwned.exceptions import PwnedError
from pwnguard.pwned.hashing import RANGE_SIZE
from pwnguard.pwned.models import PasswordCheckResult, RiskLevel

console = Console()


def risk_color(risk: RiskLevel) -> str:
    """Get color for risk level."""
    colors = {
        RiskLevel.SAFE: "green",
        RiskLevel.LOW: "yellow",
        RiskLevel.MEDIUM: "orange3",
        RiskLevel.HIGH: "red",
        RiskLevel.CRITICAL: "bold red",
    }
    return colors.get(risk, "white")


def fail(message: str) -> None:
    """Print an error and exit with status 1."""
    console.print(f"[red]Error: {message}[/red]")
    raise SystemExit(1)


def enable_debug_logging() -> None:
    """Send pwnguard debug logs to stderr so stdout stays clean for --json."""
    package_logger = logging.getLogger("pwnguard")
    package_logger.setLevel(logging.DEBUG)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


def get_config(ctx: click.Context) -> PwnedConfig:
    return ctx.obj["config"]


def get_minimum(ctx: click.Context, minimum: int | None) -> int:
    return get_config(ctx).minimum_occurrences if minimum is None else minimum


@click.group()
@click.option("--endpoint", help="Range API base URL (range key is appended)")
@click.option("--user-agent", help="User-Agent header for requests")
@click.option("--connect-timeout", type=click.FloatRange(min=0), help="Connection timeout in seconds (0 for off)")
@click.option("--response-timeout", type=click.FloatRange(min=0), help="Request timeout in seconds (0 for off)")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def pwned(
    ctx: click.Context,
    endpoint: str | None,
    user_agent: str | None,
    connect_timeout: float | None,
    response_timeout: float | None,
    verbose: bool,
) -> None:
    """Pwned Passwords - k-anonymity password breach checks.

    Only the first 5 characters of the password's SHA-1 hash are sent
    to the API. Defaults can be set with PWNGUARD_* environment variables.
    """
    ctx.ensure_object(dict)
    ctx.obj["console"] = console

    if verbose:
        enable_debug_logging()

    overrides = {
        "endpoint": endpoint,
        "user_agent": user_agent,
        "connection_timeout": connect_timeout,
        "remote_processing_timeout": response_timeout,
    }

    try:
        config = PwnedConfig.from_env().merged(
            {k: v for k, v in overrides.items() if v is not None}
        )
    except PwnedError as e:
        fail(str(e))

    ctx.obj["config"] = config


# =============================================================================
# Password Checking
# =============================================================================

@pwned.command("password")
@click.option("--password", "-p", help="Password to check (or prompts securely)")
@click.option("--hash", "password_hash", help="SHA-1 hash to check instead")
@click.option("--minimum", "-m", type=click.IntRange(min=0), help="Occurrences tolerated before failing")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def check_password(
    ctx: click.Context,
    password: str | None,
    password_hash: str | None,
    minimum: int | None,
    json_output: bool,
) -> None:
    """Check if a password has been exposed in data breaches.

    Exits with status 1 on lookup errors.

    Example:
        pwnguard pwned password
        pwnguard pwned password --hash 5BAA61E4C9B93F3F0682250B6CF8331B7EE68FD8
    """
    if not password and not password_hash:
        password = click.prompt("Password to check", hide_input=True)

    minimum = get_minimum(ctx, minimum)

    async def _check():
        async with PwnedPasswordsClient(get_config(ctx)) as client:
            if password_hash:
                return await client.check_password_hash(password_hash)
            else:
                return await client.check_password(password)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Checking password...", total=None)
            result = asyncio.run(_check())
    except (PwnedError, ValueError) as e:
        fail(str(e))

    compromised = result.exceeds(minimum)

    if json_output:
        data = result.to_dict()
        data["minimum_occurrences"] = minimum
        data["compromised"] = compromised
        click.echo(json.dumps(data, indent=2, default=str))
        return

    color = risk_color(result.risk_level)
    verdict = "[red]COMPROMISED[/red]" if compromised else "[green]ACCEPTABLE[/green]"

    if not result.is_pwned:
        console.print(Panel(
            f"[green]Good news![/green] This password has NOT been found in any known data breaches.\n\n"
            f"Risk Level: [{color}]{result.risk_level.value.upper()}[/{color}]",
            title="Password Check Result"
        ))
    else:
        console.print(Panel(
            f"[red]Warning![/red] This password has been seen [bold]{result.occurrences:,}[/bold] times in data breaches!\n\n"
            f"Risk Level: [{color}]{result.risk_level.value.upper()}[/{color}]\n"
            f"Verdict: {verdict} (minimum occurrences: {minimum})\n\n"
            f"{result.risk_description}",
            title="Password Check Result"
        ))


@pwned.command("passwords")
@click.argument("passwords_file", type=click.Path(exists=True))
@click.option("--hashes", is_flag=True, help="File contains SHA-1 hashes instead of passwords")
@click.option("--minimum", "-m", type=click.IntRange(min=0), help="Occurrences tolerated before failing")
@click.option("--output", "-o", type=click.Path(), help="Output file for results")
@click.pass_context
def check_passwords_batch(
    ctx: click.Context,
    passwords_file: str,
    hashes: bool,
    minimum: int | None,
    output: str | None,
) -> None:
    """Check multiple passwords/hashes from a file.

    File should contain one password or SHA-1 hash per line.

    Example:
        pwnguard pwned passwords passwords.txt
        pwnguard pwned passwords hashes.txt --hashes
    """
    items = Path(passwords_file).read_text().strip().split("\n")
    items = [i.strip() for i in items if i.strip()]

    if not items:
        console.print("[yellow]No items found in file[/yellow]")
        return

    minimum = get_minimum(ctx, minimum)
    console.print(f"Checking {len(items)} {'hashes' if hashes else 'passwords'}...")

    async def _check_batch():
        results: list[tuple[str, PasswordCheckResult]] = []
        async with PwnedPasswordsClient(get_config(ctx)) as client:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TextColumn("{task.completed}/{task.total}"),
                console=console,
            ) as progress:
                task = progress.add_task("Checking...", total=len(items))

                for item in items:
                    if hashes:
                        result = await client.check_password_hash(item)
                    else:
                        result = await client.check_password(item)
                    results.append((item if hashes else "***", result))
                    progress.advance(task)

        return results

    try:
        results = asyncio.run(_check_batch())
    except (PwnedError, ValueError) as e:
        fail(str(e))

    # Summary
    compromised = [r for _, r in results if r.exceeds(minimum)]
    console.print(
        f"\n[bold]Results:[/bold] {len(compromised)}/{len(results)} "
        f"seen more than {minimum} time(s)"
    )

    # Risk distribution
    risk_counts: dict[RiskLevel, int] = {}
    for _, r in results:
        risk_counts[r.risk_level] = risk_counts.get(r.risk_level, 0) + 1

    console.print("\n[bold]Risk Distribution:[/bold]")
    for risk in RiskLevel:
        count = risk_counts.get(risk, 0)
        color = risk_color(risk)
        console.print(f"  [{color}]{risk.value.upper()}[/{color}]: {count}")

    if output:
        output_data = [
            {
                "identifier": ident,
                "compromised": result.exceeds(minimum),
                "result": result.to_dict(),
            }
            for ident, result in results
        ]
        Path(output).write_text(json.dumps(output_data, indent=2, default=str))
        console.print(f"\n[green]Results saved to {output}[/green]")


# =============================================================================
# Range Queries
# =============================================================================

@pwned.command("range")
@click.argument("range_key")
@click.option("--top", "-n", type=click.IntRange(min=0), default=10, help="Number of entries to show")
@click.pass_context
def show_range(ctx: click.Context, range_key: str, top: int) -> None:
    """Show the candidates returned for a hash prefix.

    Example:
        pwnguard pwned range 21BD1
    """
    range_key = range_key.strip().upper()
    if len(range_key) != RANGE_SIZE or any(c not in "0123456789ABCDEF" for c in range_key):
        fail(f"Range key must be {RANGE_SIZE} hexadecimal characters")

    async def _get():
        async with PwnedPasswordsClient(get_config(ctx)) as client:
            return await client.get_range(range_key)

    try:
        table_data = asyncio.run(_get())
    except PwnedError as e:
        fail(str(e))

    console.print(f"\n[bold]Range {range_key}:[/bold] {len(table_data):,} candidates, "
                  f"{sum(table_data.values()):,} total occurrences")

    if not table_data or not top:
        return

    table = Table(title=f"Most Seen Suffixes in {range_key}")
    table.add_column("Suffix", style="cyan")
    table.add_column("Occurrences", justify="right")

    for suffix, count in sorted(table_data.items(), key=lambda kv: kv[1], reverse=True)[:top]:
        table.add_row(suffix, f"{count:,}")

    console.print(table)


# =============================================================================
# Configuration
# =============================================================================

@pwned.command("config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show the effective Pwned Passwords configuration."""
    config = get_config(ctx)

    table = Table(title="Pwned Passwords Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for name, value in config.to_dict().items():
        if name.endswith("_timeout") and not value:
            value = "[dim]disabled[/dim]"
        table.add_row(name, str(value))

    console.print(table)


def add_pwned_commands(main_cli):
    """Add Pwned Passwords commands to main CLI."""
    main_cli.add_command(pwned)
