"""CLI entry point — the `netset` command."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from net_set.core.config import ConfigError, load_settings
from net_set.core.engine import NetSetEngine
from net_set.core.log import setup_logging
from net_set.core.registry import UnknownProviderError
from net_set.core.report import format_report, render_report_table

console = Console()


def _run_async(coro: Any) -> Any:
    """Run an async coroutine from sync Click commands."""
    return asyncio.run(coro)


def _get_engine(ctx: click.Context, provider: str | None) -> NetSetEngine:
    engine: NetSetEngine = ctx.obj["engine"]
    if provider:
        message = engine.select_provider(provider)
        if message.startswith("Error"):
            console.print(f"[red]{escape(message)}[/red]")
            sys.exit(1)
    return engine


def _print_output(title: str, output: str) -> None:
    style = "red" if output.startswith("Error") else "blue"
    console.print(Panel(escape(output), title=f"[bold]{title}[/bold]", style=style))


provider_option = click.option(
    "--provider", "-p", help="DNS provider to use (Cloudflare, Quad9, Google)."
)


@click.group()
@click.version_option(package_name="net-set")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to a TOML config file.",
)
@click.option("--verbose", "-v", count=True, help="-v for info logging, -vv for debug.")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: int) -> None:
    """netset — configure DNS providers and verify network health."""
    setup_logging(verbose)
    try:
        settings = load_settings(config_path)
        engine = NetSetEngine(settings)
    except (ConfigError, UnknownProviderError) as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        sys.exit(1)
    ctx.obj = {"engine": engine}


@cli.command()
@click.pass_context
def providers(ctx: click.Context) -> None:
    """List the supported DNS providers."""
    engine: NetSetEngine = ctx.obj["engine"]
    selected = engine.selected_provider.name

    table = Table(title="DNS Providers")
    table.add_column("Provider", style="bold")
    table.add_column("IPv4")
    table.add_column("IPv6")
    table.add_column("Default", justify="center")

    for provider in engine.registry.all():
        table.add_row(
            provider.name,
            "\n".join(provider.ipv4),
            "\n".join(provider.ipv6),
            "[green]✓[/green]" if provider.name == selected else "",
        )
    console.print(table)


@cli.command()
@click.argument("name")
@click.pass_context
def select(ctx: click.Context, name: str) -> None:
    """Check that a provider exists and show what it would configure."""
    engine = _get_engine(ctx, name)
    provider = engine.selected_provider
    console.print(f"[green]Provider {provider.name} is valid[/green]")
    console.print(f"  Primary: {provider.primary_ipv4}")
    console.print(f"  Secondary: {provider.secondary_ipv4}")
    console.print("Use --provider or NETSET_PROVIDER to apply it to other commands.")


@cli.command()
@provider_option
@click.pass_context
def script(ctx: click.Context, provider: str | None) -> None:
    """Print the generated configuration script."""
    engine = _get_engine(ctx, provider)
    click.echo(engine.generate_script(), nl=False)


@cli.command()
@provider_option
@click.pass_context
def configure(ctx: click.Context, provider: str | None) -> None:
    """Apply the provider configuration (device commands + generated script)."""
    engine = _get_engine(ctx, provider)
    _print_output("Configuration", engine.run_configuration())


@cli.command()
@provider_option
@click.option("--diagnose", "then_diagnose", is_flag=True, help="Run diagnostics afterwards.")
@click.pass_context
def launch(ctx: click.Context, provider: str | None, then_diagnose: bool) -> None:
    """Run the once-per-session launch configuration."""
    engine = _get_engine(ctx, provider)

    async def _launch() -> tuple[str, Any]:
        output = await engine.launch()
        report = await engine.run_diagnostics() if then_diagnose else None
        return output, report

    output, report = _run_async(_launch())
    _print_output("Launch", output)
    if report is not None:
        console.print(render_report_table(report, engine.selected_provider.name))


@cli.command()
@provider_option
@click.option(
    "--format", "output_format", type=click.Choice(["rich", "json", "text"]), default="rich"
)
@click.pass_context
def diagnose(ctx: click.Context, provider: str | None, output_format: str) -> None:
    """Run the network diagnostics battery."""
    engine = _get_engine(ctx, provider)
    report = _run_async(engine.run_diagnostics())

    if output_format == "json":
        data = {"provider": engine.selected_provider.name, **report.model_dump(mode="json")}
        click.echo(json.dumps(data, indent=2))
    elif output_format == "text":
        click.echo(format_report(report))
    else:
        console.print(render_report_table(report, engine.selected_provider.name))


@cli.command()
@click.pass_context
def verify(ctx: click.Context) -> None:
    """Install and run the bundled verification script only."""
    engine: NetSetEngine = ctx.obj["engine"]
    installed = engine.install_scripts()
    if installed.startswith("Error"):
        _print_output("Verification", installed)
        sys.exit(1)
    _print_output("Verification", engine.run_verify_only())


if __name__ == "__main__":
    cli()
