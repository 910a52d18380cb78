"""Command-line interface for requeue."""

import asyncio
import sys
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from requeue import __version__
from requeue.core.config import setup_logging
from requeue.core.exceptions import ConfigurationError, ScenarioError, ValidationError
from requeue.parsers import parse_scenario, validate_scenario
from requeue.runner import ScenarioRunner

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="requeue")
@click.option("--log-level", default=None, help="Log level (defaults to REQUEUE_LOG_LEVEL)")
def cli(log_level: Optional[str]) -> None:
    """requeue - Single-flight refresh and retry for failed requests."""
    setup_logging(log_level)


@cli.command()
@click.argument("scenario_path", type=click.Path(exists=True))
def run(scenario_path: str) -> None:
    """Run a failure scenario from YAML definition.

    Example:
        requeue run scenarios/token_expiry.yaml
    """
    try:
        console.print(f"[cyan]Loading scenario: {scenario_path}[/cyan]")
        config = parse_scenario(scenario_path)

        console.print(
            f"[green]Scenario loaded: {config.name} v{config.version}[/green]\n"
        )

        runner = ScenarioRunner(config, console=console)
        run_result = asyncio.run(runner.run())

        if run_result.status.value == "completed":
            sys.exit(0)
        elif run_result.status.value == "partial":
            console.print("[yellow]Warning: Scenario completed with some failures[/yellow]")
            sys.exit(0)
        else:
            console.print(f"[red]Scenario failed: {escape(str(run_result.error_message))}[/red]")
            sys.exit(1)

    except (ConfigurationError, ValidationError) as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        sys.exit(1)
    except ScenarioError as e:
        console.print(f"[red]Scenario error: {escape(str(e))}[/red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Unexpected error: {escape(str(e))}[/red]")
        sys.exit(1)


@cli.command()
@click.argument("scenario_path", type=click.Path(exists=True))
def validate(scenario_path: str) -> None:
    """Validate a scenario YAML definition.

    Example:
        requeue validate scenarios/token_expiry.yaml
    """
    console.print(f"[cyan]Validating scenario: {scenario_path}[/cyan]")

    if not validate_scenario(scenario_path):
        console.print("[red]✗ Scenario is invalid[/red]")
        sys.exit(1)

    config = parse_scenario(scenario_path)
    console.print("[green]✓ Scenario is valid[/green]")
    console.print(f"  Name: {config.name}")
    console.print(f"  Version: {config.version}")
    console.print(f"  Tag: {config.tag}")
    console.print(f"  Requests: {config.requests} (+{config.late_requests} late)")
    console.print(f"  Refresh Outcome: {config.refresh_outcome.value}")
    sys.exit(0)


@cli.command()
def version() -> None:
    """Show requeue version."""
    console.print(f"requeue version {__version__}")


if __name__ == "__main__":
    cli()
