"""
CLI entry point for Agent Treasury.
"""

import asyncio
from pathlib import Path
from typing import List, Optional

import structlog
import typer
from dotenv import load_dotenv

from .collector import ClawnchFeeCollector
from .config import Settings, TreasuryConfig
from .errors import ConfigError
from .evm import EVMClient, EVMConfig
from .treasury import TreasuryManager

# Configure structlog
structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ]
)

app = typer.Typer(
    name="agent-treasury",
    help="Agent Treasury Manager - autonomous treasury management for AI agents",
    add_completion=False,
)

ConfigOption = typer.Option(None, "--config", "-c", help="Path to .env configuration file")


def _load_settings(config_path: Optional[Path]) -> Settings:
    return Settings(_env_file=config_path) if config_path else Settings()


def _load_treasury(config_path: Optional[Path]) -> TreasuryManager:
    config = TreasuryConfig.from_settings(_load_settings(config_path))
    try:
        config.require_wallets()
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    return TreasuryManager(config)


@app.command()
def collect(
    tokens: Optional[List[str]] = typer.Option(
        None,
        "--tokens",
        "-t",
        help="Token address to claim fees for (repeatable)",
    ),
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """
    Collect fees from the Clawnch FeeLocker.
    """
    settings = _load_settings(config_path)
    if not settings.base_private_key:
        typer.echo("Error: BASE_PRIVATE_KEY not found in environment", err=True)
        raise typer.Exit(1)

    async def _collect() -> None:
        client = EVMClient(EVMConfig(rpc_url=settings.base_rpc_url, private_key=settings.base_private_key))
        collector = ClawnchFeeCollector(client)

        typer.echo("Checking available fees...\n")
        result = await collector.collect_all_fees(tokens or [])

        typer.echo("\nCollection complete!")
        if result.weth_claimed:
            typer.echo(f"  WETH claimed: {result.weth_amount}")
        if result.tokens_claimed:
            typer.echo(f"  Tokens claimed: {len(result.tokens_claimed)}")

    try:
        asyncio.run(_collect())
    except Exception as e:
        typer.echo(f"Error collecting fees: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def balance(config_path: Optional[Path] = ConfigOption) -> None:
    """
    Check treasury balances across chains.
    """
    treasury = _load_treasury(config_path)

    typer.echo("Fetching balances...\n")
    try:
        balances = asyncio.run(treasury.get_all_balances())
    except Exception as e:
        typer.echo(f"Error fetching balances: {e}", err=True)
        raise typer.Exit(1)

    typer.echo("Treasury Balances:")
    typer.echo(treasury.format_balances(balances))


@app.command()
def runway(
    burn: float = typer.Option(..., "--burn", "-b", help="Monthly burn rate in USD"),
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """
    Calculate operational runway.
    """
    treasury = _load_treasury(config_path)

    typer.echo("Calculating runway...\n")
    try:
        status = asyncio.run(treasury.get_status(burn))
    except Exception as e:
        typer.echo(f"Error calculating runway: {e}", err=True)
        raise typer.Exit(1)

    typer.echo("Treasury Status:")
    typer.echo(treasury.format_balances(status.balances))
    typer.echo("\nRunway Metrics:")
    typer.echo(treasury.format_runway(status.runway))

    if status.alerts:
        typer.echo("\nAlerts:")
        for alert in status.alerts:
            typer.echo(alert)


@app.command()
def status(
    burn: float = typer.Option(0.0, "--burn", "-b", help="Monthly burn rate in USD (optional)"),
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """
    Get comprehensive treasury status.
    """
    treasury = _load_treasury(config_path)

    typer.echo("Agent Treasury Manager\n")
    typer.echo("═" * 50)

    try:
        result = asyncio.run(treasury.get_status(burn))
    except Exception as e:
        typer.echo(f"Error getting status: {e}", err=True)
        raise typer.Exit(1)

    typer.echo("\nBalances:")
    typer.echo(treasury.format_balances(result.balances))

    if burn > 0:
        typer.echo("\nRunway:")
        typer.echo(treasury.format_runway(result.runway))

    if result.alerts:
        typer.echo("\nAlerts:")
        for alert in result.alerts:
            typer.echo(alert)

    typer.echo("\n" + "═" * 50)


@app.command()
def version() -> None:
    """Show the version."""
    from agent_treasury import __version__
    typer.echo(f"agent-treasury v{__version__}")


def main() -> None:
    """Main entry point."""
    load_dotenv()
    app()


if __name__ == "__main__":
    main()
