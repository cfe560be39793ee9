"""
Dust Janitor CLI
================
Typer + Rich command surface.

    dust-janitor scan <WALLET> [--show-all]
    dust-janitor clean <WALLET> -k ~/.config/solana/id.json [-y] [-i] [--dry-run] [--burn]

Exit status is 1 on fatal errors (ledger query, keypair, identity mismatch)
and 0 otherwise.
"""

import asyncio
import sys
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from solders.pubkey import Pubkey

from config.settings import Settings
from src.modules.dust_janitor.config import JanitorConfig
from src.modules.dust_janitor.display import (
    render_clean_summary,
    render_dry_run,
    render_run_summary,
    render_scan_report,
)
from src.modules.dust_janitor.errors import AuthorizationMismatch, DustJanitorError, KeypairRequired
from src.modules.dust_janitor.interactive import InteractiveReport
from src.modules.dust_janitor.janitor import CleanOptions, CleanStatus, run_clean, run_scan
from src.modules.dust_janitor.scanner import AccountScanner
from src.shared.infrastructure.helius_metadata import HeliusMetadataClient
from src.shared.infrastructure.solana_ledger import SolanaLedgerClient
from src.shared.system.logging import Logger

app = typer.Typer(
    name="dust",
    help="Dust token management: scan a wallet and reclaim rent from token accounts.",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


@app.callback()
def main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show log lines on the console"),
):
    Logger.set_silent(not verbose)


def _validate_wallet(wallet: str) -> str:
    try:
        Pubkey.from_string(wallet)
    except ValueError:
        console.print(f"\n  [bold red]✗ Error:[/bold red] Invalid wallet address: {escape(wallet)}\n")
        raise typer.Exit(1)
    return wallet


def _fail(error: Exception) -> None:
    console.print(f"\n  [bold red]✗ Error:[/bold red] {escape(str(error))}\n")
    if isinstance(error, AuthorizationMismatch):
        console.print(f"  [dim]Keypair:[/dim] {error.keypair_address}")
        console.print(f"  [dim]Wallet:[/dim]  {error.expected_address}\n")
    Logger.error(f"[CLEAN] {type(error).__name__}: {error}")
    raise typer.Exit(1)


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND: SCAN
# ═══════════════════════════════════════════════════════════════════════════════

@app.command()
def scan(
    wallet: str = typer.Argument(..., help="Wallet address to scan"),
    show_all: bool = typer.Option(False, "--show-all", help="Show all tokens, not just dust"),
):
    """
    Scan wallet for dust tokens.

    \b
    Examples:
        dust-janitor scan <WALLET>
        dust-janitor scan <WALLET> --show-all
    """
    wallet = _validate_wallet(wallet)
    settings = Settings.from_env()
    config = JanitorConfig()

    async def _scan():
        async with SolanaLedgerClient(settings, timeout=config.HTTP_TIMEOUT_S) as ledger:
            metadata = HeliusMetadataClient(settings, timeout=config.HTTP_TIMEOUT_S)
            scanner = AccountScanner(ledger, metadata, config)
            return await run_scan(wallet, scanner, show_all=show_all, config=config)

    try:
        with console.status("Scanning wallet for dust tokens..."):
            result = asyncio.run(_scan())
    except DustJanitorError as e:
        _fail(e)

    render_scan_report(console, result, config)


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND: CLEAN
# ═══════════════════════════════════════════════════════════════════════════════

@app.command()
def clean(
    wallet: str = typer.Argument(..., help="Wallet address to clean"),
    keypair: Optional[str] = typer.Option(None, "--keypair", "-k", help="Path to keypair file (JSON or base58)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt (close all)"),
    interactive: bool = typer.Option(False, "--interactive", "-i", help="Interactive mode - confirm each token"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be done without executing"),
    burn: bool = typer.Option(False, "--burn", help="Burn tokens with small balances before closing"),
):
    """
    Close empty token accounts and recover SOL.

    [bold red]⚠️  Burning is irreversible.[/bold red]

    \b
    Examples:
        dust-janitor clean <WALLET> --dry-run
        dust-janitor clean <WALLET> -k ~/.config/solana/id.json -i
        dust-janitor clean <WALLET> -k ~/.config/solana/id.json --burn -y
    """
    wallet = _validate_wallet(wallet)
    settings = Settings.from_env()
    config = JanitorConfig()
    options = CleanOptions(
        keypair_path=keypair,
        assume_yes=yes,
        interactive=interactive,
        dry_run=dry_run,
        burn=burn,
    )

    def _on_plan(plan):
        render_clean_summary(console, plan, config)
        if options.dry_run:
            render_dry_run(console, plan)

    async def _clean():
        async with SolanaLedgerClient(settings, timeout=config.HTTP_TIMEOUT_S) as ledger:
            metadata = HeliusMetadataClient(settings, timeout=config.HTTP_TIMEOUT_S)
            scanner = AccountScanner(ledger, metadata, config)
            return await run_clean(
                wallet,
                options,
                scanner,
                ledger,
                config=config,
                confirm=lambda question: typer.confirm(f"\n  {question}", default=False),
                input_source=lambda prompt: console.input(prompt, markup=False),
                console=console,
                on_plan=_on_plan,
            )

    try:
        result = asyncio.run(_clean())
    except DustJanitorError as e:
        if isinstance(e, KeypairRequired):
            console.print(f"  [dim]Example: dust-janitor clean {wallet} --keypair ~/.config/solana/id.json[/dim]")
        _fail(e)

    if result.status is CleanStatus.NOTHING_TO_DO:
        console.print("\n  [green]✓ No dust tokens to clean.[/green]\n")
    elif result.status is CleanStatus.ABORTED:
        console.print("\n  [yellow]Aborted.[/yellow]\n")
    elif result.status is CleanStatus.COMPLETED:
        label = "Accounts processed" if isinstance(result.report, InteractiveReport) else "Accounts closed"
        render_run_summary(console, label, result.report.closed_count, result.report.recovered_lamports, config)


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════════

def main():
    """Entry point for CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        sys.exit(0)


if __name__ == "__main__":
    main()
