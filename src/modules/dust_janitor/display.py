"""
Rich rendering for scan reports, clean plans and run summaries.
"""

from decimal import Decimal
from typing import Sequence, Union

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from src.modules.dust_janitor.config import JanitorConfig
from src.modules.dust_janitor.models import Holding
from src.modules.dust_janitor.risk import RiskLevel

RISK_STYLES = {
    RiskLevel.HIGH: "red",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.LOW: "green",
    RiskLevel.UNKNOWN: "bright_black",
}

RISK_EMOJI = {
    RiskLevel.HIGH: "🔴",
    RiskLevel.MEDIUM: "🟡",
    RiskLevel.LOW: "🟢",
    RiskLevel.UNKNOWN: "⚪",
}


def _trim(text: str, min_decimals: int) -> str:
    """Drop trailing zeros but keep at least `min_decimals` fraction digits."""
    whole, _, frac = text.partition(".")
    frac = frac.rstrip("0").ljust(min_decimals, "0")
    return f"{whole}.{frac}" if frac else whole


def format_number(value: Union[float, Decimal], decimals: int = 6) -> str:
    """
    0           -> "0"
    < 0.000001  -> scientific ("1.00e-09")
    < 1         -> 2..`decimals` fraction digits
    >= 1        -> thousands separators, 2..4 fraction digits
    """
    value = float(value)
    if value == 0:
        return "0"
    if 0 < value < 0.000001:
        return f"{value:.2e}"
    if value < 1:
        return _trim(f"{value:.{decimals}f}", 2)
    return _trim(f"{value:,.4f}", 2)


def render_holding_card(console: Console, holding: Holding, index: int, total: int, config: JanitorConfig) -> None:
    style = RISK_STYLES[holding.risk_level]
    balance = "[green]0[/green]" if holding.closeable else f"[yellow]{format_number(holding.ui_balance)}[/yellow]"
    recoverable = format_number(config.lamports_to_sol(config.RENT_EXEMPT_LAMPORTS), 5)

    console.print(f"  [bold]{index}/{total}:[/bold] {RISK_EMOJI[holding.risk_level]} {escape(holding.display_name)}")
    console.print(f"  [dim]Symbol:[/dim] [cyan]{escape(holding.display_symbol)}[/cyan]")
    console.print(f"  [dim]Balance:[/dim] {balance}")
    console.print(f"  [dim]Risk:[/dim] [{style}]{holding.risk_level.value}[/{style}] [dim]- {holding.risk_reason}[/dim]")
    console.print(f"  [dim]Mint:[/dim] [cyan]{escape(holding.asset_id)}[/cyan]")
    console.print(f"  [dim]Action:[/dim] {holding.action}")
    console.print(f"  [dim]Recoverable:[/dim] [green]~{recoverable} SOL[/green]")


def render_scan_report(console: Console, result, config: JanitorConfig) -> None:
    """`result` is a janitor.ScanResult."""
    summary = result.summary
    lines = [
        f"[dim]Wallet:[/dim] [cyan]{result.owner}[/cyan]",
        f"[dim]Total token accounts:[/dim] {summary.total}",
        f"[dim]Empty (closeable):[/dim] [green]{summary.closeable}[/green]",
        f"[dim]With balance:[/dim] [yellow]{summary.with_balance}[/yellow]",
        f"[dim]Potential dust/trackers:[/dim] [red]{summary.dust}[/red]",
    ]
    if summary.closeable:
        sol = config.lamports_to_sol(summary.recoverable_lamports)
        usd = sol * config.SOL_PRICE_USD_ESTIMATE
        lines.append(f"[dim]Recoverable SOL:[/dim] [green]~{format_number(sol)} SOL (${format_number(usd, 2)})[/green]")

    console.print()
    console.print(Panel.fit("\n".join(lines), title="» Dust Scan Results", border_style="cyan"))

    if result.shown:
        console.print(holdings_table(result.shown, title="Token Accounts"))

    if summary.closeable or summary.dust:
        console.print(
            f"\n  [yellow]› Run 'dust-janitor clean {result.owner} -i' for interactive cleaning[/yellow]\n"
        )
    else:
        console.print("\n  [green]✓ Your wallet is clean![/green]\n")


def holdings_table(holdings: Sequence[Holding], title: str) -> Table:
    table = Table(title=title, title_justify="left", header_style="bold", expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("", no_wrap=True)
    table.add_column("Token", max_width=30)
    table.add_column("Symbol", style="dim")
    table.add_column("Balance", justify="right")
    table.add_column("Risk")
    table.add_column("Mint", style="cyan", no_wrap=True)

    for i, h in enumerate(holdings, 1):
        style = RISK_STYLES[h.risk_level]
        balance = "[green]0 (closeable)[/green]" if h.closeable else f"[yellow]{format_number(h.ui_balance)}[/yellow]"
        table.add_row(
            str(i),
            RISK_EMOJI[h.risk_level],
            escape(h.display_name[:30]),
            escape(h.display_symbol),
            balance,
            f"[{style}]{h.risk_level.value}[/{style}] [dim]{h.risk_reason}[/dim]",
            escape(h.asset_id[:32]) + "...",
        )
    return table


def render_clean_summary(console: Console, plan, config: JanitorConfig) -> None:
    """`plan` is a selection.CleanPlan."""
    lines = [f"[dim]Empty accounts to close:[/dim] [green]{len(plan.closeable)}[/green]"]
    if plan.burnable:
        lines.append(f"[dim]Dust tokens to burn+close:[/dim] [yellow]{len(plan.burnable)}[/yellow]")
    sol = config.lamports_to_sol(plan.recoverable_lamports)
    lines.append(f"[dim]Total SOL recoverable:[/dim] [green]~{format_number(sol)} SOL[/green]")
    lines.append(f"[dim]Transactions:[/dim] {len(plan.chunks)} (max {config.MAX_PER_TRANSACTION} accounts each)")
    console.print()
    console.print(Panel.fit("\n".join(lines), title="» Dust Clean Summary", border_style="cyan"))


def render_dry_run(console: Console, plan) -> None:
    console.print("\n  [yellow][DRY RUN] No transactions will be sent.[/yellow]\n")
    console.print("  [bold]Accounts that would be processed:[/bold]\n")
    position = 0
    for batch_no, chunk in enumerate(plan.chunks, 1):
        console.print(f"  [dim]Batch {batch_no}/{len(plan.chunks)}[/dim]")
        for holding in chunk:
            position += 1
            color = "green" if holding.closeable else "yellow"
            console.print(
                f"  [dim]{position}.[/dim] [{color}]{holding.action.upper()}[/{color}] {escape(holding.display_name[:25])} "
                f"[dim]({escape(holding.asset_id[:12])}...)[/dim]"
            )
    console.print()


def render_run_summary(console: Console, label: str, closed: int, recovered_lamports: int, config: JanitorConfig) -> None:
    sol = config.lamports_to_sol(recovered_lamports)
    console.print("\n  [bold]» Summary[/bold]\n")
    console.print(f"  [dim]{label}:[/dim] [green]{closed}[/green]")
    console.print(f"  [dim]SOL recovered:[/dim] [green]~{format_number(sol)} SOL[/green]\n")
