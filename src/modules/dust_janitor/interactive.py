"""
Interactive Processor
=====================
One-holding-at-a-time cleaning driven by a small state machine.

    state     answer        action    next state
    ASK       y / yes       process   ASK
    ASK       a / all       process   AUTO_ALL
    ASK       q / quit      skip      SKIP_ALL
    ASK       anything else skip      ASK
    AUTO_ALL  (no prompt)   process   AUTO_ALL
    SKIP_ALL  (no prompt)   skip      SKIP_ALL

The input source and the output console are injected, so a scripted list of
answers can drive the loop without a terminal.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape

from src.modules.dust_janitor.builder import TransactionBuilder
from src.modules.dust_janitor.config import JanitorConfig
from src.modules.dust_janitor.display import render_holding_card
from src.modules.dust_janitor.models import Holding
from src.shared.system.logging import Logger


class PromptState(Enum):
    ASK = "ask"
    AUTO_ALL = "auto_all"
    SKIP_ALL = "skip_all"


YES_ANSWERS = ("y", "yes")
ALL_ANSWERS = ("a", "all")
QUIT_ANSWERS = ("q", "quit")


def transition(state: PromptState, answer: Optional[str] = None) -> Tuple[bool, PromptState]:
    """
    Returns:
        (process_current_holding, next_state)
    """
    if state is PromptState.AUTO_ALL:
        return True, PromptState.AUTO_ALL
    if state is PromptState.SKIP_ALL:
        return False, PromptState.SKIP_ALL

    normalized = (answer or "").strip().lower()
    if normalized in YES_ANSWERS:
        return True, PromptState.ASK
    if normalized in ALL_ANSWERS:
        return True, PromptState.AUTO_ALL
    if normalized in QUIT_ANSWERS:
        return False, PromptState.SKIP_ALL
    return False, PromptState.ASK


@dataclass
class HoldingFailure:
    holding: Holding
    error: str


@dataclass
class InteractiveReport:
    processed: List[Holding] = field(default_factory=list)
    skipped: List[Holding] = field(default_factory=list)
    failures: List[HoldingFailure] = field(default_factory=list)
    signatures: List[str] = field(default_factory=list)
    closed_count: int = 0
    recovered_lamports: int = 0

    def recovered_sol(self, config: Optional[JanitorConfig] = None) -> float:
        return (config or JanitorConfig()).lamports_to_sol(self.recovered_lamports)


class InteractiveProcessor:
    """
    Args:
        ledger: object with `async submit(instructions, signers) -> signature`
        builder: TransactionBuilder for the verified wallet
        input_source: called with the prompt text, returns the operator's answer
        console: Rich console used as the output sink
    """

    def __init__(
        self,
        ledger,
        builder: TransactionBuilder,
        input_source: Callable[[str], str],
        console: Optional[Console] = None,
        config: Optional[JanitorConfig] = None,
        burn_before_close: bool = False,
    ):
        self.ledger = ledger
        self.builder = builder
        self.input_source = input_source
        self.console = console or Console()
        self.config = config or JanitorConfig()
        self.burn_before_close = burn_before_close

    async def run(self, holdings: Sequence[Holding]) -> InteractiveReport:
        report = InteractiveReport()
        state = PromptState.ASK

        self.console.print("\n  [bold]🔄 Interactive Mode[/bold]\n")
        self.console.print("  [dim]Commands: \\[y]es, \\[n]o, \\[a]ll remaining, \\[q]uit[/dim]\n")

        for index, holding in enumerate(holdings, 1):
            self.console.print("  [dim]" + "─" * 58 + "[/dim]")
            render_holding_card(self.console, holding, index, len(holdings), self.config)

            answer = None
            if state is PromptState.ASK:
                answer = self.input_source(f"\n  {holding.action} this account? [y/n/a/q]: ")

            process, next_state = transition(state, answer)
            self._announce(state, next_state, process)
            state = next_state

            if process:
                report.processed.append(holding)
                await self._process_one(holding, report)
            else:
                report.skipped.append(holding)

            self.console.print()

        Logger.info(
            f"[INTERACTIVE] Done: {report.closed_count} closed, {len(report.skipped)} skipped, "
            f"{len(report.failures)} failed"
        )
        return report

    def _announce(self, state: PromptState, next_state: PromptState, process: bool) -> None:
        if state is PromptState.AUTO_ALL:
            self.console.print("  [green]→ Auto-processing (all mode)[/green]")
        elif state is PromptState.SKIP_ALL:
            return
        elif next_state is PromptState.AUTO_ALL:
            self.console.print("  [yellow]→ Processing all remaining accounts...[/yellow]")
        elif next_state is PromptState.SKIP_ALL:
            self.console.print("  [yellow]→ Skipping remaining accounts...[/yellow]")
        elif not process:
            self.console.print("  [dim]→ Skipped[/dim]")

    async def _process_one(self, holding: Holding, report: InteractiveReport) -> None:
        try:
            instructions = self.builder.build(holding, self.burn_before_close)
            signature = await self.ledger.submit(instructions, [self.builder.credential.keypair])
        except Exception as e:
            error = str(e) or type(e).__name__
            report.failures.append(HoldingFailure(holding, error))
            self.console.print(f"  [red]✗ Failed: {escape(error)}[/red]")
            Logger.error(f"[INTERACTIVE] {holding.address[:8]}... failed: {error}")
            return

        report.signatures.append(signature)
        report.closed_count += 1
        report.recovered_lamports += self.config.RENT_EXEMPT_LAMPORTS
        self.console.print(f"  [green]✓ Done![/green] [dim]TX: {signature[:20]}...[/dim]")
        Logger.debug(f"[INTERACTIVE] Closed {holding.address} in {signature}")
