"""
Dust Janitor - Run Orchestration
================================
Wires scanner, planner, credential gate and processors for the two
commands.

Clean flow:
1. Load keypair and verify it controls the wallet (fatal on mismatch),
   unless this is a dry run
2. Scan + classify (LedgerQueryFailure is fatal)
3. Plan (closeable first, then burnable dust) and partition
4. Dry run stops here: zero submissions; no keypair means KeypairRequired
5. Interactive processor, or confirmation + batch processor
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Union

from rich.console import Console

from src.modules.dust_janitor.batch import BatchProcessor, BatchReport
from src.modules.dust_janitor.builder import TransactionBuilder
from src.modules.dust_janitor.config import JanitorConfig
from src.modules.dust_janitor.credentials import load_keypair, verify_identity
from src.modules.dust_janitor.errors import KeypairRequired
from src.modules.dust_janitor.interactive import InteractiveProcessor, InteractiveReport
from src.modules.dust_janitor.models import Holding
from src.modules.dust_janitor.scanner import AccountScanner
from src.modules.dust_janitor.selection import CleanPlan, ScanSummary, plan_clean, select_for_display
from src.shared.system.logging import Logger


@dataclass
class ScanResult:
    owner: str
    holdings: List[Holding]
    shown: List[Holding]
    summary: ScanSummary


async def run_scan(owner: str, scanner: AccountScanner, show_all: bool = False,
                   config: Optional[JanitorConfig] = None) -> ScanResult:
    config = config or JanitorConfig()
    holdings = await scanner.scan(owner)
    return ScanResult(
        owner=owner,
        holdings=holdings,
        shown=select_for_display(holdings, show_all),
        summary=ScanSummary.from_holdings(holdings, config),
    )


class CleanStatus(Enum):
    NOTHING_TO_DO = "nothing_to_do"
    DRY_RUN = "dry_run"
    ABORTED = "aborted"
    COMPLETED = "completed"


@dataclass
class CleanOptions:
    keypair_path: Optional[str] = None
    assume_yes: bool = False
    interactive: bool = False
    dry_run: bool = False
    burn: bool = False


@dataclass
class CleanResult:
    status: CleanStatus
    plan: CleanPlan
    report: Optional[Union[BatchReport, InteractiveReport]] = None


async def run_clean(
    owner: str,
    options: CleanOptions,
    scanner: AccountScanner,
    ledger,
    config: Optional[JanitorConfig] = None,
    confirm: Optional[Callable[[str], bool]] = None,
    input_source: Optional[Callable[[str], str]] = None,
    console: Optional[Console] = None,
    on_plan: Optional[Callable[[CleanPlan], None]] = None,
) -> CleanResult:
    """
    Args:
        confirm: asked once before a batch run unless `assume_yes`
        input_source: answers for interactive mode
        on_plan: called with the plan before anything is signed (display hook)
    """
    config = config or JanitorConfig()
    Logger.section("Dust Clean")

    # Keypair errors surface before any ledger query
    credential = None
    if options.keypair_path and not options.dry_run:
        credential = verify_identity(load_keypair(options.keypair_path), owner)

    holdings = await scanner.scan(owner)
    plan = plan_clean(holdings, options.burn, config)

    if plan.is_empty:
        Logger.success("[CLEAN] No dust tokens to clean")
        return CleanResult(CleanStatus.NOTHING_TO_DO, plan)

    if on_plan is not None:
        on_plan(plan)

    if options.dry_run:
        Logger.info(f"[CLEAN] Dry run: {len(plan.to_process)} accounts in {len(plan.chunks)} transactions")
        return CleanResult(CleanStatus.DRY_RUN, plan)

    if credential is None:
        raise KeypairRequired("Keypair required. Use --keypair <path>")

    builder = TransactionBuilder(credential)

    if options.interactive:
        if input_source is None:
            raise ValueError("interactive mode needs an input source")
        processor = InteractiveProcessor(
            ledger,
            builder,
            input_source=input_source,
            console=console,
            config=config,
            burn_before_close=options.burn,
        )
        report = await processor.run(plan.to_process)
        return CleanResult(CleanStatus.COMPLETED, plan, report)

    if not options.assume_yes:
        question = f"This will process {len(plan.to_process)} token accounts. Proceed with all?"
        if confirm is None or not confirm(question):
            Logger.warning("[CLEAN] Aborted by operator")
            return CleanResult(CleanStatus.ABORTED, plan)

    processor = BatchProcessor(ledger, builder, config=config, burn_before_close=options.burn)
    report = await processor.run(plan.to_process)
    return CleanResult(CleanStatus.COMPLETED, plan, report)
