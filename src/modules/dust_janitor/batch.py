"""
Batch Processor
===============
Closes holdings in fixed-size chunks, one transaction per chunk.

- Chunks are submitted strictly one after another
- A failed chunk is recorded and the next chunk is still attempted
- Totals only count chunks that confirmed
- No automatic retries
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from src.modules.dust_janitor.builder import TransactionBuilder, partition
from src.modules.dust_janitor.config import JanitorConfig
from src.modules.dust_janitor.models import Holding
from src.shared.system.logging import Logger


@dataclass
class ChunkOutcome:
    """Result of one batch transaction."""
    index: int
    size: int
    addresses: List[str]
    signature: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None and self.signature is not None


@dataclass
class BatchReport:
    closed_count: int = 0
    recovered_lamports: int = 0
    outcomes: List[ChunkOutcome] = field(default_factory=list)

    @property
    def succeeded_chunks(self) -> List[ChunkOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed_chunks(self) -> List[ChunkOutcome]:
        return [o for o in self.outcomes if not o.success]

    def recovered_sol(self, config: Optional[JanitorConfig] = None) -> float:
        return (config or JanitorConfig()).lamports_to_sol(self.recovered_lamports)


class BatchProcessor:
    """
    Args:
        ledger: object with `async submit(instructions, signers) -> signature`
        builder: TransactionBuilder for the verified wallet
        burn_before_close: burn non-empty balances before closing
    """

    def __init__(
        self,
        ledger,
        builder: TransactionBuilder,
        config: Optional[JanitorConfig] = None,
        burn_before_close: bool = False,
    ):
        self.ledger = ledger
        self.builder = builder
        self.config = config or JanitorConfig()
        self.burn_before_close = burn_before_close

    async def run(self, holdings: Sequence[Holding]) -> BatchReport:
        chunks = partition(holdings, self.config.MAX_PER_TRANSACTION)
        report = BatchReport()

        Logger.section(f"Processing {len(holdings)} accounts in {len(chunks)} batches")

        for index, chunk in enumerate(chunks, 1):
            outcome = await self._process_chunk(index, len(chunks), chunk)
            report.outcomes.append(outcome)

            if outcome.success:
                report.closed_count += outcome.size
                report.recovered_lamports += outcome.size * self.config.RENT_EXEMPT_LAMPORTS

        Logger.info(
            f"[BATCH] Done: {report.closed_count}/{len(holdings)} closed, "
            f"{len(report.failed_chunks)} failed batches, "
            f"~{report.recovered_sol(self.config):.6f} SOL recovered"
        )
        return report

    async def _process_chunk(self, index: int, total: int, chunk: List[Holding]) -> ChunkOutcome:
        outcome = ChunkOutcome(index=index, size=len(chunk), addresses=[h.address for h in chunk])
        Logger.info(f"[BATCH] Batch {index}/{total}: processing {len(chunk)} accounts...")

        try:
            instructions = self.builder.build_many(chunk, self.burn_before_close)
            outcome.signature = await self.ledger.submit(instructions, [self.builder.credential.keypair])
        except Exception as e:
            outcome.error = str(e) or type(e).__name__
            Logger.error(f"[BATCH] Batch {index}/{total} failed: {outcome.error}")
            return outcome

        Logger.success(f"[BATCH] Closed {len(chunk)} accounts. TX: {outcome.signature[:20]}...")
        return outcome
