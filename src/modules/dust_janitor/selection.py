"""
Selection filters and clean planning.

Dry runs and live runs share plan_clean(), so both see the same accounts in
the same order and the same batch boundaries.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from src.modules.dust_janitor.builder import partition
from src.modules.dust_janitor.config import JanitorConfig
from src.modules.dust_janitor.models import Holding


def _unique(holdings: Sequence[Holding]) -> List[Holding]:
    seen = set()
    result = []
    for holding in holdings:
        if holding.address not in seen:
            seen.add(holding.address)
            result.append(holding)
    return result


def select_for_display(holdings: Sequence[Holding], show_all: bool = False) -> List[Holding]:
    """All holdings, or dust (HIGH/MEDIUM) followed by closeable ones."""
    if show_all:
        return list(holdings)
    dust = [h for h in holdings if h.is_dust]
    closeable = [h for h in holdings if h.closeable]
    return _unique(dust + closeable)


def select_closeable(holdings: Sequence[Holding]) -> List[Holding]:
    return [h for h in holdings if h.closeable]


def select_burnable(holdings: Sequence[Holding]) -> List[Holding]:
    """Non-empty dust accounts: burned, then closed."""
    return [h for h in holdings if not h.closeable and h.is_dust]


def select_for_clean(holdings: Sequence[Holding], burn: bool = False) -> List[Holding]:
    return select_closeable(holdings) + (select_burnable(holdings) if burn else [])


@dataclass
class ScanSummary:
    total: int
    closeable: int
    with_balance: int
    dust: int
    recoverable_lamports: int

    @classmethod
    def from_holdings(cls, holdings: Sequence[Holding], config: JanitorConfig) -> "ScanSummary":
        closeable = select_closeable(holdings)
        return cls(
            total=len(holdings),
            closeable=len(closeable),
            with_balance=len(holdings) - len(closeable),
            dust=sum(1 for h in holdings if h.is_dust),
            recoverable_lamports=config.recoverable_lamports(len(closeable)),
        )


@dataclass
class CleanPlan:
    closeable: List[Holding]
    burnable: List[Holding]
    chunks: List[List[Holding]] = field(default_factory=list)
    recoverable_lamports: int = 0

    @property
    def to_process(self) -> List[Holding]:
        return self.closeable + self.burnable

    @property
    def is_empty(self) -> bool:
        return not self.closeable and not self.burnable

    @property
    def chunk_sizes(self) -> List[int]:
        return [len(chunk) for chunk in self.chunks]


def plan_clean(holdings: Sequence[Holding], burn: bool, config: JanitorConfig) -> CleanPlan:
    """
    Closeable accounts first, then (with `burn`) non-empty dust accounts.

    Zero-balance accounts with suspicious names stay in the closeable set:
    closing an empty account moves no tokens.
    """
    closeable = select_closeable(holdings)
    burnable = select_burnable(holdings) if burn else []
    to_process = select_for_clean(holdings, burn)
    return CleanPlan(
        closeable=closeable,
        burnable=burnable,
        chunks=partition(to_process, config.MAX_PER_TRANSACTION),
        recoverable_lamports=config.recoverable_lamports(len(to_process)),
    )
