"""
Dust Janitor Data Model
=======================
Immutable scan-time snapshots of token accounts.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from src.modules.dust_janitor.risk import RiskLevel, classify, normalize_balance

UNKNOWN_NAME = "Unknown Token"
UNKNOWN_SYMBOL = "???"


@dataclass(frozen=True)
class TokenMetadata:
    """Best-effort token identity from the metadata service."""
    name: str
    symbol: str
    logo_uri: Optional[str] = None

    @classmethod
    def clean(cls, name: Optional[str], symbol: Optional[str], logo_uri: Optional[str] = None) -> "TokenMetadata":
        """Strip on-chain NUL padding and surrounding whitespace."""
        name = (name or UNKNOWN_NAME).replace("\x00", "").strip()
        symbol = (symbol or UNKNOWN_SYMBOL).replace("\x00", "").strip()
        return cls(name=name, symbol=symbol, logo_uri=logo_uri or None)


@dataclass(frozen=True)
class Holding:
    """
    One SPL token account owned by the scanned wallet.

    `risk_level`/`risk_reason` are set from `classify()` in `create()`; the
    snapshot is never updated after the scan.
    """
    address: str
    asset_id: str
    raw_balance: int
    decimals: int
    risk_level: RiskLevel
    risk_reason: str
    metadata: Optional[TokenMetadata] = None

    def __post_init__(self):
        if self.raw_balance < 0:
            raise ValueError(f"raw_balance must be non-negative, got {self.raw_balance}")
        if self.decimals < 0:
            raise ValueError(f"decimals must be non-negative, got {self.decimals}")

    @classmethod
    def create(
        cls,
        address: str,
        asset_id: str,
        raw_balance: int,
        decimals: int,
        metadata: Optional[TokenMetadata] = None,
    ) -> "Holding":
        risk = classify(raw_balance, decimals, metadata)
        return cls(
            address=address,
            asset_id=asset_id,
            raw_balance=raw_balance,
            decimals=decimals,
            risk_level=risk.level,
            risk_reason=risk.reason,
            metadata=metadata,
        )

    @property
    def closeable(self) -> bool:
        return self.raw_balance == 0

    @property
    def ui_balance(self) -> Decimal:
        return normalize_balance(self.raw_balance, self.decimals)

    @property
    def is_dust(self) -> bool:
        return self.risk_level in (RiskLevel.HIGH, RiskLevel.MEDIUM)

    @property
    def action(self) -> str:
        return "Close" if self.closeable else "Burn & Close"

    @property
    def display_name(self) -> str:
        return self.metadata.name if self.metadata else UNKNOWN_NAME

    @property
    def display_symbol(self) -> str:
        return self.metadata.symbol if self.metadata else UNKNOWN_SYMBOL
