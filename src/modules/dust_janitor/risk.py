"""
Risk Classifier
===============
Deterministic risk scoring for a single token account.

Rules are evaluated in order and the first match wins:
1. Spam vocabulary in name/symbol      -> HIGH   (even at zero balance)
2. 0 < balance < 0.0001                -> HIGH   (tracking dust)
3. balance == 0                        -> LOW    (safe to close)
4. balance < 1                         -> MEDIUM (review)
5. anything else                       -> UNKNOWN
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Iterable, List, Optional, TypeVar

if TYPE_CHECKING:
    from src.modules.dust_janitor.models import TokenMetadata


class RiskLevel(Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    UNKNOWN = "UNKNOWN"


SPAM_INDICATORS = (
    "airdrop", "free", "claim", "reward", "bonus", "gift",
    "winner", "congratulation", "lucky", "prize",
)

MICRO_BALANCE_THRESHOLD = Decimal("0.0001")

REASON_SUSPICIOUS_NAME = "Suspicious name (potential scam/airdrop)"
REASON_MICRO_BALANCE = "Micro balance (likely tracking dust)"
REASON_EMPTY = "Empty account - safe to close"
REASON_SMALL_BALANCE = "Small balance - review before closing"
REASON_UNCLASSIFIED = "Unable to classify"

RISK_PRIORITY = {
    RiskLevel.HIGH: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.LOW: 2,
    RiskLevel.UNKNOWN: 3,
}


@dataclass(frozen=True)
class RiskAssessment:
    level: RiskLevel
    reason: str


def normalize_balance(raw_balance: int, decimals: int) -> Decimal:
    """Atomic units scaled by 10**decimals, exact."""
    return Decimal(raw_balance).scaleb(-decimals)


def has_spam_name(metadata: Optional["TokenMetadata"]) -> bool:
    if metadata is None:
        return False
    name = (metadata.name or "").lower()
    symbol = (metadata.symbol or "").lower()
    return any(word in name or word in symbol for word in SPAM_INDICATORS)


def classify(raw_balance: int, decimals: int, metadata: Optional["TokenMetadata"] = None) -> RiskAssessment:
    """
    Classify one token account.

    Pure and total: the result depends only on the arguments and every
    input yields an assessment.
    """
    if has_spam_name(metadata):
        return RiskAssessment(RiskLevel.HIGH, REASON_SUSPICIOUS_NAME)

    balance = normalize_balance(raw_balance, decimals)
    if 0 < balance < MICRO_BALANCE_THRESHOLD:
        return RiskAssessment(RiskLevel.HIGH, REASON_MICRO_BALANCE)

    if raw_balance == 0:
        return RiskAssessment(RiskLevel.LOW, REASON_EMPTY)

    if balance < 1:
        return RiskAssessment(RiskLevel.MEDIUM, REASON_SMALL_BALANCE)

    return RiskAssessment(RiskLevel.UNKNOWN, REASON_UNCLASSIFIED)


def risk_priority(level: RiskLevel) -> int:
    """Sort key for risk tiers: HIGH first, UNKNOWN last."""
    return RISK_PRIORITY[level]


T = TypeVar("T")


def sort_by_risk(items: Iterable[T]) -> List[T]:
    """
    Order items (anything with a `risk_level`) by risk tier.

    sorted() is stable, so items in the same tier keep their input order.
    """
    return sorted(items, key=lambda item: risk_priority(item.risk_level))
