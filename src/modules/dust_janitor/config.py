"""
Dust Janitor Configuration
==========================
Economic constants and batching limits for token account reclamation.
"""

from dataclasses import dataclass


@dataclass
class JanitorConfig:
    """Configuration for dust scan and rent reclamation operations."""

    # Economics
    RENT_EXEMPT_LAMPORTS: int = 2_039_280  # Rent-exempt reserve of one SPL token account
    LAMPORTS_PER_SOL: int = 1_000_000_000
    SOL_PRICE_USD_ESTIMATE: float = 200.0  # Display-only estimate

    # Batching
    MAX_PER_TRANSACTION: int = 5  # Accounts per batch transaction
    METADATA_BATCH_LIMIT: int = 100  # Max mints per metadata request

    # Network
    HTTP_TIMEOUT_S: float = 10.0

    def lamports_to_sol(self, lamports: int) -> float:
        return lamports / self.LAMPORTS_PER_SOL

    def recoverable_lamports(self, account_count: int) -> int:
        """Reserve refunded when closing `account_count` accounts."""
        return account_count * self.RENT_EXEMPT_LAMPORTS
