"""
Dust Janitor Module
===================
Token account rent reclamation for Solana wallets.

Scans a wallet's SPL token accounts, classifies each by risk, and closes
empty accounts (optionally burning small or suspicious balances first) to
recover their rent-exempt reserve.

Components:
- risk.py: deterministic risk classifier and tier ordering
- scanner.py: token account discovery + metadata + classification
- builder.py: burn/close instruction building and batch partitioning
- credentials.py: keypair loading and identity gate
- batch.py / interactive.py: transaction processors
- janitor.py: scan/clean orchestration
- cli.py: command-line interface
"""

from src.modules.dust_janitor.config import JanitorConfig

__all__ = [
    'JanitorConfig',
]
