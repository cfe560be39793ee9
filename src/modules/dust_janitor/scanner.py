"""
Account Scanner - Discovery Engine
==================================
Enumerates a wallet's SPL token accounts and classifies them.

Workflow:
1. List token accounts owned by the wallet (fatal on failure)
2. Resolve metadata for up to METADATA_BATCH_LIMIT mints in one call
3. Classify each account
4. Stable-sort by risk tier (HIGH, MEDIUM, LOW, UNKNOWN)
"""

from typing import Any, Dict, List, Optional

from spl.token.constants import TOKEN_PROGRAM_ID

from src.modules.dust_janitor.config import JanitorConfig
from src.modules.dust_janitor.errors import LedgerQueryFailure
from src.modules.dust_janitor.models import Holding
from src.modules.dust_janitor.risk import sort_by_risk
from src.shared.infrastructure.helius_metadata import LookupStatus, MetadataLookup
from src.shared.system.logging import Logger


def parse_token_account(entry: Dict[str, Any]) -> Dict[str, Any]:
    """
    Pull address/mint/amount/decimals out of one jsonParsed RPC entry.

    Raises:
        LedgerQueryFailure: entry is not a parsed SPL token account
    """
    try:
        info = entry["account"]["data"]["parsed"]["info"]
        token_amount = info["tokenAmount"]
        return {
            "address": str(entry["pubkey"]),
            "asset_id": str(info["mint"]),
            "raw_balance": int(token_amount["amount"]),
            "decimals": int(token_amount["decimals"]),
        }
    except (KeyError, TypeError, ValueError) as e:
        raise LedgerQueryFailure(f"Malformed token account entry: {e!r}") from e


class AccountScanner:
    """
    Scans one wallet per call. Holds no state between scans.

    Args:
        ledger: object with `async list_holdings(owner, program_id)`
        metadata: object with `async resolve(mints) -> MetadataLookup`
    """

    def __init__(self, ledger, metadata, config: Optional[JanitorConfig] = None):
        self.ledger = ledger
        self.metadata = metadata
        self.config = config or JanitorConfig()

    async def scan(self, owner: str) -> List[Holding]:
        Logger.info(f"[SCANNER] Scanning {owner[:8]}... for token accounts")

        raw_accounts = await self.ledger.list_holdings(owner, str(TOKEN_PROGRAM_ID))
        parsed = [parse_token_account(entry) for entry in raw_accounts]

        lookup = await self._resolve_metadata([p["asset_id"] for p in parsed])

        holdings = [
            Holding.create(metadata=lookup.get(p["asset_id"]), **p)
            for p in parsed
        ]

        Logger.info(f"[SCANNER] Classified {len(holdings)} token accounts")
        return sort_by_risk(holdings)

    async def _resolve_metadata(self, mints: List[str]) -> MetadataLookup:
        unique = list(dict.fromkeys(mints))
        limit = self.config.METADATA_BATCH_LIMIT
        if len(unique) > limit:
            Logger.debug(f"[METADATA] {len(unique) - limit} mints past the {limit}-mint limit left unresolved")
        batch = unique[:limit]

        lookup = await self.metadata.resolve(batch)

        if lookup.status is LookupStatus.FAILED:
            Logger.warning(f"[METADATA] Lookup failed, continuing without names: {lookup.detail}")
        elif lookup.status is LookupStatus.SKIPPED:
            Logger.info(f"[METADATA] Lookup skipped: {lookup.detail}")
        else:
            missing = len(batch) - len(lookup.entries)
            if missing:
                Logger.debug(f"[METADATA] No metadata for {missing} mints")

        return lookup
