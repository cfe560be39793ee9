"""
Solana Ledger Client
====================
Opaque transport for the janitor: list token accounts, submit transactions.

- list_holdings(): raw `getTokenAccountsByOwner` (jsonParsed) over httpx
- submit(): compile a v0 message with a fresh blockhash, sign, send with
  preflight, then wait for `confirmed` (or the configured commitment)

Calls are awaited one at a time by the caller; this client never fans out.
"""

from typing import Any, Dict, List, Optional, Sequence

import httpx
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solana.rpc.types import TxOpts
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.transaction import VersionedTransaction
from spl.token.constants import TOKEN_PROGRAM_ID

from config.settings import Settings
from src.modules.dust_janitor.errors import LedgerQueryFailure, SubmissionFailure
from src.shared.system.logging import Logger


def _describe(error: Exception) -> str:
    """Error text without the request URL."""
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP {error.response.status_code}"
    return str(error) or type(error).__name__


class SolanaLedgerClient:
    """
    Thin async wrapper around the Solana JSON-RPC.

    Usage:
        async with SolanaLedgerClient(settings) as ledger:
            raw = await ledger.list_holdings(owner)
            sig = await ledger.submit([ix1, ix2], [keypair])
    """

    def __init__(
        self,
        settings: Settings,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings
        self.timeout = timeout
        self.commitment = Commitment(settings.commitment)
        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None
        self._rpc = AsyncClient(settings.endpoint, commitment=self.commitment)

    async def __aenter__(self) -> "SolanaLedgerClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._rpc.close()
        if self._owns_http:
            await self._http.aclose()

    # =========================================================================
    # QUERIES
    # =========================================================================

    async def list_holdings(self, owner: str, program_id: str = str(TOKEN_PROGRAM_ID)) -> List[Dict[str, Any]]:
        """
        All token accounts of `owner` under `program_id`, in RPC order.

        Raises:
            LedgerQueryFailure: transport error, HTTP error or RPC error object
        """
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "getTokenAccountsByOwner",
            "params": [
                owner,
                {"programId": program_id},
                {"encoding": "jsonParsed", "commitment": self.settings.commitment},
            ],
        }

        try:
            response = await self._http.post(self.settings.endpoint, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise LedgerQueryFailure(
                f"getTokenAccountsByOwner failed at {self.settings.redacted_endpoint()}: "
                f"{self.settings.redact(_describe(e))}"
            ) from e

        if "error" in data:
            error = data["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise LedgerQueryFailure(f"getTokenAccountsByOwner failed: {message}")

        result = data.get("result") or {}
        value = result.get("value")
        if not isinstance(value, list):
            raise LedgerQueryFailure("getTokenAccountsByOwner returned no account list")

        Logger.debug(f"[LEDGER] {owner[:8]}... owns {len(value)} token accounts")
        return value

    # =========================================================================
    # SUBMISSION
    # =========================================================================

    async def submit(self, instructions: Sequence[Instruction], signers: Sequence[Keypair]) -> str:
        """
        Sign, send and confirm one transaction. The first signer pays fees.

        Returns:
            Transaction signature (base58)

        Raises:
            SubmissionFailure: any send/confirm error, including timeouts
        """
        if not signers:
            raise SubmissionFailure("at least one signer is required")

        try:
            latest = (await self._rpc.get_latest_blockhash(commitment=self.commitment)).value

            msg = MessageV0.try_compile(
                payer=signers[0].pubkey(),
                instructions=list(instructions),
                address_lookup_table_accounts=[],
                recent_blockhash=latest.blockhash,
            )
            tx = VersionedTransaction(msg, list(signers))

            sig = (
                await self._rpc.send_transaction(
                    tx, opts=TxOpts(skip_preflight=False, preflight_commitment=self.commitment)
                )
            ).value
            Logger.debug(f"[LEDGER] Sent {sig}, waiting for confirmation")

            statuses = (
                await self._rpc.confirm_transaction(
                    sig,
                    commitment=self.commitment,
                    last_valid_block_height=latest.last_valid_block_height,
                )
            ).value
        except SubmissionFailure:
            raise
        except Exception as e:
            raise SubmissionFailure(self.settings.redact(str(e) or type(e).__name__)) from e

        status = statuses[0] if statuses else None
        if status is None:
            raise SubmissionFailure(f"no confirmation status for {sig}")
        if status.err is not None:
            raise SubmissionFailure(f"transaction {sig} failed: {status.err}")

        return str(sig)
