"""
Helius Token Metadata Client
============================
Best-effort name/symbol lookup for a batch of mints.

The lookup never raises. Its outcome is reported as a MetadataLookup:
- RESOLVED: request succeeded (ids missing from the response are not errors)
- SKIPPED:  no request was made (no API key, or nothing to look up)
- FAILED:   request errored (HTTP status, network, malformed body)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

import httpx

from config.settings import Settings
from src.modules.dust_janitor.models import TokenMetadata
from src.shared.system.logging import Logger

MAX_MINTS_PER_REQUEST = 100


class LookupStatus(Enum):
    RESOLVED = "resolved"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class MetadataLookup:
    status: LookupStatus
    entries: Dict[str, TokenMetadata] = field(default_factory=dict)
    detail: str = ""

    def get(self, mint: str) -> Optional[TokenMetadata]:
        return self.entries.get(mint)

    @classmethod
    def skipped(cls, detail: str) -> "MetadataLookup":
        return cls(LookupStatus.SKIPPED, detail=detail)

    @classmethod
    def failed(cls, detail: str) -> "MetadataLookup":
        return cls(LookupStatus.FAILED, detail=detail)


def parse_metadata_item(item: Dict[str, Any]) -> Optional[TokenMetadata]:
    """
    Extract name/symbol/logo from one token-metadata response item.

    On-chain Metaplex data wins over the legacy token list.
    """
    on_chain = ((item.get("onChainMetadata") or {}).get("metadata") or {}).get("data") or {}
    legacy = item.get("legacyMetadata") or {}

    if not item.get("account"):
        return None

    return TokenMetadata.clean(
        name=on_chain.get("name") or legacy.get("name"),
        symbol=on_chain.get("symbol") or legacy.get("symbol"),
        logo_uri=legacy.get("logoURI"),
    )


class HeliusMetadataClient:
    """
    Resolves token metadata through the Helius token-metadata API.

    Usage:
        client = HeliusMetadataClient(settings)
        lookup = await client.resolve(["EPjF...", "DezX..."])
        meta = lookup.get("EPjF...")
    """

    def __init__(
        self,
        settings: Settings,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings
        self.timeout = timeout
        self._http_client = http_client

    async def resolve(self, mints: Sequence[str]) -> MetadataLookup:
        if not mints:
            return MetadataLookup.skipped("no mints to resolve")
        if not self.settings.has_api_key:
            return MetadataLookup.skipped("HELIUS_API_KEY not set")

        batch: List[str] = list(mints)[:MAX_MINTS_PER_REQUEST]

        try:
            data = await self._post(batch)
        except (httpx.HTTPError, ValueError) as e:
            if isinstance(e, httpx.HTTPStatusError):
                detail = f"HTTP {e.response.status_code}"
            else:
                detail = self.settings.redact(f"{type(e).__name__}: {e}")
            return MetadataLookup.failed(detail)

        if not isinstance(data, list):
            return MetadataLookup.failed("unexpected response body")

        entries: Dict[str, TokenMetadata] = {}
        for item in data:
            if not isinstance(item, dict):
                continue
            meta = parse_metadata_item(item)
            if meta is not None:
                entries[item["account"]] = meta

        Logger.debug(f"[METADATA] Resolved {len(entries)}/{len(batch)} mints")
        return MetadataLookup(LookupStatus.RESOLVED, entries=entries)

    async def _post(self, batch: List[str]) -> Any:
        url = self.settings.metadata_url
        params = {"api-key": self.settings.api_key}
        payload = {"mintAccounts": batch}

        if self._http_client is not None:
            response = await self._http_client.post(url, params=params, json=payload, timeout=self.timeout)
        else:
            async with httpx.AsyncClient() as client:
                response = await client.post(url, params=params, json=payload, timeout=self.timeout)

        response.raise_for_status()
        return response.json()
