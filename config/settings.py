import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Project root .env
DEFAULT_ENV_PATH = os.path.join(os.path.dirname(__file__), "../.env")

PUBLIC_RPC_URL = "https://api.mainnet-beta.solana.com"
HELIUS_RPC_TEMPLATE = "https://mainnet.helius-rpc.com/?api-key={api_key}"
HELIUS_METADATA_URL = "https://api.helius.xyz/v0/token-metadata"


@dataclass(frozen=True)
class Settings:
    """
    Connection settings, built once at process start and passed to the
    ledger and metadata clients.

    endpoint: Solana JSON-RPC URL
    api_key: Helius API key ("" when unset; metadata lookup is then skipped)
    """

    endpoint: str
    api_key: str = ""
    metadata_url: str = HELIUS_METADATA_URL
    commitment: str = "confirmed"

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls, env_path: Optional[str] = None) -> "Settings":
        """
        Load settings from environment (and .env if present).

        HELIUS_RPC_URL wins; otherwise the Helius RPC is derived from
        HELIUS_API_KEY, falling back to the public mainnet endpoint.
        """
        load_dotenv(env_path or DEFAULT_ENV_PATH)

        api_key = os.getenv("HELIUS_API_KEY", "").strip()
        endpoint = os.getenv("HELIUS_RPC_URL", "").strip()
        if not endpoint:
            endpoint = HELIUS_RPC_TEMPLATE.format(api_key=api_key) if api_key else PUBLIC_RPC_URL

        return cls(
            endpoint=endpoint,
            api_key=api_key,
            metadata_url=os.getenv("HELIUS_METADATA_URL", HELIUS_METADATA_URL).strip(),
            commitment=os.getenv("DUST_COMMITMENT", "confirmed").strip() or "confirmed",
        )

    def redact(self, text: str) -> str:
        """Mask the API key anywhere in `text` (URLs in error messages included)."""
        if self.api_key:
            return text.replace(self.api_key, self.api_key[:4] + "...")
        return text

    def redacted_endpoint(self) -> str:
        """Endpoint with the API key masked, safe for logs."""
        return self.redact(self.endpoint)
