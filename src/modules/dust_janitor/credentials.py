"""
Keypair loading and identity verification.

A VerifiedCredential is only produced by verify_identity(), and the
TransactionBuilder only accepts a VerifiedCredential, so nothing can be built
or signed for a wallet the keypair does not control.
"""

import json
import os
from dataclasses import dataclass
from typing import Optional

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from src.modules.dust_janitor.errors import (
    AuthorizationMismatch,
    InvalidKeypairFormat,
    KeypairFileNotFound,
)
from src.shared.system.logging import Logger

SECRET_KEY_LENGTH = 64


@dataclass(frozen=True)
class VerifiedCredential:
    keypair: Keypair

    @property
    def pubkey(self) -> Pubkey:
        return self.keypair.pubkey()

    @property
    def address(self) -> str:
        return str(self.keypair.pubkey())


def resolve_keypair_path(path: str) -> str:
    return os.path.abspath(os.path.expanduser(path))


def _from_json_array(content: str) -> Optional[Keypair]:
    try:
        values = json.loads(content)
    except ValueError:
        return None
    if not isinstance(values, list) or len(values) != SECRET_KEY_LENGTH:
        return None
    try:
        return Keypair.from_bytes(bytes(values))
    except (ValueError, TypeError):
        return None


def _from_base58(content: str) -> Optional[Keypair]:
    try:
        raw = base58.b58decode(content)
    except ValueError:
        return None
    if len(raw) != SECRET_KEY_LENGTH:
        return None
    try:
        return Keypair.from_bytes(raw)
    except ValueError:
        return None


def load_keypair(path: str) -> Keypair:
    """
    Load a secret key file.

    Formats, tried in order:
    1. JSON array of 64 secret-key bytes (Solana CLI id.json)
    2. base58 encoded secret key string (wallet export)

    Raises:
        KeypairFileNotFound: path does not exist
        InvalidKeypairFormat: neither format decodes to a valid keypair
    """
    resolved = resolve_keypair_path(path)
    if not os.path.isfile(resolved):
        raise KeypairFileNotFound(resolved)

    with open(resolved, "r", encoding="utf-8") as f:
        content = f.read().strip()

    keypair = _from_json_array(content) or _from_base58(content)
    if keypair is None:
        raise InvalidKeypairFormat(resolved)

    Logger.debug(f"[KEYPAIR] Loaded keypair {str(keypair.pubkey())[:8]}... from {resolved}")
    return keypair


def verify_identity(keypair: Keypair, expected_address: str) -> VerifiedCredential:
    """
    Raises:
        AuthorizationMismatch: keypair public key != expected_address
    """
    actual = str(keypair.pubkey())
    if actual != expected_address.strip():
        raise AuthorizationMismatch(actual, expected_address)
    Logger.info(f"[KEYPAIR] Keypair verified for {actual[:8]}...")
    return VerifiedCredential(keypair)
