"""
Keypair Loading Unit Tests
==========================
File formats and the identity gate.
"""

import json

import base58
import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from src.modules.dust_janitor.credentials import VerifiedCredential, load_keypair, verify_identity
from src.modules.dust_janitor.errors import (
    AuthorizationMismatch,
    InvalidKeypairFormat,
    KeypairFileNotFound,
)


class TestLoadKeypair:

    def test_json_array(self, tmp_path, wallet_keypair):
        path = tmp_path / "id.json"
        path.write_text(json.dumps(list(bytes(wallet_keypair))))

        loaded = load_keypair(str(path))
        assert loaded.pubkey() == wallet_keypair.pubkey()

    def test_base58_string(self, tmp_path, wallet_keypair):
        path = tmp_path / "key.txt"
        path.write_text(base58.b58encode(bytes(wallet_keypair)).decode() + "\n")

        loaded = load_keypair(str(path))
        assert loaded.pubkey() == wallet_keypair.pubkey()

    def test_home_expansion(self, tmp_path, monkeypatch, wallet_keypair):
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "id.json").write_text(json.dumps(list(bytes(wallet_keypair))))

        assert load_keypair("~/id.json").pubkey() == wallet_keypair.pubkey()

    def test_missing_file(self, tmp_path):
        with pytest.raises(KeypairFileNotFound):
            load_keypair(str(tmp_path / "nope.json"))

    @pytest.mark.parametrize("content", [
        "not a key",
        "[1, 2, 3]",
        json.dumps(list(range(64)) + [1]),
        '{"secret": "abc"}',
        "3vQB7B6MrGQZaxCuFg4oh",
    ])
    def test_invalid_format(self, tmp_path, content):
        path = tmp_path / "bad.json"
        path.write_text(content)
        with pytest.raises(InvalidKeypairFormat):
            load_keypair(str(path))


class TestVerifyIdentity:

    def test_matching_address(self, wallet_keypair):
        credential = verify_identity(wallet_keypair, str(wallet_keypair.pubkey()))
        assert isinstance(credential, VerifiedCredential)
        assert credential.address == str(wallet_keypair.pubkey())

    def test_mismatch_raises(self, wallet_keypair):
        other = str(Pubkey.new_unique())
        with pytest.raises(AuthorizationMismatch) as exc_info:
            verify_identity(wallet_keypair, other)

        assert exc_info.value.keypair_address == str(wallet_keypair.pubkey())
        assert exc_info.value.expected_address == other

    def test_different_keypair_mismatch(self, wallet_keypair):
        with pytest.raises(AuthorizationMismatch):
            verify_identity(Keypair(), str(wallet_keypair.pubkey()))
