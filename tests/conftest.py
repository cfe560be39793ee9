"""
Dust Janitor Test Configuration
===============================
Shared fixtures and pytest markers for the test suite.
"""

import os
import sys
import tempfile

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Keep per-run log files out of the working tree
os.environ.setdefault("DUST_JANITOR_LOG_DIR", tempfile.mkdtemp(prefix="dust_janitor_logs_"))


# ============================================================================
# PYTEST MARKERS
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "network: marks tests that require network access"
    )


# ============================================================================
# SHARED FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def silent_logger():
    """Mute console logging; file logging still runs."""
    from src.shared.system.logging import Logger

    Logger.set_silent(True)
    yield
    Logger.set_silent(False)


@pytest.fixture
def janitor_config():
    from src.modules.dust_janitor.config import JanitorConfig
    return JanitorConfig()


@pytest.fixture
def wallet_keypair():
    from solders.keypair import Keypair
    return Keypair()


@pytest.fixture
def credential(wallet_keypair):
    """VerifiedCredential for `wallet_keypair`."""
    from src.modules.dust_janitor.credentials import verify_identity
    return verify_identity(wallet_keypair, str(wallet_keypair.pubkey()))


@pytest.fixture
def builder(credential):
    from src.modules.dust_janitor.builder import TransactionBuilder
    return TransactionBuilder(credential)


@pytest.fixture
def make_holding():
    """Factory for classified holdings with unique addresses."""
    from solders.pubkey import Pubkey
    from src.modules.dust_janitor.models import Holding, TokenMetadata

    def _make(raw_balance=0, decimals=6, name=None, symbol=None, address=None, mint=None):
        metadata = TokenMetadata(name=name, symbol=symbol or "TKN") if name is not None else None
        return Holding.create(
            address=address or str(Pubkey.new_unique()),
            asset_id=mint or str(Pubkey.new_unique()),
            raw_balance=raw_balance,
            decimals=decimals,
            metadata=metadata,
        )

    return _make


@pytest.fixture
def scripted_input():
    """Input source replaying answers in order; records each prompt."""

    class ScriptedInput:
        def __init__(self):
            self.answers = []
            self.prompts = []

        def load(self, answers):
            self.answers = list(answers)
            return self

        def __call__(self, prompt: str) -> str:
            self.prompts.append(prompt)
            if not self.answers:
                raise AssertionError(f"Unexpected prompt: {prompt!r}")
            return self.answers.pop(0)

    return ScriptedInput()


@pytest.fixture
def quiet_console():
    """Rich console writing to a buffer."""
    import io
    from rich.console import Console
    return Console(file=io.StringIO(), width=120, color_system=None)
