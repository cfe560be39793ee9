"""
Dust Janitor Test Mocks
=======================
Reusable fake collaborators for isolated testing.
"""

from tests.mocks.mock_rpc import MockLedgerClient, MockMetadataResolver, token_account_entry

__all__ = [
    "MockLedgerClient",
    "MockMetadataResolver",
    "token_account_entry",
]
