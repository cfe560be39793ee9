"""
Dust Janitor Errors
===================
Fatal errors abort the run (CLI exits non-zero). Item-scoped errors
(SubmissionFailure, UnburnedBalanceError) are caught by the processors and
folded into the run report.
"""


class DustJanitorError(Exception):
    """Base class for fatal janitor errors."""


class LedgerQueryFailure(DustJanitorError):
    """Token account listing failed; no partial results are produced."""


class KeypairRequired(DustJanitorError):
    """A live clean was requested without --keypair."""


class KeypairFileNotFound(DustJanitorError):
    def __init__(self, path: str):
        super().__init__(f"Keypair file not found: {path}")
        self.path = path


class InvalidKeypairFormat(DustJanitorError):
    def __init__(self, path: str = ""):
        super().__init__("Invalid keypair format. Expected JSON array or base58 string.")
        self.path = path


class AuthorizationMismatch(DustJanitorError):
    def __init__(self, keypair_address: str, expected_address: str):
        super().__init__("Keypair public key does not match wallet address")
        self.keypair_address = keypair_address
        self.expected_address = expected_address


class SubmissionFailure(Exception):
    """A transaction could not be sent or did not confirm."""


class UnburnedBalanceError(ValueError):
    """A non-empty account cannot be closed unless its balance is burned first."""

    def __init__(self, address: str, raw_balance: int):
        super().__init__(f"Account {address} holds {raw_balance} atomic units; enable burn to close it")
        self.address = address
        self.raw_balance = raw_balance
