"""
Transaction Builder
===================
Turns holdings into SPL Token instruction sequences.

Per holding (all-or-nothing, never a partial burn):
    raw_balance == 0                  -> [CloseAccount]
    raw_balance > 0, burn requested   -> [Burn(raw_balance), CloseAccount]
    raw_balance > 0, no burn          -> UnburnedBalanceError

CloseAccount refunds the rent reserve to the credential's own address, which
is also the closing authority.
"""

import math
from typing import List, Sequence, TypeVar

from solders.instruction import Instruction
from solders.pubkey import Pubkey
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import BurnParams, CloseAccountParams, burn, close_account

from src.modules.dust_janitor.credentials import VerifiedCredential
from src.modules.dust_janitor.errors import UnburnedBalanceError
from src.modules.dust_janitor.models import Holding

DEFAULT_MAX_PER_TRANSACTION = 5

T = TypeVar("T")


def partition(items: Sequence[T], max_per_transaction: int = DEFAULT_MAX_PER_TRANSACTION) -> List[List[T]]:
    """
    Split items into ceil(N / max) ordered chunks; only the last may be short.

    Chunking bounds transaction size and compute, it does not affect what
    gets closed.
    """
    if max_per_transaction < 1:
        raise ValueError(f"max_per_transaction must be >= 1, got {max_per_transaction}")

    items = list(items)
    chunk_count = math.ceil(len(items) / max_per_transaction)
    return [
        items[i * max_per_transaction:(i + 1) * max_per_transaction]
        for i in range(chunk_count)
    ]


class TransactionBuilder:
    """Builds instructions signed by a verified credential."""

    def __init__(self, credential: VerifiedCredential):
        if not isinstance(credential, VerifiedCredential):
            raise TypeError("TransactionBuilder requires a VerifiedCredential")
        self.credential = credential

    @property
    def authority(self) -> Pubkey:
        return self.credential.pubkey

    def build(self, holding: Holding, burn_before_close: bool) -> List[Instruction]:
        account = Pubkey.from_string(holding.address)
        instructions: List[Instruction] = []

        if holding.raw_balance > 0:
            if not burn_before_close:
                raise UnburnedBalanceError(holding.address, holding.raw_balance)
            instructions.append(
                burn(
                    BurnParams(
                        program_id=TOKEN_PROGRAM_ID,
                        account=account,
                        mint=Pubkey.from_string(holding.asset_id),
                        owner=self.authority,
                        amount=holding.raw_balance,
                        signers=[],
                    )
                )
            )

        instructions.append(
            close_account(
                CloseAccountParams(
                    program_id=TOKEN_PROGRAM_ID,
                    account=account,
                    dest=self.authority,
                    owner=self.authority,
                    signers=[],
                )
            )
        )
        return instructions

    def build_many(self, holdings: Sequence[Holding], burn_before_close: bool) -> List[Instruction]:
        """Concatenated instructions for one batch transaction."""
        instructions: List[Instruction] = []
        for holding in holdings:
            instructions.extend(self.build(holding, burn_before_close))
        return instructions
