"""
BatchProcessor Unit Tests
=========================
Chunked submission with per-chunk failure isolation.
"""

import pytest

from src.modules.dust_janitor.batch import BatchProcessor
from src.modules.dust_janitor.config import JanitorConfig
from tests.mocks import MockLedgerClient

RENT = JanitorConfig.RENT_EXEMPT_LAMPORTS


class TestBatchProcessor:

    @pytest.mark.asyncio
    async def test_all_chunks_succeed(self, builder, make_holding, wallet_keypair):
        holdings = [make_holding(raw_balance=0) for _ in range(13)]
        ledger = MockLedgerClient()

        report = await BatchProcessor(ledger, builder).run(holdings)

        assert ledger.submission_count == 3
        assert [len(ixs) for ixs, _ in ledger.submissions] == [5, 5, 3]
        assert all(signers == [wallet_keypair] for _, signers in ledger.submissions)
        assert report.closed_count == 13
        assert report.recovered_lamports == 13 * RENT
        assert report.failed_chunks == []

    @pytest.mark.asyncio
    async def test_middle_chunk_failure_is_isolated(self, builder, make_holding):
        holdings = [make_holding(raw_balance=0) for _ in range(13)]
        ledger = MockLedgerClient(fail_on=[2])

        report = await BatchProcessor(ledger, builder).run(holdings)

        # Chunk 3 is still attempted
        assert ledger.submission_count == 3
        assert report.closed_count == 5 + 3
        assert report.recovered_lamports == 8 * RENT
        assert [o.success for o in report.outcomes] == [True, False, True]
        assert "rejected" in report.failed_chunks[0].error
        assert report.failed_chunks[0].addresses == [h.address for h in holdings[5:10]]

    @pytest.mark.asyncio
    async def test_burn_instructions_in_batch(self, builder, make_holding):
        holdings = [make_holding(raw_balance=0), make_holding(raw_balance=7)]
        ledger = MockLedgerClient()

        report = await BatchProcessor(ledger, builder, burn_before_close=True).run(holdings)

        instructions, _ = ledger.submissions[0]
        assert len(instructions) == 3
        assert report.closed_count == 2

    @pytest.mark.asyncio
    async def test_build_failure_recorded_without_submission(self, builder, make_holding):
        holdings = [make_holding(raw_balance=7)] + [make_holding(raw_balance=0) for _ in range(5)]
        ledger = MockLedgerClient()

        report = await BatchProcessor(ledger, builder, burn_before_close=False).run(holdings)

        # First chunk cannot be built, second chunk still goes out
        assert ledger.submission_count == 1
        assert [o.success for o in report.outcomes] == [False, True]
        assert report.closed_count == 1

    @pytest.mark.asyncio
    async def test_custom_chunk_size(self, builder, make_holding):
        holdings = [make_holding(raw_balance=0) for _ in range(4)]
        ledger = MockLedgerClient()

        await BatchProcessor(ledger, builder, config=JanitorConfig(MAX_PER_TRANSACTION=2)).run(holdings)

        assert ledger.submission_count == 2

    @pytest.mark.asyncio
    async def test_empty_input(self, builder):
        ledger = MockLedgerClient()
        report = await BatchProcessor(ledger, builder).run([])
        assert ledger.submission_count == 0
        assert report.closed_count == 0
