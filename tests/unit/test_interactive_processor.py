"""
InteractiveProcessor Unit Tests
===============================
State machine transitions and scripted prompt sessions.
"""

import pytest

from src.modules.dust_janitor.interactive import InteractiveProcessor, PromptState, transition
from tests.mocks import MockLedgerClient


class TestTransition:

    @pytest.mark.parametrize("answer", ["y", "yes", "Y", " YES "])
    def test_yes_processes_and_keeps_asking(self, answer):
        assert transition(PromptState.ASK, answer) == (True, PromptState.ASK)

    @pytest.mark.parametrize("answer", ["a", "all", "ALL"])
    def test_all_switches_to_auto(self, answer):
        assert transition(PromptState.ASK, answer) == (True, PromptState.AUTO_ALL)

    @pytest.mark.parametrize("answer", ["q", "quit"])
    def test_quit_skips_everything(self, answer):
        assert transition(PromptState.ASK, answer) == (False, PromptState.SKIP_ALL)

    @pytest.mark.parametrize("answer", ["n", "no", "", "maybe"])
    def test_other_answers_skip_one(self, answer):
        assert transition(PromptState.ASK, answer) == (False, PromptState.ASK)

    def test_terminal_modes_ignore_answers(self):
        assert transition(PromptState.AUTO_ALL, "q") == (True, PromptState.AUTO_ALL)
        assert transition(PromptState.SKIP_ALL, "y") == (False, PromptState.SKIP_ALL)


class TestInteractiveProcessor:

    def _processor(self, ledger, builder, scripted_input, quiet_console, answers, burn=False):
        return InteractiveProcessor(
            ledger,
            builder,
            input_source=scripted_input.load(answers),
            console=quiet_console,
            burn_before_close=burn,
        )

    @pytest.mark.asyncio
    async def test_no_yes_all_sequence(self, builder, make_holding, scripted_input, quiet_console):
        holdings = [make_holding(raw_balance=0) for _ in range(4)]
        ledger = MockLedgerClient()

        report = await self._processor(ledger, builder, scripted_input, quiet_console, ["n", "y", "a"]).run(holdings)

        assert report.processed == holdings[1:]
        assert report.skipped == holdings[:1]
        # 4th holding never prompted
        assert len(scripted_input.prompts) == 3
        # One transaction per processed holding
        assert ledger.submission_count == 3
        assert all(len(ixs) == 1 for ixs, _ in ledger.submissions)
        assert report.closed_count == 3

    @pytest.mark.asyncio
    async def test_yes_quit_sequence(self, builder, make_holding, scripted_input, quiet_console):
        holdings = [make_holding(raw_balance=0) for _ in range(4)]
        ledger = MockLedgerClient()

        report = await self._processor(ledger, builder, scripted_input, quiet_console, ["y", "q"]).run(holdings)

        assert report.processed == holdings[:1]
        assert report.skipped == holdings[1:]
        assert len(scripted_input.prompts) == 2
        assert ledger.submission_count == 1

    @pytest.mark.asyncio
    async def test_failure_does_not_change_state(self, builder, make_holding, scripted_input, quiet_console):
        holdings = [make_holding(raw_balance=0) for _ in range(3)]
        ledger = MockLedgerClient(fail_on=[1])

        report = await self._processor(ledger, builder, scripted_input, quiet_console, ["y", "y", "y"]).run(holdings)

        assert len(report.processed) == 3
        assert [f.holding for f in report.failures] == holdings[:1]
        assert report.closed_count == 2
        assert report.recovered_lamports == 2 * 2_039_280
        assert len(scripted_input.prompts) == 3

    @pytest.mark.asyncio
    async def test_burn_prompt_and_instructions(self, builder, make_holding, scripted_input, quiet_console):
        holding = make_holding(raw_balance=900, name="Reward Token")
        ledger = MockLedgerClient()

        await self._processor(ledger, builder, scripted_input, quiet_console, ["yes"], burn=True).run([holding])

        assert "Burn & Close" in scripted_input.prompts[0]
        instructions, _ = ledger.submissions[0]
        assert len(instructions) == 2

    @pytest.mark.asyncio
    async def test_output_goes_to_console(self, builder, make_holding, scripted_input, quiet_console):
        holding = make_holding(raw_balance=0, name="Lucky Coin", symbol="LUCK")
        await self._processor(MockLedgerClient(), builder, scripted_input, quiet_console, ["n"]).run([holding])

        output = quiet_console.file.getvalue()
        assert "Lucky Coin" in output
        assert "Skipped" in output
        assert "Commands: [y]es, [n]o, [a]ll remaining, [q]uit" in output
        assert scripted_input.prompts[0].endswith("[y/n/a/q]: ")

    @pytest.mark.asyncio
    async def test_markup_in_token_name_is_literal(self, builder, make_holding, scripted_input, quiet_console):
        holding = make_holding(raw_balance=0, name="[/] Free Airdrop", symbol="[bold]CLAIM")
        ledger = MockLedgerClient(fail_on=[1])

        report = await self._processor(ledger, builder, scripted_input, quiet_console, ["y"]).run([holding])

        output = quiet_console.file.getvalue()
        assert "[/] Free Airdrop" in output
        assert "[bold]CLAIM" in output
        assert len(report.failures) == 1
