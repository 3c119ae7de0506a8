"""Tests for EvaluationScheduler.

Covers the debounce contract:
- First evaluation runs immediately on mount
- A burst of edits inside the quiet period produces one evaluation of the last pair
- Cancel and run_now
- Errors settle with a message and an empty result
"""

import asyncio
from datetime import date
import json

import pytest

from playground.query.scheduler import (
    EMPTY_RESULT_JSON,
    EvaluationScheduler,
    SchedulerState,
)


@pytest.fixture
def settlements():
    return []


@pytest.fixture
def scheduler(fake_engine, fake_loop, settlements):
    return EvaluationScheduler(
        fake_engine,
        on_settle=settlements.append,
        quiet_period=0.6,
        loop=fake_loop,
    )


class TestMount:
    """Tests for the immediate first evaluation."""

    def test_mount_evaluates_without_waiting(self, scheduler, settlements, query_text, records_text, fake_loop):
        settlement = scheduler.mount(query_text, records_text)

        assert settlement.ok
        assert settlements == [settlement]
        assert fake_loop.pending == []
        assert scheduler.state == SchedulerState.SETTLED_OK

    def test_initial_state_is_idle(self, scheduler):
        assert scheduler.state == SchedulerState.IDLE
        assert scheduler.last_settlement is None
        assert not scheduler.has_pending

    def test_run_now_without_documents_returns_none(self, scheduler, settlements):
        assert scheduler.run_now() is None
        assert settlements == []


class TestDebounce:
    """Tests for quiet period handling."""

    def test_edit_schedules_instead_of_evaluating(self, scheduler, settlements, query_text, records_text):
        scheduler.on_edit(query_text, records_text)

        assert settlements == []
        assert scheduler.has_pending
        assert scheduler.state == SchedulerState.SCHEDULED

    def test_evaluates_after_quiet_period(self, scheduler, settlements, fake_loop, query_text, records_text):
        scheduler.on_edit(query_text, records_text)
        fake_loop.advance(0.59)
        assert settlements == []

        fake_loop.advance(0.02)
        assert len(settlements) == 1
        assert not scheduler.has_pending

    def test_burst_of_edits_evaluates_last_pair_once(
        self, scheduler, settlements, fake_engine, fake_loop, records_text
    ):
        """Edits at t=0, 0.2, 0.4 then silence -> one evaluation at t=1.0."""
        texts = [
            json.dumps({"credentials": [{"id": f"q{i}", "format": "mso_mdoc"}]})
            for i in range(3)
        ]
        for text in texts:
            scheduler.on_edit(text, records_text)
            fake_loop.advance(0.2)

        assert settlements == []
        fake_loop.advance(0.4)

        assert len(settlements) == 1
        assert settlements[0].query_text == texts[-1]
        assert len(fake_engine.evaluations) == 1
        assert list(settlements[0].result.credential_matches) == ["q2"]

    def test_superseded_timers_are_cancelled(self, scheduler, fake_loop, query_text, records_text):
        scheduler.on_edit(query_text, records_text)
        scheduler.on_edit(query_text, records_text)

        assert len(fake_loop.pending) == 1

    def test_zero_quiet_period_evaluates_synchronously(self, fake_engine, settlements, query_text, records_text):
        scheduler = EvaluationScheduler(fake_engine, on_settle=settlements.append, quiet_period=0)

        settlement = scheduler.on_edit(query_text, records_text)

        assert settlement is not None
        assert settlements == [settlement]

    def test_uses_running_event_loop_by_default(self, fake_engine, query_text, records_text):
        """Without an injected loop the timer lives on the running asyncio loop."""
        settlements = []

        async def run():
            scheduler = EvaluationScheduler(fake_engine, on_settle=settlements.append, quiet_period=0.01)
            scheduler.on_edit(query_text, records_text)
            scheduler.on_edit(query_text, records_text)
            await asyncio.sleep(0.05)

        asyncio.run(run())

        assert len(settlements) == 1


class TestCancelAndRunNow:
    """Tests for explicit timer control."""

    def test_cancel_pending_drops_evaluation(self, scheduler, settlements, fake_loop, query_text, records_text):
        scheduler.on_edit(query_text, records_text)
        scheduler.cancel_pending()
        fake_loop.advance(1.0)

        assert settlements == []
        assert scheduler.state == SchedulerState.IDLE

    def test_cancel_restores_last_settled_state(self, scheduler, fake_loop, query_text, records_text):
        scheduler.mount(query_text, records_text)
        scheduler.on_edit(query_text, records_text)
        scheduler.cancel_pending()

        assert scheduler.state == SchedulerState.SETTLED_OK

    def test_cancel_without_pending_is_noop(self, scheduler):
        scheduler.cancel_pending()
        assert scheduler.state == SchedulerState.IDLE

    def test_run_now_skips_quiet_period(self, scheduler, settlements, fake_loop, query_text, records_text):
        scheduler.on_edit(query_text, records_text)
        scheduler.run_now()
        fake_loop.advance(1.0)

        assert len(settlements) == 1
        assert not scheduler.has_pending


class TestSettlement:
    """Tests for settlement contents."""

    def test_result_json_omits_echoed_credentials(self, scheduler, query_text, records_text):
        settlement = scheduler.mount(query_text, records_text)

        payload = json.loads(settlement.result_json)
        assert "credentials" not in payload
        assert payload["can_be_satisfied"] is True
        assert settlement.error is None

    def test_result_json_is_pretty_printed(self, scheduler, query_text, records_text):
        settlement = scheduler.mount(query_text, records_text)
        assert settlement.result_json.startswith("{\n  ")

    def test_error_settles_with_message_and_empty_result(self, scheduler, settlements, query_text):
        """Invalid records JSON -> error set, result cleared."""
        settlement = scheduler.mount(query_text, "[")

        assert not settlement.ok
        assert settlement.result is None
        assert settlement.result_json == EMPTY_RESULT_JSON
        assert "records" in settlement.error
        assert settlement.error_type == "DocumentSyntaxError"
        assert scheduler.state == SchedulerState.SETTLED_ERR

    def test_success_after_error_clears_error(self, scheduler, query_text, records_text):
        scheduler.mount(query_text, "{}")
        settlement = scheduler.run_now()
        assert settlement.error == "Credentials must be an array, got dict"

        scheduler.mount(query_text, records_text)
        assert scheduler.last_settlement.ok
        assert scheduler.last_settlement.error is None

    def test_sequence_increments(self, scheduler, query_text, records_text):
        first = scheduler.mount(query_text, records_text)
        second = scheduler.run_now()

        assert (first.sequence, second.sequence) == (1, 2)
        assert scheduler.evaluation_count == 2

    def test_dangling_credential_set_id_is_semantic_error(self, scheduler, records_text):
        """Credential set naming an unselected query id -> semantic error, no result."""
        text = json.dumps({
            "credentials": [{"id": "mvrc_credential", "format": "mso_mdoc"}],
            "credential_sets": [{"options": [["dl_credential"]], "required": True}],
        })

        settlement = scheduler.mount(text, records_text)

        assert settlement.error_type == "QuerySemanticError"
        assert "dl_credential" in settlement.error
        assert settlement.result_json == EMPTY_RESULT_JSON


class TestSettlementAlwaysDelivered:
    """Inputs that decode or serialize badly still settle exactly once."""

    def test_deeply_nested_records_settle_as_syntax_error(self, scheduler, settlements, query_text):
        records = "[" * 100000 + "]" * 100000

        settlement = scheduler.mount(query_text, records)

        assert settlements == [settlement]
        assert settlement.error_type == "DocumentSyntaxError"
        assert "records document" in settlement.error
        assert settlement.result_json == EMPTY_RESULT_JSON
        assert scheduler.state == SchedulerState.SETTLED_ERR

    def test_deeply_nested_records_on_timer_path(self, scheduler, settlements, fake_loop, query_text):
        scheduler.on_edit(query_text, "[" * 100000 + "]" * 100000)
        fake_loop.advance(0.6)

        assert len(settlements) == 1
        assert not settlements[0].ok
        assert scheduler.state == SchedulerState.SETTLED_ERR

    def test_non_json_output_values_are_stringified(self, engine_factory, settlements, query_text, records_text):
        engine = engine_factory(result={
            "can_be_satisfied": True,
            "credential_matches": {"mvrc_credential": {
                "success": True,
                "valid_credentials": [{
                    "input_credential_index": 0,
                    "meta": {"success": True, "output": {"issued": date(2024, 1, 1)}},
                }],
            }},
        })
        scheduler = EvaluationScheduler(engine, on_settle=settlements.append)

        settlement = scheduler.mount(query_text, records_text)

        assert settlements == [settlement]
        assert settlement.ok
        assert scheduler.state == SchedulerState.SETTLED_OK
        payload = json.loads(settlement.result_json)
        meta = payload["credential_matches"]["mvrc_credential"]["valid_credentials"][0]["meta"]
        assert meta["output"] == {"issued": "2024-01-01"}
        assert "credentials" not in payload
