"""Gemini summaries and the single in-flight analysis runner."""

import json
import threading
import time
from concurrent.futures import wait

import pytest

from conftest import wait_until
from salesboard.seed import INITIAL_SALE_RECORDS
from salesboard.services import analysis_service
from salesboard.services.analysis_service import (
    DISABLED_MESSAGE,
    FAILURE_MESSAGE,
    NO_DATA_MESSAGE,
    AnalysisInProgressError,
    AnalysisRunner,
)


def _finished(runner, key):
    status = runner.status(key)
    return None if status["in_progress"] else status


class TestSummarize:
    def test_fixed_messages_are_stable(self):
        assert DISABLED_MESSAGE == "AI analysis is disabled. Please configure your Gemini API key."
        assert NO_DATA_MESSAGE == "No sales data to analyze."
        assert FAILURE_MESSAGE == (
            "An error occurred while analyzing the data with Gemini. Please check the console for details."
        )

    def test_no_key_disables_before_anything_else(self, monkeypatch):
        monkeypatch.setattr(analysis_service, "_generate", pytest.fail)
        assert analysis_service.summarize([], api_key=None) == DISABLED_MESSAGE
        assert analysis_service.summarize(INITIAL_SALE_RECORDS, api_key="") == DISABLED_MESSAGE

    def test_empty_records(self, monkeypatch):
        monkeypatch.setattr(analysis_service, "_generate", pytest.fail)
        assert analysis_service.summarize([], api_key="k") == NO_DATA_MESSAGE

    def test_returns_model_text(self, monkeypatch):
        calls = []

        def fake_generate(prompt, *, api_key, model):
            calls.append((prompt, api_key, model))
            return "## Insights\n- Stark leads"

        monkeypatch.setattr(analysis_service, "_generate", fake_generate)
        text = analysis_service.summarize(INITIAL_SALE_RECORDS, api_key="k", model="gemini-test")
        assert text == "## Insights\n- Stark leads"
        prompt, api_key, model = calls[0]
        assert (api_key, model) == ("k", "gemini-test")
        assert '"product": "Arc Reactor Core"' in prompt

    def test_provider_errors_become_fixed_message(self, monkeypatch):
        def boom(prompt, *, api_key, model):
            raise RuntimeError("quota exceeded")

        monkeypatch.setattr(analysis_service, "_generate", boom)
        assert analysis_service.summarize(INITIAL_SALE_RECORDS, api_key="k") == FAILURE_MESSAGE

    def test_summary_rows_subset(self):
        rows = analysis_service.summary_rows(INITIAL_SALE_RECORDS[:1])
        assert rows == [{
            "product": "Arc Reactor Core",
            "customer": "Stark Industries",
            "region": "North America",
            "salesperson": "Tony Stark",
            "quantity": 10,
            "total": 450000,
        }]

    def test_prompt_embeds_json(self):
        prompt = analysis_service.build_prompt(INITIAL_SALE_RECORDS)
        payload = prompt.split("Sales Data:\n", 1)[1]
        assert len(json.loads(payload)) == 3


class TestAnalysisRunner:
    def _blocking_runner(self):
        release = threading.Event()

        def summarizer(records):
            release.wait(5)
            return f"{len(records)} records analyzed"

        return AnalysisRunner(summarizer=summarizer), release

    def test_pending_then_result(self):
        runner, release = self._blocking_runner()
        try:
            runner.start("s1", INITIAL_SALE_RECORDS)
            assert runner.status("s1")["in_progress"] is True
            assert runner.status("s1")["result"] == ""

            release.set()
            status = wait_until(lambda: _finished(runner, "s1"))
            assert status["result"] == "3 records analyzed"
            assert status["record_count"] == 3
        finally:
            release.set()
            runner.shutdown()

    def test_second_start_while_pending_is_refused(self):
        runner, release = self._blocking_runner()
        try:
            runner.start("s1", INITIAL_SALE_RECORDS)
            with pytest.raises(AnalysisInProgressError):
                runner.start("s1", INITIAL_SALE_RECORDS)
            # Other sessions are independent
            runner.start("s2", [])
        finally:
            release.set()
            runner.shutdown()

    def test_restart_after_completion(self):
        runner = AnalysisRunner(summarizer=lambda records: "done")
        try:
            runner.start("s1", [])
            wait_until(lambda: not runner.status("s1")["in_progress"])
            runner.start("s1", [])
            wait_until(lambda: runner.status("s1")["result"] == "done")
        finally:
            runner.shutdown()

    def test_summarizer_exception_becomes_failure_message(self):
        def broken(records):
            raise RuntimeError("boom")

        runner = AnalysisRunner(summarizer=broken)
        try:
            runner.start("s1", [])
            status = wait_until(lambda: _finished(runner, "s1"))
            assert status["result"] == FAILURE_MESSAGE
        finally:
            runner.shutdown()

    def test_discard_drops_late_result(self):
        runner, release = self._blocking_runner()
        try:
            job = runner.start("s1", INITIAL_SALE_RECORDS)
            assert runner.discard("s1") is True
            release.set()
            wait([job.future], timeout=5)
            assert runner.status("s1") == analysis_service.IDLE_STATUS
            assert runner.discard("s1") is False
        finally:
            release.set()
            runner.shutdown()

    def test_idle_status(self):
        runner = AnalysisRunner(summarizer=lambda records: "")
        assert runner.status("nobody") == {
            "in_progress": False,
            "result": "",
            "record_count": 0,
            "started_at": None,
            "finished_at": None,
        }


class TestRunnerPool:
    def test_concurrent_first_starts_share_one_executor(self, monkeypatch):
        created = []

        class SlowStartExecutor(analysis_service.ThreadPoolExecutor):
            def __init__(self, *args, **kwargs):
                created.append(self)
                # Widen the window between "no executor yet" and assignment
                time.sleep(0.05)
                super().__init__(*args, **kwargs)

        monkeypatch.setattr(analysis_service, "ThreadPoolExecutor", SlowStartExecutor)
        runner = AnalysisRunner(summarizer=lambda records: "done")
        barrier = threading.Barrier(8)

        def start(key):
            barrier.wait(5)
            runner.start(key, [])

        threads = [threading.Thread(target=start, args=(f"s{i}",)) for i in range(8)]
        try:
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join(5)
            assert len(created) == 1
            for i in range(8):
                assert wait_until(lambda: _finished(runner, f"s{i}"))["result"] == "done"
        finally:
            runner.shutdown()

    def test_shutdown_is_idempotent(self):
        runner = AnalysisRunner(summarizer=lambda records: "done")
        runner.start("s1", [])
        runner.shutdown()
        runner.shutdown()
        assert runner._executor is None
