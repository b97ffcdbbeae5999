# Overview: Service-layer operations for AI analysis; Gemini sales summaries run in the background.

"""
AI sales analysis

summarize() turns a list of record snapshots into a markdown narrative from
Gemini. It never raises: a missing key, an empty list and any provider error
each come back as a fixed message.

AnalysisRunner runs summarize() off the request thread. Each admin session
has at most one job; while it is pending the session reports in_progress
and a second start is refused with AnalysisInProgressError. There is no
timeout and no retry. A pending job can be discarded, in which case its
late result is dropped.
"""

from __future__ import annotations

import json
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Hashable, Iterable, Mapping

from google import genai

from ..time_utils import utcnow, to_utc_z


DISABLED_MESSAGE = "AI analysis is disabled. Please configure your Gemini API key."
NO_DATA_MESSAGE = "No sales data to analyze."
FAILURE_MESSAGE = "An error occurred while analyzing the data with Gemini. Please check the console for details."

DEFAULT_MODEL = "gemini-2.5-flash"

PROMPT_TEMPLATE = """
You are a senior sales analyst. Based on the following sales data in JSON format, provide a concise summary of key insights and trends.
Focus on:
- Top-performing products and customers.
- Regional performance.
- Any noticeable patterns in sales or discounts.
- Provide actionable recommendations.

Format your response in markdown.

Sales Data:
{data}
"""


class AnalysisInProgressError(Exception):
    """Raised when an analysis is started while another one is still pending."""


def summary_rows(records: Iterable[Mapping]) -> list[dict]:
    """The subset of each record sent to the model."""
    return [
        {
            "product": r.get("product_name"),
            "customer": r.get("customer_name"),
            "region": r.get("region"),
            "salesperson": r.get("salesperson"),
            "quantity": r.get("quantity"),
            "total": r.get("total_amount"),
        }
        for r in records
    ]


def build_prompt(records: Iterable[Mapping]) -> str:
    return PROMPT_TEMPLATE.format(data=json.dumps(summary_rows(records), indent=2))


def _generate(prompt: str, *, api_key: str, model: str) -> str:
    client = genai.Client(api_key=api_key)
    response = client.models.generate_content(model=model, contents=prompt)
    return response.text or ""


def summarize(
    records: list[Mapping],
    *,
    api_key: str | None,
    model: str = DEFAULT_MODEL,
    logger: logging.Logger | None = None,
) -> str:
    """Narrative summary of the records, or one of the three fixed messages."""
    if not api_key:
        return DISABLED_MESSAGE
    if not records:
        return NO_DATA_MESSAGE
    try:
        return _generate(build_prompt(records), api_key=api_key, model=model)
    except Exception:
        (logger or logging.getLogger(__name__)).exception("Error calling Gemini API")
        return FAILURE_MESSAGE


@dataclass
class AnalysisJob:
    record_count: int
    started_at: datetime
    future: Future | None = None
    result: str = ""
    finished_at: datetime | None = None

    @property
    def in_progress(self) -> bool:
        return self.finished_at is None

    def to_dict(self) -> dict:
        return {
            "in_progress": self.in_progress,
            "result": self.result,
            "record_count": self.record_count,
            "started_at": to_utc_z(self.started_at),
            "finished_at": to_utc_z(self.finished_at),
        }


IDLE_STATUS = {
    "in_progress": False,
    "result": "",
    "record_count": 0,
    "started_at": None,
    "finished_at": None,
}


@dataclass
class AnalysisRunner:
    """
    One background analysis per key (an admin session id).

    summarizer is called with the list of records and must return text;
    summarize() bound to the app's Gemini settings in production.
    """
    summarizer: Callable[[list], str]
    max_workers: int = 2
    logger: logging.Logger | None = None
    _jobs: dict = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _executor: ThreadPoolExecutor | None = field(default=None, init=False, repr=False)

    def _log(self) -> logging.Logger:
        return self.logger or logging.getLogger(__name__)

    def _pool(self) -> ThreadPoolExecutor:
        # Caller holds _lock
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="analysis")
        return self._executor

    def start(self, key: Hashable, records: list[Mapping]) -> AnalysisJob:
        """
        Submit records for analysis under key.

        Raises AnalysisInProgressError if key already has a pending job.
        Any previous finished result for key is replaced.
        """
        records = list(records)
        with self._lock:
            current = self._jobs.get(key)
            if current is not None and current.in_progress:
                raise AnalysisInProgressError("An analysis is already in progress")
            job = AnalysisJob(record_count=len(records), started_at=utcnow())
            self._jobs[key] = job
            pool = self._pool()

        self._log().info("Starting sales analysis of %d records", len(records))
        future = pool.submit(self.summarizer, records)
        job.future = future
        future.add_done_callback(lambda f: self._finish(key, job, f))
        return job

    def _finish(self, key: Hashable, job: AnalysisJob, future: Future) -> None:
        if future.cancelled():
            text = ""
        else:
            exc = future.exception()
            if exc is not None:
                self._log().error("Sales analysis failed: %s", exc)
                text = FAILURE_MESSAGE
            else:
                text = future.result()
        with self._lock:
            if self._jobs.get(key) is not job:
                # Discarded while pending
                return
            job.result = text
            job.finished_at = utcnow()
        self._log().info("Sales analysis finished")

    def status(self, key: Hashable) -> dict:
        with self._lock:
            job = self._jobs.get(key)
            if job is None:
                return dict(IDLE_STATUS)
            return job.to_dict()

    def discard(self, key: Hashable) -> bool:
        """Forget the job for key. A pending provider call still runs, but its result is dropped."""
        with self._lock:
            job = self._jobs.pop(key, None)
        if job is None:
            return False
        if job.future is not None:
            job.future.cancel()
        return True

    def shutdown(self) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)
