"""Background response lifecycle against the OpenAI Responses API."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from openai import OpenAI  # type: ignore
from rich.console import Console
from rich.markup import escape

from ..utils import Ansi, Spinner, err_console
from .errors import ResponseFailedError
from .history import HistoryStore

logger = logging.getLogger(__name__)

PENDING_STATUSES = ("queued", "in_progress")

INPUT_TOKEN_COST_PER_1M = 1.25
OUTPUT_TOKEN_COST_PER_1M = 10.0


def to_record(obj: Any) -> Dict[str, Any]:
    """Return a JSON-compatible ``dict`` for an SDK response object."""
    if isinstance(obj, dict):
        return obj
    return obj.model_dump(mode="json")


def is_pending(record: Dict[str, Any]) -> bool:
    return record.get("status") in PENDING_STATUSES


def is_failed(record: Dict[str, Any]) -> bool:
    return record.get("status") == "failed" or bool(record.get("error"))


def compute_cost(
    usage: Optional[Dict[str, Any]],
    input_rate: float = INPUT_TOKEN_COST_PER_1M,
    output_rate: float = OUTPUT_TOKEN_COST_PER_1M,
) -> float:
    """Return the USD cost of *usage* given per-million-token rates."""
    usage = usage or {}
    input_tokens = usage.get("input_tokens") or 0
    output_tokens = usage.get("output_tokens") or 0
    return (input_tokens / 1_000_000) * input_rate + (output_tokens / 1_000_000) * output_rate


def format_timestamp(created_at: Optional[float]) -> str:
    if not created_at:
        return "unknown"
    return datetime.fromtimestamp(created_at).strftime("%Y-%m-%d %H:%M:%S")


class CompletionSession:
    """Submit background responses, poll them and persist the results.

    Lifecycle of a submission::

        submitted -> polling -> completed | failed

    The id and request are written to the history before polling starts so
    an interrupted run can be picked up again with ``--id`` or ``--resume``.
    The terminal record is written exactly once, when first observed.
    """

    def __init__(
        self,
        store: HistoryStore,
        client: Optional[OpenAI] = None,
        *,
        client_factory: Optional[Callable[[], OpenAI]] = None,
        poll_interval: float = 2.0,
        input_rate: float = INPUT_TOKEN_COST_PER_1M,
        output_rate: float = OUTPUT_TOKEN_COST_PER_1M,
        keep_failed: bool = True,
        console: Optional[Console] = None,
        show_progress: bool = True,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if client is None and client_factory is None:
            raise ValueError("Either client or client_factory is required.")
        self.store = store
        self._client = client
        self._client_factory = client_factory
        self.poll_interval = poll_interval
        self.input_rate = input_rate
        self.output_rate = output_rate
        self.keep_failed = keep_failed
        self.console = console or err_console
        self.show_progress = show_progress
        self._sleep = sleep

    @property
    def client(self) -> OpenAI:
        # Built on first use so purely local operations never need a key.
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    # ------------------------------------------------------------------
    # Reporting helpers
    # ------------------------------------------------------------------

    def _field(self, label: str, value: Any) -> None:
        self.console.print(
            f"{Ansi.style(label + ':', Ansi.FG_GRAY)} {Ansi.style(escape(str(value)), Ansi.FG_WHITE)}"
        )

    def _report_header(self, record: Dict[str, Any]) -> None:
        self._field("Model", record.get("model"))
        self._field("Response ID", record.get("id"))
        self._field("Created At", format_timestamp(record.get("created_at")))

    def _report_terminal(self, record: Dict[str, Any]) -> float:
        tools = ", ".join(tool.get("type", "?") for tool in record.get("tools") or []) or "None"
        self.console.print(Ansi.style("Processing completed.", Ansi.FG_GRAY))
        self._field("Tools used", tools)

        usage = record.get("usage") or {}
        cost = compute_cost(usage, self.input_rate, self.output_rate)
        self._field(
            "Cost",
            f"${cost:.6f} (Input: {usage.get('input_tokens') or 0} tokens, "
            f"Output: {usage.get('output_tokens') or 0} tokens)",
        )
        return cost

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def submit(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """Create a background response and block until it is terminal."""
        self.console.print(Ansi.style("Creating new response...", Ansi.FG_GRAY))
        record = to_record(self.client.responses.create(**request))  # type: ignore[arg-type]
        response_id = record["id"]
        logger.info("Created response %s (%s)", response_id, record.get("status"))

        self.store.save_last_id(response_id)
        self.store.save_request(response_id, request)

        return self.wait_for_completion(record)

    def wait_for_completion(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Re-fetch *record* until its status is terminal, then persist it.

        Raises :class:`ResponseFailedError` for failed responses, after
        persisting them when ``keep_failed`` is set.
        """
        record = to_record(record)
        self._report_header(record)

        if is_pending(record):
            with Spinner(
                Ansi.style("Processing", Ansi.FG_GRAY),
                console=self.console,
                enabled=self.show_progress,
            ):
                while is_pending(record):
                    self._sleep(self.poll_interval)
                    record = to_record(self.client.responses.retrieve(record["id"]))
                    logger.debug("Polled response %s: %s", record["id"], record.get("status"))

        self._report_terminal(record)

        if is_failed(record):
            logger.error("Response %s failed: %s", record.get("id"), record.get("error"))
            if self.keep_failed:
                self.store.save_response(record["id"], record)
            raise ResponseFailedError(record)

        self.store.save_response(record["id"], record)
        return record

    def retrieve(self, response_id: str) -> Dict[str, Any]:
        """Return a terminal record, from history when possible."""
        record = self.store.load_response(response_id)
        if record is not None:
            if is_failed(record):
                raise ResponseFailedError(record)
            return record

        self.console.print(Ansi.style("Retrieving existing response...", Ansi.FG_GRAY))
        record = to_record(self.client.responses.retrieve(response_id))
        return self.wait_for_completion(record)
