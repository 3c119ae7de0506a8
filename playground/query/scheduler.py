"""Reactive evaluation scheduler.

Keeps one evaluation result in sync with the latest (query, records)
document pair:

    IDLE -> SCHEDULED -> EVALUATING -> SETTLED_OK | SETTLED_ERR

- `mount()` evaluates immediately so the first view is populated.
- `on_edit()` records the newest pair and (re)arms a quiet-period timer;
  an edit while SCHEDULED cancels the old timer first.
- `run_now()` skips the wait; `cancel_pending()` drops the timer.

The timer is a cancellable delayed callback on the asyncio event loop
(`loop.call_later`). Evaluation itself is synchronous, so no two
evaluations overlap and a superseded timer never produces a settlement.
"""

import asyncio
from enum import Enum
from typing import Any, Callable, Literal, Optional, Protocol, Tuple

from pydantic import BaseModel, ConfigDict

from playground.query.engine import QueryEngine
from playground.query.evaluate import evaluate_documents
from playground.query.exceptions import EvaluationError
from playground.schemas import EvaluationResult
from playground.utils.logger import LoggerManager
from playground.utils.logger_context import with_context

logger = LoggerManager.get_logger(__name__)

DEFAULT_QUIET_PERIOD = 0.6  # seconds

# Raw JSON view shown when there is no result
EMPTY_RESULT_JSON = "[]"


class SchedulerState(str, Enum):
    IDLE = "idle"
    SCHEDULED = "scheduled"
    EVALUATING = "evaluating"
    SETTLED_OK = "settled_ok"
    SETTLED_ERR = "settled_err"


class EvaluationSettlement(BaseModel):
    """The single observable outcome of one evaluation.

    Exactly one of `result` / `error` is set.
    """
    model_config = ConfigDict(frozen=True)

    sequence: int
    status: Literal["ok", "error"]
    query_text: str
    records_text: str
    result: Optional[EvaluationResult] = None
    result_json: str = EMPTY_RESULT_JSON
    error: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TimerLoop(Protocol):
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class EvaluationScheduler:
    """Debounced evaluation of the two playground documents.

    Attributes:
        engine: Query engine collaborator
        quiet_period: Seconds without edits before evaluating; 0 evaluates
            synchronously on every edit
        last_settlement: Most recent settlement, if any
        evaluation_count: Number of evaluations run
    """

    def __init__(
        self,
        engine: QueryEngine,
        on_settle: Optional[Callable[[EvaluationSettlement], None]] = None,
        quiet_period: float = DEFAULT_QUIET_PERIOD,
        loop: Optional[TimerLoop] = None,
    ):
        self.engine = engine
        self.on_settle = on_settle
        self.quiet_period = quiet_period
        self._loop = loop
        self._timer: Optional[TimerHandle] = None
        self._documents: Optional[Tuple[str, str]] = None
        self._state = SchedulerState.IDLE
        self._settled_state = SchedulerState.IDLE
        self.last_settlement: Optional[EvaluationSettlement] = None
        self.evaluation_count = 0
        self.log = with_context(logger, component="scheduler")

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def has_pending(self) -> bool:
        return self._timer is not None

    def mount(self, query_text: str, records_text: str) -> EvaluationSettlement:
        """First evaluation: runs immediately, no quiet period."""
        self._documents = (query_text, records_text)
        return self.run_now()

    def on_edit(self, query_text: str, records_text: str) -> Optional[EvaluationSettlement]:
        """Record the newest document pair and (re)arm the quiet-period timer.

        Returns:
            The settlement when the quiet period is 0, otherwise None
        """
        self._documents = (query_text, records_text)
        if self.quiet_period <= 0:
            return self.run_now()

        self._cancel_timer()
        loop = self._loop or asyncio.get_running_loop()
        self._timer = loop.call_later(self.quiet_period, self._on_timer)
        self._state = SchedulerState.SCHEDULED
        return None

    def cancel_pending(self) -> None:
        """Drop the armed timer without evaluating."""
        if self._timer is None:
            return
        self._cancel_timer()
        self._state = self._settled_state
        self.log.debug("evaluation.cancelled")

    def run_now(self) -> Optional[EvaluationSettlement]:
        """Evaluate the latest document pair immediately.

        Returns:
            The settlement, or None if no documents were ever provided
        """
        self._cancel_timer()
        if self._documents is None:
            return None
        return self._evaluate(*self._documents)

    def _on_timer(self) -> None:
        self._timer = None
        if self._documents is not None:
            self._evaluate(*self._documents)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _evaluate(self, query_text: str, records_text: str) -> EvaluationSettlement:
        self._state = SchedulerState.EVALUATING
        self.evaluation_count += 1
        sequence = self.evaluation_count

        try:
            outcome = evaluate_documents(query_text, records_text, self.engine)
        except EvaluationError as e:
            settlement = EvaluationSettlement(
                sequence=sequence,
                status="error",
                query_text=query_text,
                records_text=records_text,
                error=e.message,
                error_type=type(e).__name__,
            )
            self._settled_state = SchedulerState.SETTLED_ERR
            self.log.warning(
                "evaluation.failed",
                extra={"extra_data": {"sequence": sequence, "error_type": type(e).__name__, "error": e.message}},
            )
        else:
            settlement = EvaluationSettlement(
                sequence=sequence,
                status="ok",
                query_text=query_text,
                records_text=records_text,
                result=outcome.result,
                result_json=outcome.result_json,
            )
            self._settled_state = SchedulerState.SETTLED_OK
            self.log.info(
                "evaluation.settled",
                extra={"extra_data": {"sequence": sequence, "can_be_satisfied": outcome.result.can_be_satisfied}},
            )

        self._state = self._settled_state
        self.last_settlement = settlement
        if self.on_settle is not None:
            self.on_settle(settlement)
        return settlement
