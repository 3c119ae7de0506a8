"""Playground store: the single owner of session state.

Owns the selection, the two document buffers, the scheduler and the latest
settlement with its display tree. Readers only ever see immutable
`PlaygroundSnapshot` values; every change builds a new snapshot and hands it
to subscribers.

Flow:
    selection change -> documents regenerated -> scheduler.on_edit
    manual edit      -> buffer replaced       -> scheduler.on_edit
    settlement       -> result tree rebuilt   -> subscribers notified
"""

from typing import Callable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from playground.catalog import FixtureCatalog, SAMPLE_QUERIES, SAMPLE_CREDENTIALS
from playground.query.engine import QueryEngine
from playground.query.result_tree import build_result_tree
from playground.query.scheduler import (
    DEFAULT_QUIET_PERIOD,
    EMPTY_RESULT_JSON,
    EvaluationScheduler,
    EvaluationSettlement,
    TimerLoop,
)
from playground.schemas import CredentialSet, ResultTree
from playground.session.documents import DocumentSynchronizer, SyncResult
from playground.session.selection import SelectionManager, SelectionState
from playground.utils.logger import LoggerManager

logger = LoggerManager.get_logger(__name__)

Subscriber = Callable[["PlaygroundSnapshot"], None]


class PlaygroundSnapshot(BaseModel):
    """Read-only view of the session handed to presentation layers."""
    model_config = ConfigDict(frozen=True)

    selection: SelectionState
    query_text: str
    records_text: str
    settlement: Optional[EvaluationSettlement] = None
    tree: Optional[ResultTree] = None

    @property
    def error(self) -> Optional[str]:
        return self.settlement.error if self.settlement else None

    @property
    def result_json(self) -> str:
        return self.settlement.result_json if self.settlement else EMPTY_RESULT_JSON


class PlaygroundStore:
    """Session state with subscription and whole-value replacement.

    Attributes:
        selection: Selection state manager
        documents: Document buffers
        scheduler: Debounced evaluation scheduler
    """

    def __init__(
        self,
        engine: QueryEngine,
        quiet_period: float = DEFAULT_QUIET_PERIOD,
        loop: Optional[TimerLoop] = None,
        query_catalog: FixtureCatalog = SAMPLE_QUERIES,
        record_catalog: FixtureCatalog = SAMPLE_CREDENTIALS,
    ):
        self.selection = SelectionManager(query_catalog, record_catalog)
        self.documents = DocumentSynchronizer(query_catalog, record_catalog)
        self.scheduler = EvaluationScheduler(
            engine,
            on_settle=self._on_settle,
            quiet_period=quiet_period,
            loop=loop,
        )
        self._subscribers: List[Subscriber] = []
        self._settlement: Optional[EvaluationSettlement] = None
        self._tree: Optional[ResultTree] = None
        self.documents.sync(self.selection.state)
        self._snapshot = self._build_snapshot()

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> PlaygroundSnapshot:
        return self._snapshot

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for every new snapshot.

        Returns:
            A function that removes the callback
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self) -> None:
        self._snapshot = self._build_snapshot()
        for callback in list(self._subscribers):
            callback(self._snapshot)

    def _build_snapshot(self) -> PlaygroundSnapshot:
        return PlaygroundSnapshot(
            selection=self.selection.state,
            query_text=self.documents.query_text,
            records_text=self.documents.records_text,
            settlement=self._settlement,
            tree=self._tree,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> PlaygroundSnapshot:
        """Evaluate the initial documents immediately."""
        self.scheduler.mount(self.documents.query_text, self.documents.records_text)
        return self._snapshot

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def toggle_query(self, index: int) -> PlaygroundSnapshot:
        self.selection.toggle_query(index)
        return self._selection_changed()

    def toggle_record(self, index: int) -> PlaygroundSnapshot:
        self.selection.toggle_record(index)
        return self._selection_changed()

    def set_credential_sets(self, credential_sets: Sequence[CredentialSet]) -> PlaygroundSnapshot:
        self.selection.set_credential_sets(credential_sets)
        return self._selection_changed()

    def reset_queries(self) -> PlaygroundSnapshot:
        self.selection.reset_queries()
        return self._selection_changed(force_query=True)

    def reset_records(self) -> PlaygroundSnapshot:
        self.selection.reset_records()
        return self._selection_changed(force_records=True)

    def available_credential_ids(self) -> List[str]:
        return self.selection.available_credential_ids()

    def _selection_changed(self, force_query: bool = False, force_records: bool = False) -> PlaygroundSnapshot:
        changed: SyncResult = self.documents.sync(
            self.selection.state, force_query=force_query, force_records=force_records
        )
        self._publish()
        if changed.query_changed or changed.records_changed:
            self._schedule()
        return self._snapshot

    # ------------------------------------------------------------------
    # Manual edits
    # ------------------------------------------------------------------

    def edit_query_document(self, text: str) -> PlaygroundSnapshot:
        if self.documents.edit_query(text):
            self._publish()
            self._schedule()
        return self._snapshot

    def edit_records_document(self, text: str) -> PlaygroundSnapshot:
        if self.documents.edit_records(text):
            self._publish()
            self._schedule()
        return self._snapshot

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def record_labels(self) -> List[str]:
        """Names of the selected record fixtures, by position in the records document."""
        catalog = self.selection.record_catalog
        return [catalog[i].name for i in self.selection.state.record_indices]

    def _schedule(self) -> None:
        self.scheduler.on_edit(self.documents.query_text, self.documents.records_text)

    def _on_settle(self, settlement: EvaluationSettlement) -> None:
        self._settlement = settlement
        if settlement.ok:
            self._tree = build_result_tree(settlement.result, self.record_labels())
        else:
            self._tree = None
        logger.debug(
            "store.settled",
            extra={"extra_data": {"sequence": settlement.sequence, "status": settlement.status}},
        )
        self._publish()
