"""Document synchronizer: selection state -> the two editable JSON buffers.

The buffers are the single source of truth for evaluation. Regeneration is
deterministic, and a buffer is only overwritten when the text generated for
its side actually changes, so a hand edit on one side survives selection
changes on the other.
"""

import json
from typing import Any, NamedTuple, Optional

from playground.catalog import FixtureCatalog, SAMPLE_QUERIES, SAMPLE_CREDENTIALS
from playground.schemas import QueryDocument
from playground.session.selection import SelectionState
from playground.utils.logger import LoggerManager

logger = LoggerManager.get_logger(__name__)


def serialize_document(payload: Any) -> str:
    """Pretty JSON with 2-space indent, key order preserved."""
    return json.dumps(payload, indent=2, ensure_ascii=False)


def render_query_document(
    state: SelectionState,
    catalog: FixtureCatalog = SAMPLE_QUERIES,
) -> str:
    """Serialize the selected credential queries and credential sets.

    Args:
        state: Current selection
        catalog: Query fixture catalog

    Returns:
        JSON text with `credentials` and, when any exist, `credential_sets`
    """
    document = QueryDocument(
        credentials=catalog.documents(state.query_indices),
        credential_sets=list(state.credential_sets),
    )
    return serialize_document(document.to_payload())


def render_records_document(
    state: SelectionState,
    catalog: FixtureCatalog = SAMPLE_CREDENTIALS,
) -> str:
    """Serialize the selected record fixtures as a plain JSON array."""
    return serialize_document(catalog.documents(state.record_indices))


class SyncResult(NamedTuple):
    query_changed: bool
    records_changed: bool


class DocumentSynchronizer:
    """Holds the query and records buffers.

    Attributes:
        query_text: Current query document text
        records_text: Current records document text
    """

    def __init__(
        self,
        query_catalog: FixtureCatalog = SAMPLE_QUERIES,
        record_catalog: FixtureCatalog = SAMPLE_CREDENTIALS,
    ):
        self.query_catalog = query_catalog
        self.record_catalog = record_catalog
        self.query_text = ""
        self.records_text = ""
        self._last_generated_query: Optional[str] = None
        self._last_generated_records: Optional[str] = None

    def sync(
        self,
        state: SelectionState,
        force_query: bool = False,
        force_records: bool = False,
    ) -> SyncResult:
        """Regenerate buffers whose generated text changed since last sync.

        Args:
            state: Current selection
            force_query: Overwrite the query buffer even if unchanged
                (reset discards hand edits)
            force_records: Same for the records buffer

        Returns:
            SyncResult telling which buffers were overwritten
        """
        query_text = render_query_document(state, self.query_catalog)
        records_text = render_records_document(state, self.record_catalog)

        query_changed = force_query or query_text != self._last_generated_query
        records_changed = force_records or records_text != self._last_generated_records

        if query_changed:
            self._last_generated_query = query_text
            self.query_text = query_text
        if records_changed:
            self._last_generated_records = records_text
            self.records_text = records_text

        if query_changed or records_changed:
            logger.debug(
                "documents.regenerated",
                extra={"extra_data": {"query": query_changed, "records": records_changed}},
            )
        return SyncResult(query_changed, records_changed)

    def edit_query(self, text: str) -> bool:
        """Manual edit of the query buffer. Returns whether the text changed."""
        if text == self.query_text:
            return False
        self.query_text = text
        return True

    def edit_records(self, text: str) -> bool:
        """Manual edit of the records buffer. Returns whether the text changed."""
        if text == self.records_text:
            return False
        self.records_text = text
        return True
