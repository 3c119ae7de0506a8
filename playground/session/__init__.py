"""Session state: selection, document buffers and the owning store."""

from playground.session.selection import SelectionManager, SelectionState, toggle_index
from playground.session.documents import (
    DocumentSynchronizer,
    SyncResult,
    render_query_document,
    render_records_document,
)
from playground.session.store import PlaygroundStore, PlaygroundSnapshot

__all__ = [
    "SelectionManager",
    "SelectionState",
    "toggle_index",
    "DocumentSynchronizer",
    "SyncResult",
    "render_query_document",
    "render_records_document",
    "PlaygroundStore",
    "PlaygroundSnapshot",
]
