"""Selection state: which catalog fixtures feed the two documents.

Selection is order-insensitive; indices are always kept sorted ascending so
the generated documents list fixtures in catalog order. Every mutation
replaces the whole `SelectionState` value.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from playground.catalog import (
    FixtureCatalog,
    SAMPLE_QUERIES,
    SAMPLE_CREDENTIALS,
    DEFAULT_QUERY_INDICES,
    DEFAULT_RECORD_INDICES,
)
from playground.schemas import CredentialSet


class SelectionState(BaseModel):
    """Immutable snapshot of the current selection."""
    model_config = ConfigDict(frozen=True)

    query_indices: Tuple[int, ...] = DEFAULT_QUERY_INDICES
    record_indices: Tuple[int, ...] = DEFAULT_RECORD_INDICES
    credential_sets: Tuple[CredentialSet, ...] = Field(default_factory=tuple)


def toggle_index(indices: Iterable[int], index: int) -> Tuple[int, ...]:
    """Add `index` if absent, remove it if present; result sorted ascending."""
    current = set(indices)
    if index in current:
        current.remove(index)
    else:
        current.add(index)
    return tuple(sorted(current))


class SelectionManager:
    """Owns the selection state for one playground session."""

    def __init__(
        self,
        query_catalog: FixtureCatalog = SAMPLE_QUERIES,
        record_catalog: FixtureCatalog = SAMPLE_CREDENTIALS,
        default_query_indices: Sequence[int] = DEFAULT_QUERY_INDICES,
        default_record_indices: Sequence[int] = DEFAULT_RECORD_INDICES,
    ):
        self.query_catalog = query_catalog
        self.record_catalog = record_catalog
        self._default_queries = tuple(sorted(set(default_query_indices)))
        self._default_records = tuple(sorted(set(default_record_indices)))
        self._state = SelectionState(
            query_indices=self._default_queries,
            record_indices=self._default_records,
        )

    @property
    def state(self) -> SelectionState:
        return self._state

    def toggle_query(self, index: int) -> SelectionState:
        """Toggle a query fixture.

        Raises:
            IndexError: If the index is outside the query catalog
        """
        self._check_bounds(self.query_catalog, index, "query")
        self._state = self._state.model_copy(
            update={"query_indices": toggle_index(self._state.query_indices, index)}
        )
        return self._state

    def toggle_record(self, index: int) -> SelectionState:
        """Toggle a record fixture.

        Raises:
            IndexError: If the index is outside the record catalog
        """
        self._check_bounds(self.record_catalog, index, "record")
        self._state = self._state.model_copy(
            update={"record_indices": toggle_index(self._state.record_indices, index)}
        )
        return self._state

    def select(
        self,
        query_indices: Optional[Iterable[int]] = None,
        record_indices: Optional[Iterable[int]] = None,
    ) -> SelectionState:
        """Replace the selected indices of either side; `None` keeps that side.

        Raises:
            IndexError: If any index is outside its catalog (state unchanged)
        """
        update = {}
        if query_indices is not None:
            queries = set(query_indices)
            for index in queries:
                self._check_bounds(self.query_catalog, index, "query")
            update["query_indices"] = tuple(sorted(queries))
        if record_indices is not None:
            records = set(record_indices)
            for index in records:
                self._check_bounds(self.record_catalog, index, "record")
            update["record_indices"] = tuple(sorted(records))
        self._state = self._state.model_copy(update=update)
        return self._state

    def set_credential_sets(self, credential_sets: Sequence[CredentialSet]) -> SelectionState:
        """Replace the user-defined credential sets as a whole."""
        self._state = self._state.model_copy(
            update={"credential_sets": tuple(credential_sets)}
        )
        return self._state

    def reset_queries(self) -> SelectionState:
        """Back to the default query and no credential sets."""
        self._state = self._state.model_copy(
            update={"query_indices": self._default_queries, "credential_sets": ()}
        )
        return self._state

    def reset_records(self) -> SelectionState:
        self._state = self._state.model_copy(
            update={"record_indices": self._default_records}
        )
        return self._state

    def available_credential_ids(self) -> List[str]:
        """Ids of the selected credential queries, for building set options."""
        return [
            self.query_catalog[i].document.get("id")
            for i in self._state.query_indices
        ]

    @staticmethod
    def _check_bounds(catalog: FixtureCatalog, index: int, side: str) -> None:
        if not catalog.contains_index(index):
            raise IndexError(
                f"{side} index {index} outside catalog of {len(catalog)} entries"
            )
