"""Read records back from their backing tables."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Optional, TypeVar

from typed_sheets.mapper import grid_to_records, record_to_entity
from typed_sheets.schema import resolve_table
from typed_sheets.types import is_column

if TYPE_CHECKING:
    from typed_sheets.record import Record
    from typed_sheets.store import TabularStore

R = TypeVar("R", bound="Record")

# A condition is normally a predicate over a property's current value.
# Values that are not callable are accepted and match everything.
Condition = Any


def find_all(store: TabularStore, record_type: type[R]) -> list[R]:
    """Load every row of the record type's table, in row order."""
    info = resolve_table(store, record_type)
    last_row = store.last_row_index(info.table)
    last_column = store.last_column_index(info.table)
    if last_row < 2 or last_column == 0:
        return []
    grid = store.read_range(info.table, 1, 1, last_row, last_column)
    return [record_to_entity(record_type, r) for r in grid_to_records(grid)]  # type: ignore[misc]


def find_by_id(store: TabularStore, record_type: type[R], id: str) -> Optional[R]:
    """Return the first record whose ``id`` equals ``id``, or None."""
    for entity in find_all(store, record_type):
        if entity.id.value == id:
            return entity
    return None


def current_value(entity: Record, name: str) -> Any:
    """Return a column's value, or the plain attribute for non-columns."""
    attr = getattr(entity, name, None)
    if is_column(attr):
        return attr.value
    return attr


def filter_by_conditions(
    store: TabularStore,
    record_type: type[R],
    conditions: Mapping[str, Condition],
) -> list[R]:
    """Return the records satisfying every condition.

    Each condition maps a property name to a predicate called with the
    property's current value. Conditions whose value is not callable are
    treated as satisfied, so ``{"qty": 5}`` matches every record. An empty
    mapping matches nothing.

    Args:
        store: The tabular store.
        record_type: The record class to query.
        conditions: Property name to predicate.

    Returns:
        The matching records, in row order.
    """
    if not conditions:
        return []

    def matches(entity: Record) -> bool:
        for name, predicate in conditions.items():
            if not callable(predicate):
                continue
            if not predicate(current_value(entity, name)):
                return False
        return True

    return [e for e in find_all(store, record_type) if matches(e)]
