"""Foreign key expansion."""

from __future__ import annotations

from typing import TYPE_CHECKING

from typed_sheets.query import find_by_id
from typed_sheets.types import Column, RecordTypeRegistry

if TYPE_CHECKING:
    from typed_sheets.record import Record
    from typed_sheets.store import TabularStore

# Appended to a foreign key column's name to hold the resolved record.
RESOLVED_SUFFIX = "_"


def resolved_name(column_name: str) -> str:
    return f"{column_name}{RESOLVED_SUFFIX}"


def expand(
    store: TabularStore,
    entity: Record,
    registry: RecordTypeRegistry | None = None,
) -> Record:
    """Attach the records referenced by the foreign keys of ``entity``.

    For each foreign key column ``name`` the referenced record, or None when
    no record has that id, is stored as ``entity.<name>_``. Only one level is
    resolved: foreign keys of the attached records are left as identifiers.

    Args:
        store: The tabular store.
        entity: The record to expand.
        registry: Registry for foreign types given by name.

    Returns:
        The same record.
    """
    for name, attr in list(vars(entity).items()):
        if not isinstance(attr, Column) or attr.foreign_type is None:
            continue
        target = attr.resolve_foreign_type(registry)
        related = find_by_id(store, target, attr.value) if attr.value else None
        setattr(entity, resolved_name(name), related)
    return entity
