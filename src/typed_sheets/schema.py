"""Synchronize backing tables with record type declarations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typed_sheets.record import Record
    from typed_sheets.store import TabularStore

logger = logging.getLogger(__name__)


@dataclass
class TableInfo:
    """A resolved backing table and its header row, in column order."""

    table: Any
    headers: list[str]

    def position(self, header: str) -> int:
        """Return the 0-based position of a header in a row."""
        return self.headers.index(header)


def read_headers(store: TabularStore, table: Any) -> list[Any]:
    """Read the header row of a table, without trailing blank cells."""
    last_column = store.last_column_index(table)
    if last_column == 0 or store.last_row_index(table) == 0:
        return []
    headers = list(store.read_range(table, 1, 1, 1, last_column)[0])
    while headers and headers[-1] in ("", None):
        headers.pop()
    return headers


def resolve_table(store: TabularStore, record_type: type[Record]) -> TableInfo:
    """Get the backing table of a record type, creating or updating it.

    A missing table is created with the declared columns as its header row.
    For an existing table, declared columns missing from the header row are
    appended after the last header, and headers no longer declared are
    deleted together with their column. Data in kept columns is untouched.

    Args:
        store: The tabular store.
        record_type: The record class whose table to resolve.

    Returns:
        The table handle and its final header row.
    """
    name = record_type.table_name()
    declared = record_type.column_names()
    table = store.get_table(name)

    if table is None:
        logger.info("Creating table %r with columns %s", name, declared)
        table = store.create_table(name)
        store.append_row(table, declared)
        headers = list(declared)
    else:
        headers = read_headers(store, table)

        added = [h for h in declared if h not in headers]
        if added:
            logger.info("Adding columns %s to table %r", added, name)
            store.write_range(table, 1, len(headers) + 1, [added])
            headers.extend(added)

        removed = [h for h in headers if h not in declared]
        if removed:
            logger.info("Removing columns %s from table %r", removed, name)
        # Right to left, so earlier deletions never shift a pending target.
        for header in reversed(removed):
            column = len(headers) - headers[::-1].index(header)
            store.delete_column(table, column)
            del headers[column - 1]

    store.commit()
    return TableInfo(table=table, headers=headers)
