"""Conversion between grid rows, keyed records and record instances."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from typed_sheets.types import is_column

if TYPE_CHECKING:
    from typed_sheets.record import Record

# Row 1 holds the headers, so the first data row is row 2.
FIRST_DATA_ROW = 2


def grid_to_records(grid: Sequence[Sequence[Any]]) -> list[dict[str, Any]]:
    """Turn a grid whose first row is the header row into keyed records.

    Each record gets a ``row_number`` giving its 1-based row in the grid.
    Cells are matched to headers by position; a row shorter than the header
    row leaves the trailing keys unset, and cells past the last header are
    ignored.
    """
    if not grid:
        return []
    headers = list(grid[0])
    records = []
    for index, cells in enumerate(grid[1:]):
        record: dict[str, Any] = {"row_number": index + FIRST_DATA_ROW}
        for header, cell in zip(headers, cells):
            record[header] = cell
        records.append(record)
    return records


def record_to_entity(record_type: type[Record], record: dict[str, Any]) -> Record:
    """Hydrate a blank instance of ``record_type`` from a keyed record.

    Column values are replaced by the record's values (``None`` for keys the
    record lacks). Other instance attributes, such as ``row_number``, are
    copied over as-is when the record has them.
    """
    entity = record_type()
    for name in list(vars(entity)):
        attr = getattr(entity, name)
        if is_column(attr):
            attr.load(record.get(name))
        elif name in record:
            setattr(entity, name, record[name])
    return entity


def entity_to_row(entity: Record, headers: Sequence[str]) -> list[Any]:
    """Flatten an instance into row values following the header order.

    Headers with no matching column on the instance are skipped.
    """
    row = []
    for header in headers:
        column = vars(entity).get(header)
        if is_column(column):
            row.append(column.value)
    return row
