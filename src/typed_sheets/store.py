"""Tabular store and identity provider interfaces, with in-memory implementations.

Row and column indices are 1-based throughout, matching spreadsheet
conventions: row 1 holds the headers and data starts at row 2.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from typed_sheets.config import Settings


@runtime_checkable
class TabularStore(Protocol):
    """Operations a backing store must provide."""

    def get_table(self, name: str) -> Any | None: ...

    def create_table(self, name: str) -> Any: ...

    def append_row(self, table: Any, values: Sequence[Any]) -> None: ...

    def read_range(
        self, table: Any, row: int, column: int, num_rows: int, num_columns: int
    ) -> list[list[Any]]: ...

    def write_range(
        self, table: Any, row: int, column: int, values: Sequence[Sequence[Any]]
    ) -> None: ...

    def write_row(self, table: Any, row: int, values: Sequence[Any]) -> None: ...

    def delete_column(self, table: Any, column: int) -> None: ...

    def delete_row(self, table: Any, row: int) -> None: ...

    def last_row_index(self, table: Any) -> int: ...

    def last_column_index(self, table: Any) -> int: ...

    def commit(self) -> None: ...

    def close(self) -> None: ...


@runtime_checkable
class IdentityProvider(Protocol):
    """Supplies the email of the user acting on the store, if known."""

    def current_actor_email(self) -> str | None: ...


@dataclass
class StaticIdentity:
    """Identity provider returning a fixed email."""

    email: str | None = None

    def current_actor_email(self) -> str | None:
        return self.email


@dataclass
class EnvironmentIdentity:
    """Identity provider reading the acting user from settings."""

    settings: Settings

    def current_actor_email(self) -> str | None:
        return self.settings.actor_email


@dataclass
class MemorySheet:
    """A named grid of cells."""

    name: str
    rows: list[list[Any]] = field(default_factory=list)

    @property
    def last_row(self) -> int:
        return len(self.rows)

    @property
    def last_column(self) -> int:
        return max((len(r) for r in self.rows), default=0)


class MemoryStore:
    """Tabular store keeping every table in memory.

    Empty cells read back as ``""``.
    """

    EMPTY = ""

    def __init__(self) -> None:
        self._tables: dict[str, MemorySheet] = {}
        self.commit_count = 0

    def get_table(self, name: str) -> MemorySheet | None:
        return self._tables.get(name)

    def create_table(self, name: str) -> MemorySheet:
        if name in self._tables:
            raise ValueError(f"Table '{name}' already exists")
        table = MemorySheet(name)
        self._tables[name] = table
        return table

    def list_tables(self) -> list[str]:
        return list(self._tables.keys())

    def append_row(self, table: MemorySheet, values: Sequence[Any]) -> None:
        table.rows.append(list(values))

    def read_range(
        self,
        table: MemorySheet,
        row: int,
        column: int,
        num_rows: int,
        num_columns: int,
    ) -> list[list[Any]]:
        """Read a rectangular block of cells, padding missing cells with ``""``."""
        if row < 1 or column < 1:
            raise IndexError(f"Range must start at row/column >= 1, got ({row}, {column})")
        grid = []
        for r in range(row - 1, row - 1 + num_rows):
            source = table.rows[r] if r < len(table.rows) else []
            cells = source[column - 1 : column - 1 + num_columns]
            cells = cells + [self.EMPTY] * (num_columns - len(cells))
            grid.append(cells)
        return grid

    def write_range(
        self,
        table: MemorySheet,
        row: int,
        column: int,
        values: Sequence[Sequence[Any]],
    ) -> None:
        if row < 1 or column < 1:
            raise IndexError(f"Range must start at row/column >= 1, got ({row}, {column})")
        for offset, cells in enumerate(values):
            r = row - 1 + offset
            while len(table.rows) <= r:
                table.rows.append([])
            target = table.rows[r]
            end = column - 1 + len(cells)
            if len(target) < end:
                target.extend([self.EMPTY] * (end - len(target)))
            target[column - 1 : end] = list(cells)

    def write_row(self, table: MemorySheet, row: int, values: Sequence[Any]) -> None:
        self.write_range(table, row, 1, [values])

    def delete_column(self, table: MemorySheet, column: int) -> None:
        if column < 1 or column > table.last_column:
            raise IndexError(f"Column {column} out of range [1, {table.last_column}]")
        for cells in table.rows:
            if len(cells) >= column:
                del cells[column - 1]

    def delete_row(self, table: MemorySheet, row: int) -> None:
        if row < 1 or row > table.last_row:
            raise IndexError(f"Row {row} out of range [1, {table.last_row}]")
        del table.rows[row - 1]

    def last_row_index(self, table: MemorySheet) -> int:
        return table.last_row

    def last_column_index(self, table: MemorySheet) -> int:
        return table.last_column

    def commit(self) -> None:
        self.commit_count += 1

    def close(self) -> None:
        pass

    def __enter__(self) -> MemoryStore:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
