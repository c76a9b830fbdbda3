"""File-backed tabular store keeping one JSON document per table."""

from __future__ import annotations

import datetime as dt
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any, Sequence

from typed_sheets.store import MemorySheet, MemoryStore

if TYPE_CHECKING:
    from typed_sheets.config import Settings

logger = logging.getLogger(__name__)


def _encode_cell(value: Any) -> Any:
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return value.isoformat()
    return value


class JsonFileStore(MemoryStore):
    """Tabular store persisting each table to ``<data_dir>/<name>.json``.

    Tables are loaded on first access and held in memory; ``commit`` writes
    every table modified since the previous commit. Dates and times are
    written as ISO-8601 strings, which date and time columns parse back.
    """

    SUFFIX = ".json"

    def __init__(self, data_dir: Path | str) -> None:
        super().__init__()
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._dirty: set[str] = set()

    @classmethod
    def from_settings(cls, settings: Settings) -> JsonFileStore:
        """Create a store rooted at ``settings.data_dir``."""
        return cls(settings.data_dir)

    def _path_for(self, name: str) -> Path:
        return self.data_dir / f"{name}{self.SUFFIX}"

    def get_table(self, name: str) -> MemorySheet | None:
        table = super().get_table(name)
        if table is not None:
            return table

        path = self._path_for(name)
        if not path.exists():
            return None
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        table = MemorySheet(name, [list(r) for r in data.get("rows", [])])
        self._tables[name] = table
        logger.debug("Loaded table %r (%d rows) from %s", name, table.last_row, path)
        return table

    def create_table(self, name: str) -> MemorySheet:
        if self._path_for(name).exists():
            raise ValueError(f"Table '{name}' already exists")
        table = super().create_table(name)
        self._dirty.add(name)
        return table

    def list_tables(self) -> list[str]:
        names = {p.stem for p in self.data_dir.glob(f"*{self.SUFFIX}")}
        names.update(self._tables)
        return sorted(names)

    def append_row(self, table: MemorySheet, values: Sequence[Any]) -> None:
        super().append_row(table, values)
        self._dirty.add(table.name)

    def write_range(
        self,
        table: MemorySheet,
        row: int,
        column: int,
        values: Sequence[Sequence[Any]],
    ) -> None:
        super().write_range(table, row, column, values)
        self._dirty.add(table.name)

    def delete_column(self, table: MemorySheet, column: int) -> None:
        super().delete_column(table, column)
        self._dirty.add(table.name)

    def delete_row(self, table: MemorySheet, row: int) -> None:
        super().delete_row(table, row)
        self._dirty.add(table.name)

    def commit(self) -> None:
        """Write modified tables to disk."""
        for name in sorted(self._dirty):
            self._save_table(self._tables[name])
        self._dirty.clear()
        super().commit()

    def _save_table(self, table: MemorySheet) -> None:
        path = self._path_for(table.name)
        rows = [[_encode_cell(cell) for cell in cells] for cells in table.rows]
        # Write to a sibling temp file then swap it in.
        fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump({"name": table.name, "rows": rows}, f, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Saved table %r (%d rows) to %s", table.name, table.last_row, path)

    def close(self) -> None:
        if self._dirty:
            self.commit()
        self._tables.clear()
