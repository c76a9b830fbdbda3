"""Base class for record types stored as rows of a table."""

from __future__ import annotations

import datetime as dt
import json
import logging
from typing import Any, ClassVar

from typed_sheets.types import (
    DATE,
    STRING,
    Column,
    ColumnSpec,
    RecordTypeRegistry,
    default_registry,
    is_column,
)

logger = logging.getLogger(__name__)

# Columns every record carries, in header order. row_number is not a column.
IMPLICIT_COLUMNS = ("id", "created", "modified", "created_by", "last_modified_by")


def _collect_columns(cls: type) -> tuple[ColumnSpec, ...]:
    """Collect column declarations along the MRO, base classes first."""
    specs: dict[str, ColumnSpec] = {}
    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            if isinstance(attr, ColumnSpec):
                specs[name] = attr
            elif isinstance(attr, Column):
                specs[name] = ColumnSpec.from_column(name, attr)
    return tuple(specs.values())


def _json_default(value: Any) -> Any:
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class Record:
    """A record type whose instances map to rows of a backing table.

    Subclasses declare columns as class attributes::

        class Item(Record):
            name = STRING()
            qty = NUMBER()

    Each instance holds its own :class:`Column` objects under the declared
    names, plus ``row_number`` (0 while the instance has no backing row).
    The table is named after the class unless ``__table_name__`` is set.

    Every subclass is registered in ``default_registry`` under its table
    name, which is how foreign keys given by name are resolved. Class
    keywords change this: ``registry=`` registers into another
    :class:`RecordTypeRegistry`, and ``register=False`` skips registration,
    for throwaway or test classes::

        class Stock(Record, register=False):
            __table_name__ = "Item"
            name = STRING()

    Two registered classes may not share a name, so set ``__table_name__``
    when a class name clashes with one already registered.
    """

    __columns__: ClassVar[tuple[ColumnSpec, ...]] = ()
    __table_name__: ClassVar[str | None] = None

    id = STRING()
    created = DATE()
    modified = DATE()
    # Blank when no acting user is known, so not required.
    created_by = STRING(required=False)
    last_modified_by = STRING(required=False)

    def __init_subclass__(
        cls,
        register: bool = True,
        registry: RecordTypeRegistry | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        _finalize_columns(cls)
        if register:
            (registry if registry is not None else default_registry).register(
                cls, cls.table_name()
            )

    def __init__(self, *args: Any, row_number: int = 0, **kwargs: Any) -> None:
        """Create an in-memory record.

        Positional arguments fill the subclass-declared columns in declaration
        order; keyword arguments may name any column.
        """
        declared = [s.name for s in self.__columns__ if s.name not in IMPLICIT_COLUMNS]
        if len(args) > len(declared):
            raise TypeError(
                f"{type(self).__name__} takes at most {len(declared)} "
                f"positional values ({len(args)} given)"
            )
        values = dict(zip(declared, args))
        for name, value in kwargs.items():
            if name in values:
                raise TypeError(f"Got multiple values for column '{name}'")
            values[name] = value

        known = {s.name for s in self.__columns__}
        unknown = [name for name in values if name not in known]
        if unknown:
            raise TypeError(f"Unknown columns for {type(self).__name__}: {unknown}")

        now = dt.datetime.now()
        for spec in self.__columns__:
            if spec.name in values:
                column = spec.make_column(values[spec.name])
            elif spec.name in ("created", "modified"):
                column = spec.make_column(now)
            else:
                column = spec.make_column()
            setattr(self, spec.name, column)
        self.row_number = row_number

    @classmethod
    def table_name(cls) -> str:
        """Return the name of the backing table."""
        return cls.__table_name__ or cls.__name__

    @classmethod
    def column_names(cls) -> list[str]:
        """Return the declared column names in header order."""
        return [spec.name for spec in cls.__columns__]

    def get_value(self, name: str) -> Any:
        """Get the value of a column."""
        return self._column(name).value

    def set_value(self, name: str, value: Any) -> None:
        """Set the value of a column."""
        self._column(name).value = value

    def _column(self, name: str) -> Column:
        column = self.__dict__.get(name)
        if not is_column(column):
            raise KeyError(f"{type(self).__name__} has no column '{name}'")
        return column

    def column_values(self) -> dict[str, Any]:
        """Return a mapping of column name to value, in header order."""
        return {spec.name: self.get_value(spec.name) for spec in self.__columns__}

    @property
    def is_persisted(self) -> bool:
        return bool(self.id.value)

    def to_simple_object(self, extend_with: Any = None) -> dict[str, Any]:
        """Convert the record into a plain dict.

        Columns contribute their values and attached records (see
        :func:`typed_sheets.relations.expand`) are simplified recursively;
        every other attribute is skipped. The result is passed through
        :meth:`object_extension`.

        Args:
            extend_with: Extra data handed to :meth:`object_extension`.

        Returns:
            The simplified record.
        """
        plain: dict[str, Any] = {}
        for name, attr in vars(self).items():
            if is_column(attr):
                plain[name] = attr.value
            elif isinstance(attr, Record):
                plain[name] = attr.to_simple_object()
        return self.object_extension(plain, extend_with)

    def object_extension(
        self, simple_object: dict[str, Any], extend_with: Any = None
    ) -> dict[str, Any]:
        """Hook for subclasses to add derived fields to the simplified record."""
        return simple_object

    def stringify(self) -> str:
        """Serialize the simplified record to indented JSON."""
        return json.dumps(self.to_simple_object(), indent=2, default=_json_default)

    def print(self) -> None:
        """Log the JSON form of the record."""
        logger.info("%s", self.stringify())

    def __str__(self) -> str:
        return self.stringify()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id={self.id.value!r}, "
            f"row_number={self.row_number})"
        )


def _finalize_columns(cls: type[Record]) -> None:
    """Freeze column declarations into the ordered ``__columns__`` schema."""
    specs = _collect_columns(cls)
    for spec in specs:
        if isinstance(vars(cls).get(spec.name), Column):
            setattr(cls, spec.name, spec)
    cls.__columns__ = specs


_finalize_columns(Record)
