"""Column kinds, column descriptors and the record type registry."""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

from typed_sheets.errors import ColumnValueError

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from typed_sheets.record import Record

# A foreign key target: the record class itself, or its registered name.
RecordTypeRef = Union[type, str]


class ColumnKind(Enum):
    """The closed set of column kinds a record may declare."""

    DATE = "date"
    TIME = "time"
    STRING = "str"
    NUMBER = "number"
    BOOLEAN = "bool"
    FOREIGNKEY = "fk"

    @property
    def blank(self) -> Any:
        """Return the falsy sentinel stored when no value is given."""
        if self is ColumnKind.NUMBER:
            return 0
        if self is ColumnKind.BOOLEAN:
            return False
        return ""

    def coerce(self, value: Any, column_name: str | None = None) -> Any:
        """Validate a value against this kind's domain.

        ``None`` (unset) and ``""`` (blank cell) are accepted by every kind.
        Textual forms read back from a store are parsed into the native type.

        Args:
            value: The value being assigned.
            column_name: Name used in error messages.

        Returns:
            The value, converted to the kind's native type where needed.

        Raises:
            ColumnValueError: If the value is outside the kind's domain.
        """
        if value is None or (isinstance(value, str) and value == ""):
            return value
        try:
            converted = _COERCERS[self](value)
        except (TypeError, ValueError):
            converted = _INVALID
        if converted is _INVALID:
            label = f"column '{column_name}'" if column_name else "column"
            raise ColumnValueError(
                f"Invalid value {value!r} for {self.value} {label}"
            )
        return converted


_INVALID = object()
_UNSET = object()


def _coerce_date(value: Any) -> Any:
    if isinstance(value, (dt.datetime, dt.date)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return dt.date.fromisoformat(text)
        return dt.datetime.fromisoformat(text)
    return _INVALID


def _coerce_time(value: Any) -> Any:
    if isinstance(value, dt.time):
        return value
    if isinstance(value, dt.datetime):
        return value.time()
    if isinstance(value, str):
        return dt.time.fromisoformat(value.strip())
    return _INVALID


def _coerce_string(value: Any) -> Any:
    return value if isinstance(value, str) else _INVALID


def _coerce_number(value: Any) -> Any:
    if isinstance(value, bool):
        return _INVALID
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return float(value)
    return _INVALID


def _coerce_boolean(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "false"):
            return lowered == "true"
    return _INVALID


_COERCERS = {
    ColumnKind.DATE: _coerce_date,
    ColumnKind.TIME: _coerce_time,
    ColumnKind.STRING: _coerce_string,
    ColumnKind.NUMBER: _coerce_number,
    ColumnKind.BOOLEAN: _coerce_boolean,
    ColumnKind.FOREIGNKEY: _coerce_string,
}


class Column:
    """A typed cell value bound to one column of a record.

    Every assignment to ``value`` is checked against the column's kind.
    """

    __slots__ = ("kind", "required", "foreign_type", "name", "_value")

    def __init__(
        self,
        kind: ColumnKind,
        value: Any = None,
        required: bool = True,
        foreign_type: RecordTypeRef | None = None,
        name: str | None = None,
    ) -> None:
        self.kind = kind
        self.required = required
        self.foreign_type = foreign_type
        self.name = name
        self._value = kind.coerce(value, name)

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, value: Any) -> None:
        self._value = self.kind.coerce(value, self.name)

    def load(self, value: Any) -> None:
        """Set a value read back from a store.

        Unlike plain assignment this never raises: numbers in string and
        foreign key columns are turned into text, and any other value outside
        the kind's domain is kept as-is with a warning.
        """
        if (
            self.kind in (ColumnKind.STRING, ColumnKind.FOREIGNKEY)
            and isinstance(value, (int, float))
            and not isinstance(value, bool)
        ):
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            value = str(value)
        try:
            self._value = self.kind.coerce(value, self.name)
        except ColumnValueError:
            logger.warning(
                "Keeping stored value %r of %s column %r unconverted",
                value, self.kind.value, self.name,
            )
            self._value = value

    def resolve_foreign_type(
        self, registry: RecordTypeRegistry | None = None
    ) -> type[Record] | None:
        """Return the referenced record class, looking names up in a registry."""
        if self.foreign_type is None or isinstance(self.foreign_type, type):
            return self.foreign_type
        registry = registry if registry is not None else default_registry
        return registry.get_or_raise(self.foreign_type)

    def __repr__(self) -> str:
        required = "" if self.required else ", required=False"
        return f"Column({self.kind.value}, {self._value!r}{required})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Column):
            return NotImplemented
        return (
            self.kind is other.kind
            and self.required == other.required
            and self._value == other._value
        )

    __hash__ = None  # type: ignore[assignment]


@dataclass(frozen=True)
class ColumnSpec:
    """Declaration of one column of a record type, collected at class creation."""

    name: str
    kind: ColumnKind
    required: bool = True
    default: Any = None
    foreign_type: RecordTypeRef | None = None

    @classmethod
    def from_column(cls, name: str, column: Column) -> ColumnSpec:
        return cls(
            name=name,
            kind=column.kind,
            required=column.required,
            default=column.value,
            foreign_type=column.foreign_type,
        )

    def make_column(self, value: Any = _UNSET) -> Column:
        """Create a fresh column for an instance, falling back to the default."""
        if value is _UNSET:
            value = self.default
        return Column(
            self.kind,
            value or self.kind.blank,
            required=self.required,
            foreign_type=self.foreign_type,
            name=self.name,
        )


def _column(kind: ColumnKind, value: Any, required: bool,
            foreign_type: RecordTypeRef | None = None) -> Column:
    return Column(kind, value or kind.blank, required=required, foreign_type=foreign_type)


def DATE(value: dt.date | str | None = None, required: bool = True) -> Column:
    """Create a date column."""
    return _column(ColumnKind.DATE, value, required)


def TIME(value: dt.time | str | None = None, required: bool = True) -> Column:
    """Create a time-of-day column; strings use the ``hh:mm`` format."""
    return _column(ColumnKind.TIME, value, required)


def STRING(value: str | None = None, required: bool = True) -> Column:
    """Create a string column."""
    return _column(ColumnKind.STRING, value, required)


def NUMBER(value: int | float | None = None, required: bool = True) -> Column:
    """Create a number column."""
    return _column(ColumnKind.NUMBER, value, required)


def BOOLEAN(value: bool | None = None, required: bool = True) -> Column:
    """Create a boolean column."""
    return _column(ColumnKind.BOOLEAN, value, required)


def FOREIGNKEY(
    value: str | None = None,
    foreign_type: RecordTypeRef | None = None,
    required: bool = True,
) -> Column:
    """Create a foreign key column holding the ``id`` of a ``foreign_type`` record.

    Args:
        value: Identifier of the referenced record.
        foreign_type: The referenced record class, or its registered name.
        required: Whether persisting requires a value.
    """
    if foreign_type is None:
        raise TypeError("FOREIGNKEY columns need a foreign_type")
    return _column(ColumnKind.FOREIGNKEY, value, required, foreign_type)


def is_column(candidate: Any) -> bool:
    """Check whether an object looks like a column descriptor."""
    if candidate is None:
        return False
    return all(hasattr(candidate, attr) for attr in ("value", "kind", "required"))


class RecordTypeRegistry:
    """Registry of record types by name."""

    def __init__(self) -> None:
        self._types: dict[str, type[Record]] = {}

    def register(self, record_type: type[Record], name: str | None = None) -> None:
        """Register a record type under its class name."""
        name = name or record_type.__name__
        existing = self._types.get(name)
        if existing is not None and existing is not record_type:
            raise ValueError(f"Record type '{name}' is already defined")
        self._types[name] = record_type

    def unregister(self, name: str) -> None:
        self._types.pop(name, None)

    def get(self, name: str) -> type[Record] | None:
        """Get a record type by name."""
        return self._types.get(name)

    def get_or_raise(self, name: str) -> type[Record]:
        """Get a record type by name, raising if not found."""
        record_type = self._types.get(name)
        if record_type is None:
            raise KeyError(f"Record type '{name}' not found")
        return record_type

    def list_types(self) -> list[str]:
        """List all registered record type names."""
        return list(self._types.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._types


default_registry = RecordTypeRegistry()
