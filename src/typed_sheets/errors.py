"""Exceptions raised by typed_sheets."""

from __future__ import annotations


class TypedSheetsError(Exception):
    """Base class for all typed_sheets errors."""


class ConfigurationError(TypedSheetsError, ValueError):
    """Raised when a setting or argument has an unusable value."""


class ColumnValueError(TypedSheetsError, TypeError):
    """Raised when a value outside a column kind's domain is assigned."""


class ValidationError(TypedSheetsError):
    """Raised when required columns are missing a value at persist time.

    Attributes:
        missing: Header names of every required column without a value,
            in header order.
    """

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        names = "', '".join(self.missing)
        super().__init__(f"'{names}' are marked as 'required'")
