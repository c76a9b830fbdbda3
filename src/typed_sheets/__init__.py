"""Typed Sheets - typed records stored as rows of spreadsheet-like tables."""

from typed_sheets.errors import (
    ColumnValueError,
    ConfigurationError,
    TypedSheetsError,
    ValidationError,
)
from typed_sheets.json_store import JsonFileStore
from typed_sheets.persistence import generate_id
from typed_sheets.record import Record
from typed_sheets.schema import TableInfo, resolve_table
from typed_sheets.session import Session
from typed_sheets.store import (
    EnvironmentIdentity,
    IdentityProvider,
    MemoryStore,
    StaticIdentity,
    TabularStore,
)
from typed_sheets.types import (
    BOOLEAN,
    DATE,
    FOREIGNKEY,
    NUMBER,
    STRING,
    TIME,
    Column,
    ColumnKind,
    ColumnSpec,
    RecordTypeRegistry,
    is_column,
)

__all__ = [
    # Main API
    "Record",
    "Session",
    # Columns
    "DATE",
    "TIME",
    "STRING",
    "NUMBER",
    "BOOLEAN",
    "FOREIGNKEY",
    "Column",
    "ColumnKind",
    "ColumnSpec",
    "RecordTypeRegistry",
    "is_column",
    # Storage
    "TabularStore",
    "MemoryStore",
    "JsonFileStore",
    "TableInfo",
    "resolve_table",
    "generate_id",
    # Identity
    "IdentityProvider",
    "StaticIdentity",
    "EnvironmentIdentity",
    # Errors
    "TypedSheetsError",
    "ConfigurationError",
    "ValidationError",
    "ColumnValueError",
]

__version__ = "0.1.0"
