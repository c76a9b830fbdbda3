"""Write records to and remove them from their backing tables."""

from __future__ import annotations

import datetime as dt
import logging
import random
import string
from typing import TYPE_CHECKING, Any, Sequence

from typed_sheets.errors import ConfigurationError, ValidationError
from typed_sheets.mapper import entity_to_row
from typed_sheets.schema import resolve_table
from typed_sheets.types import is_column

if TYPE_CHECKING:
    from typed_sheets.record import Record
    from typed_sheets.store import IdentityProvider, TabularStore

logger = logging.getLogger(__name__)

ID_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
DEFAULT_ID_LENGTH = 8


def generate_id(length: int) -> str:
    """Generate a random alphanumeric identifier.

    Not suitable for secrets: uses the non-cryptographic ``random`` module.

    Raises:
        ConfigurationError: If length is not positive.
    """
    if length <= 0:
        raise ConfigurationError("Length must be greater than 0")
    return "".join(random.choice(ID_ALPHABET) for _ in range(length))


def check_required(entity: Record, headers: Sequence[str], row: Sequence[Any]) -> list[str]:
    """Return the headers of required columns with no value in ``row``.

    A value is missing when its position is absent from the row, or holds
    ``None`` or the empty string.
    """
    missing = []
    for position, header in enumerate(headers):
        column = vars(entity).get(header)
        if not is_column(column) or not column.required:
            continue
        value = row[position] if position < len(row) else None
        if value is None or (isinstance(value, str) and value == ""):
            missing.append(header)
    return missing


def persist(
    store: TabularStore,
    entity: Record,
    identity: IdentityProvider | None = None,
    id_length: int = DEFAULT_ID_LENGTH,
) -> Record:
    """Insert or update the row backing a record.

    ``modified`` (and ``last_modified_by`` when ``identity`` knows the acting
    user) is stamped first. A record without an ``id`` then receives a new
    identifier, ``created`` and ``created_by``; these stay on the instance
    even if validation fails below. Records with no backing row are appended
    to the table and get their new ``row_number``; the others overwrite their
    row in place.

    Args:
        store: The tabular store.
        entity: The record to write.
        identity: Source of the acting user's email.
        id_length: Length of generated identifiers.

    Returns:
        The same record.

    Raises:
        ValidationError: If required columns have no value. Nothing is
            written to the store in that case.
        ConfigurationError: If ``id_length`` is not positive.
    """
    info = resolve_table(store, type(entity))
    headers = info.headers

    entity.modified.value = dt.datetime.now()
    if identity is not None:
        email = identity.current_actor_email()
        if email is not None:
            entity.last_modified_by.value = email

    row = entity_to_row(entity, headers)

    is_new = not entity.id.value
    if is_new:
        stamps = {
            "id": generate_id(id_length),
            "created": entity.modified.value,
            "created_by": entity.last_modified_by.value,
        }
        for name, value in stamps.items():
            entity.set_value(name, value)
            if name in headers:
                row[info.position(name)] = value

    missing = check_required(entity, headers, row)
    if missing:
        logger.warning(
            "Rejected %s %r: missing required %s",
            type(entity).__name__, entity.id.value, missing,
        )
        raise ValidationError(missing)

    if not is_new and entity.row_number > 0:
        store.write_row(info.table, entity.row_number, row)
        logger.debug(
            "Updated %s %r at row %d",
            type(entity).__name__, entity.id.value, entity.row_number,
        )
    else:
        store.append_row(info.table, row)
        entity.row_number = store.last_row_index(info.table)
        logger.debug(
            "Inserted %s %r at row %d",
            type(entity).__name__, entity.id.value, entity.row_number,
        )

    store.commit()
    return entity


def remove(store: TabularStore, entity: Record) -> None:
    """Delete the row backing a record and detach the instance from it.

    Rows below the deleted one move up by one. The instance keeps its
    column values, including ``id``; persisting it again inserts a new row.
    """
    if entity.row_number == 0:
        return

    info = resolve_table(store, type(entity))
    store.delete_row(info.table, entity.row_number)
    logger.debug(
        "Removed %s %r from row %d",
        type(entity).__name__, entity.id.value, entity.row_number,
    )
    entity.row_number = 0
    store.commit()
