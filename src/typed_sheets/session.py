"""Session binding a store, an identity provider and settings together."""

from __future__ import annotations

from typing import Any, Mapping, Optional, TypeVar

from typed_sheets import persistence, query, relations
from typed_sheets.config import Settings, get_settings
from typed_sheets.json_store import JsonFileStore
from typed_sheets.record import Record
from typed_sheets.schema import TableInfo, resolve_table
from typed_sheets.store import EnvironmentIdentity, IdentityProvider, TabularStore
from typed_sheets.types import RecordTypeRegistry

R = TypeVar("R", bound=Record)


class Session:
    """Entry point for reading and writing records against one store.

    Without a store, tables are kept as JSON files under the configured
    ``data_dir``. Without an identity provider, the acting user is the
    configured ``actor_email``.

    Example::

        with Session(MemoryStore(), StaticIdentity("me@example.com")) as session:
            item = session.persist(Item("widget", 5))
            same = session.find_by_id(Item, item.id.value)
    """

    def __init__(
        self,
        store: TabularStore | None = None,
        identity: IdentityProvider | None = None,
        settings: Settings | None = None,
        registry: RecordTypeRegistry | None = None,
    ) -> None:
        self.settings = settings if settings is not None else get_settings()
        if store is None:
            store = JsonFileStore.from_settings(self.settings)
        if identity is None:
            identity = EnvironmentIdentity(self.settings)
        self.store = store
        self.identity = identity
        self.registry = registry

    def resolve_table(self, record_type: type[Record]) -> TableInfo:
        return resolve_table(self.store, record_type)

    def find_all(self, record_type: type[R]) -> list[R]:
        return query.find_all(self.store, record_type)

    def find_by_id(self, record_type: type[R], id: str) -> Optional[R]:
        return query.find_by_id(self.store, record_type, id)

    def filter_by_conditions(
        self, record_type: type[R], conditions: Mapping[str, Any]
    ) -> list[R]:
        return query.filter_by_conditions(self.store, record_type, conditions)

    def persist(self, entity: R) -> R:
        persistence.persist(
            self.store, entity, self.identity, id_length=self.settings.id_length
        )
        return entity

    def remove(self, entity: Record) -> None:
        persistence.remove(self.store, entity)

    def expand(self, entity: R) -> R:
        relations.expand(self.store, entity, self.registry)
        return entity

    def close(self) -> None:
        self.store.close()

    def __enter__(self) -> Session:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
