"""Tests for find_all, find_by_id and filter_by_conditions."""

from typed_sheets.persistence import persist
from typed_sheets.query import filter_by_conditions, find_all, find_by_id

from records import Item


def _stock(store):
    """Persist three items and return them."""
    return [
        persist(store, Item("widget", 5)),
        persist(store, Item("bolt", 2)),
        persist(store, Item("nut", 9)),
    ]


def _ids(items):
    return [i.id.value for i in items]


class TestFindAll:
    """Tests for find_all."""

    def test_empty_table(self, store):
        assert find_all(store, Item) == []
        assert store.get_table("Item") is not None

    def test_returns_rows_in_order(self, store):
        stocked = _stock(store)
        found = find_all(store, Item)

        assert _ids(found) == _ids(stocked)
        assert [i.row_number for i in found] == [2, 3, 4]
        assert all(isinstance(i, Item) for i in found)

    def test_round_trip(self, store):
        item = persist(store, Item("widget", 5))
        [found] = find_all(store, Item)
        assert found.column_values() == item.column_values()


class TestFindById:
    """Tests for find_by_id."""

    def test_found(self, store):
        stocked = _stock(store)
        found = find_by_id(store, Item, stocked[1].id.value)
        assert found is not None
        assert found.name.value == "bolt"
        assert found.row_number == 3

    def test_not_found(self, store):
        _stock(store)
        assert find_by_id(store, Item, "missing") is None

    def test_stray_cell_does_not_hide_other_rows(self, store):
        stocked = _stock(store)
        table = store.get_table("Item")
        headers = store.read_range(table, 1, 1, 1, store.last_column_index(table))[0]
        store.write_range(table, 2, headers.index("name") + 1, [[7]])
        store.write_range(table, 3, headers.index("qty") + 1, [["n/a"]])

        found = find_by_id(store, Item, stocked[2].id.value)
        assert found is not None
        assert found.name.value == "nut"
        names = [i.name.value for i in find_all(store, Item)]
        assert names == ["7", "bolt", "nut"]


class TestFilterByConditions:
    """Tests for filter_by_conditions."""

    def test_predicates(self, store):
        _stock(store)
        found = filter_by_conditions(store, Item, {"qty": lambda q: q > 3})
        assert [i.name.value for i in found] == ["widget", "nut"]

    def test_all_conditions_must_hold(self, store):
        _stock(store)
        found = filter_by_conditions(
            store, Item, {"qty": lambda q: q > 3, "name": lambda n: n.startswith("n")}
        )
        assert [i.name.value for i in found] == ["nut"]

    def test_non_callable_condition_matches_everything(self, store):
        stocked = _stock(store)
        found = filter_by_conditions(store, Item, {"qty": 5})
        assert _ids(found) == _ids(find_all(store, Item)) == _ids(stocked)

    def test_mixed_conditions(self, store):
        _stock(store)
        found = filter_by_conditions(store, Item, {"qty": 5, "name": lambda n: n == "bolt"})
        assert [i.name.value for i in found] == ["bolt"]

    def test_empty_conditions_match_nothing(self, store):
        _stock(store)
        assert filter_by_conditions(store, Item, {}) == []

    def test_non_column_property(self, store):
        _stock(store)
        found = filter_by_conditions(store, Item, {"row_number": lambda r: r == 4})
        assert [i.name.value for i in found] == ["nut"]
