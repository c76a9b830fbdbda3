"""Tests for the Record base class and record serialization."""

import datetime as dt
import json

import pytest

from typed_sheets import NUMBER, STRING, ColumnValueError, Record
from typed_sheets.types import ColumnKind, ColumnSpec, RecordTypeRegistry, default_registry

from records import Customer, Item, Order


class TestDeclaration:
    """Tests for column declaration on record classes."""

    def test_header_order(self):
        """Test implicit columns first, then declared columns in order."""
        assert Item.column_names() == [
            "id", "created", "modified", "created_by", "last_modified_by", "name", "qty",
        ]

    def test_declarations_become_specs(self):
        assert isinstance(Item.name, ColumnSpec)
        assert Item.name == ColumnSpec("name", ColumnKind.STRING, required=True, default="")

    def test_implicit_requirements(self):
        specs = {s.name: s for s in Record.__columns__}
        assert specs["id"].required
        assert specs["created"].required
        assert specs["modified"].required
        assert not specs["created_by"].required
        assert not specs["last_modified_by"].required

    def test_inherited_columns_come_first(self):
        class Base(Record, register=False):
            a = STRING()

        class Child(Base, register=False):
            b = NUMBER()

        assert Child.column_names()[-2:] == ["a", "b"]

    def test_table_name(self):
        class Renamed(Record, register=False):
            __table_name__ = "Stock"

        assert Item.table_name() == "Item"
        assert Renamed.table_name() == "Stock"

    def test_registration_keywords(self):
        registry = RecordTypeRegistry()

        class Listed(Record, registry=registry):
            __table_name__ = "Ledger"

        class Unlisted(Record, register=False):
            pass

        assert registry.get("Ledger") is Listed
        assert "Ledger" not in default_registry
        assert "Unlisted" not in default_registry
        assert default_registry.get("Item") is Item

    def test_duplicate_name_rejected(self):
        with pytest.raises(ValueError, match="already defined"):
            class Item(Record):  # noqa: F811
                pass


class TestConstruction:
    """Tests for creating record instances."""

    def test_blank_instance(self):
        item = Item()
        assert item.row_number == 0
        assert item.id.value == ""
        assert item.name.value == ""
        assert item.qty.value == 0
        assert isinstance(item.created.value, dt.datetime)
        assert isinstance(item.modified.value, dt.datetime)
        assert not item.is_persisted

    def test_positional_values(self):
        item = Item("widget", 5)
        assert item.name.value == "widget"
        assert item.qty.value == 5

    def test_keyword_values(self):
        item = Item(qty=2, name="bolt", row_number=4)
        assert item.get_value("name") == "bolt"
        assert item.row_number == 4

    def test_too_many_positional_values(self):
        with pytest.raises(TypeError):
            Item("widget", 5, 6)

    def test_duplicate_value(self):
        with pytest.raises(TypeError):
            Item("widget", name="bolt")

    def test_unknown_column(self):
        with pytest.raises(TypeError):
            Item(colour="red")

    def test_invalid_value(self):
        with pytest.raises(ColumnValueError):
            Item("widget", "many")

    def test_instances_do_not_share_columns(self):
        first, second = Item(), Item()
        first.set_value("name", "changed")
        assert second.name.value == ""
        assert first.name is not second.name


class TestValues:
    """Tests for get_value/set_value."""

    def test_set_and_get(self):
        item = Item()
        item.set_value("qty", 9)
        assert item.get_value("qty") == 9
        assert item.column_values()["qty"] == 9

    def test_unknown_name(self):
        item = Item()
        with pytest.raises(KeyError):
            item.get_value("colour")
        with pytest.raises(KeyError):
            item.set_value("row_number", 3)

    def test_column_values_in_header_order(self):
        assert list(Item().column_values()) == Item.column_names()


class TestSerialization:
    """Tests for to_simple_object, object_extension and stringify."""

    def test_simple_object(self):
        item = Item("widget", 5)
        simple = item.to_simple_object()
        assert list(simple) == Item.column_names()
        assert simple["name"] == "widget"
        assert simple["qty"] == 5
        assert "row_number" not in simple

    def test_nested_records(self):
        order = Order("C1", quantity=2)
        order.customer_ = Customer("Alice", id="C1")
        order.item_ = None
        simple = order.to_simple_object()
        assert simple["customer_"]["name"] == "Alice"
        assert "item_" not in simple

    def test_object_extension(self):
        class Priced(Record, register=False):
            price = NUMBER()
            qty = NUMBER()

            def object_extension(self, simple_object, extend_with=None):
                simple_object["total"] = simple_object["price"] * simple_object["qty"]
                if extend_with:
                    simple_object.update(extend_with)
                return simple_object

        priced = Priced(2, 3)
        assert priced.to_simple_object()["total"] == 6
        assert priced.to_simple_object({"currency": "EUR"})["currency"] == "EUR"

    def test_stringify(self):
        item = Item("widget", 5, created=dt.datetime(2024, 1, 2, 3, 4, 5))
        data = json.loads(item.stringify())
        assert data["name"] == "widget"
        assert data["created"] == "2024-01-02T03:04:05"
        assert str(item) == item.stringify()

    def test_print_logs_json(self, caplog):
        with caplog.at_level("INFO", logger="typed_sheets.record"):
            Item("widget", 5).print()
        assert '"name": "widget"' in caplog.text

    def test_repr(self):
        assert repr(Item(id="abc", row_number=3)) == "Item(id='abc', row_number=3)"
