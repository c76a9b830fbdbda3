"""Example usage of the typed_sheets library."""

from pathlib import Path

from typed_sheets import (
    DATE,
    FOREIGNKEY,
    NUMBER,
    STRING,
    JsonFileStore,
    Record,
    Session,
    StaticIdentity,
)
from typed_sheets.config import configure_logging


class Customer(Record):
    name = STRING()
    city = STRING(required=False)


class Order(Record):
    customer = FOREIGNKEY(foreign_type="Customer")
    quantity = NUMBER()
    due = DATE(required=False)


configure_logging("INFO")

# Each record type is stored in <data_dir>/<TypeName>.json
data_dir = Path("./example_data")

with Session(JsonFileStore(data_dir), StaticIdentity("clerk@example.com")) as session:
    print("Creating customers...")
    customers = [
        session.persist(Customer("Alice", "New York")),
        session.persist(Customer("Bob", "Los Angeles")),
        session.persist(Customer("Charlie")),
    ]
    for customer in customers:
        print(f"  Created: {customer!r}")

    print("\nCreating orders...")
    for customer, quantity in zip(customers, (3, 12, 7)):
        order = session.persist(Order(customer.id.value, quantity))
        print(f"  Created: {order!r}")

    print("\nOrders of more than 5 units:")
    for order in session.filter_by_conditions(Order, {"quantity": lambda q: q > 5}):
        session.expand(order)
        print(f"  {order.customer_.name.value}: {order.quantity.value}")

    print("\nFirst order as JSON:")
    print(session.find_all(Order)[0])

    print(f"\nFiles created in {data_dir}:")
    for f in sorted(data_dir.iterdir()):
        print(f"  {f.name} ({f.stat().st_size} bytes)")
