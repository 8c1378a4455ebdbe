"""
Tests for general inventory items, the stock movement ledger and purchase orders.
"""
import re
from decimal import Decimal

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import Session

from flockwise.crud import purchase_orders, stock_movements


def item_stock(client, headers, item_id):
    response = client.get(f"/inventory/items/{item_id}", headers=headers)
    assert response.status_code == 200
    return Decimal(response.json()["current_stock"])


def move(client, headers, item_id, movement_type, quantity, movement_date="2025-03-01"):
    payload = {
        "inventory_id": item_id,
        "movement_date": movement_date,
        "movement_type": movement_type,
        "quantity": quantity,
    }
    return client.post("/inventory/stock-movements/", json=payload, headers=headers)


# =============================================================================
# STOCK MOVEMENTS
# =============================================================================

class TestStockMovements:
    """Each movement shifts stock by its signed quantity and records the balance."""

    def test_ledger_balances_follow_signed_quantities(self, client, staff_headers, create_inventory_item):
        item = create_inventory_item(current_stock="10")

        steps = [
            ("purchase", "40", Decimal("50")),
            ("consumption", "15", Decimal("35")),
            ("damage", "5", Decimal("30")),
            ("adjustment", "2", Decimal("32")),
            ("return", "7", Decimal("25")),
        ]
        for movement_type, quantity, expected_balance in steps:
            response = move(client, staff_headers, item["id"], movement_type, quantity)
            assert response.status_code == 201, response.text
            assert Decimal(response.json()["balance_after"]) == expected_balance

        assert item_stock(client, staff_headers, item["id"]) == Decimal("25")

        listing = client.get(
            "/inventory/stock-movements/", params={"inventory_id": item["id"]}, headers=staff_headers
        ).json()
        signs = {"purchase": 1, "adjustment": 1, "consumption": -1, "damage": -1, "return": -1}
        signed_total = sum(Decimal(m["quantity"]) * signs[m["movement_type"]] for m in listing["data"])
        assert Decimal("10") + signed_total == Decimal("25")
        assert listing["summary"]["total_movements"] == 5
        assert listing["summary"]["damages"] == 1

    def test_purchase_movement_sets_restock_date(self, client, staff_headers, create_inventory_item):
        item = create_inventory_item()

        move(client, staff_headers, item["id"], "purchase", "3", movement_date="2025-03-04")

        detail = client.get(f"/inventory/items/{item['id']}", headers=staff_headers).json()
        assert detail["last_restock_date"] == "2025-03-04"

    def test_consuming_more_than_available_is_rejected(self, client, staff_headers, create_inventory_item):
        item = create_inventory_item(current_stock="5")

        response = move(client, staff_headers, item["id"], "consumption", "6")

        assert response.status_code == 400
        assert response.json()["error"].startswith("Insufficient stock")
        assert item_stock(client, staff_headers, item["id"]) == Decimal("5")
        listing = client.get("/inventory/stock-movements/", headers=staff_headers).json()
        assert listing["data"] == []

    def test_unknown_item_returns_404(self, client, staff_headers):
        response = move(client, staff_headers, 4040, "purchase", "1")

        assert response.status_code == 404

    def test_delete_reverses_movement(self, client, staff_headers, create_inventory_item):
        item = create_inventory_item(current_stock="10")
        movement = move(client, staff_headers, item["id"], "consumption", "4").json()

        response = client.delete(f"/inventory/stock-movements/{movement['id']}", headers=staff_headers)

        assert response.status_code == 200
        assert item_stock(client, staff_headers, item["id"]) == Decimal("10")

    def test_delete_refused_when_reversal_goes_negative(self, client, staff_headers, create_inventory_item):
        item = create_inventory_item(current_stock="0")
        restock = move(client, staff_headers, item["id"], "purchase", "10").json()
        move(client, staff_headers, item["id"], "consumption", "8")

        response = client.delete(f"/inventory/stock-movements/{restock['id']}", headers=staff_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Cannot delete movement: would result in negative stock"
        assert item_stock(client, staff_headers, item["id"]) == Decimal("2")

    @pytest.mark.parametrize("quantity", ["0", "-3"])
    def test_quantity_must_be_positive(self, client, staff_headers, create_inventory_item, quantity):
        item = create_inventory_item(current_stock="10")

        response = move(client, staff_headers, item["id"], "adjustment", quantity)

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"


# =============================================================================
# INVENTORY ITEMS
# =============================================================================

class TestInventoryItems:

    def test_stock_is_not_editable_directly(self, client, staff_headers, create_inventory_item):
        item = create_inventory_item(current_stock="10")

        response = client.put(
            f"/inventory/items/{item['id']}",
            json={"current_stock": "999", "unit_cost": "12"},
            headers=staff_headers,
        )

        assert response.status_code == 200
        assert Decimal(response.json()["unit_cost"]) == Decimal("12")
        assert item_stock(client, staff_headers, item["id"]) == Decimal("10")

    def test_summary_counts_low_stock(self, client, staff_headers, create_inventory_item):
        create_inventory_item(current_stock="2", reorder_level="5", unit_cost="10")
        create_inventory_item(current_stock="20", reorder_level="5", unit_cost="1")

        summary = client.get("/inventory/items/", headers=staff_headers).json()["summary"]

        assert summary["total_items"] == 2
        assert summary["low_stock_count"] == 1
        assert Decimal(summary["total_value"]) == Decimal("40")

    def test_delete_refused_while_movements_exist(self, client, staff_headers, create_inventory_item):
        item = create_inventory_item()
        move(client, staff_headers, item["id"], "purchase", "1")

        response = client.delete(f"/inventory/items/{item['id']}", headers=staff_headers)

        assert response.status_code == 409


# =============================================================================
# PURCHASE ORDERS
# =============================================================================

@pytest.fixture
def create_order(client, staff_headers, create_supplier):
    def _create(items, **overrides):
        payload = {
            "supplier_id": create_supplier()["id"],
            "order_date": "2025-04-02",
            "items": items,
        }
        payload.update(overrides)
        response = client.post("/inventory/purchase-orders/", json=payload, headers=staff_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


class TestPurchaseOrders:
    """Orders leave stock alone until they are received, then book every line."""

    def test_create_assigns_order_number_and_total(self, client, staff_headers, create_inventory_item, create_order):
        first = create_inventory_item()
        second = create_inventory_item()

        order = create_order([
            {"inventory_id": first["id"], "quantity_ordered": "10", "unit_price": "2.50"},
            {"inventory_id": second["id"], "quantity_ordered": "4", "unit_price": "10"},
        ])

        assert re.fullmatch(r"PO-20250402-[A-Z0-9]{3}", order["order_number"])
        assert order["status"] == "draft"
        assert Decimal(order["total_amount"]) == Decimal("65")
        assert len(order["items"]) == 2
        assert item_stock(client, staff_headers, first["id"]) == 0

    def test_order_numbers_are_unique(self, client, staff_headers, create_inventory_item, create_order):
        item = create_inventory_item()
        line = [{"inventory_id": item["id"], "quantity_ordered": "1", "unit_price": "1"}]

        numbers = {create_order(line)["order_number"] for _ in range(5)}

        assert len(numbers) == 5

    def test_order_requires_items(self, client, staff_headers, create_supplier):
        payload = {"supplier_id": create_supplier()["id"], "order_date": "2025-04-02", "items": []}

        response = client.post("/inventory/purchase-orders/", json=payload, headers=staff_headers)

        assert response.status_code == 400

    def test_unknown_supplier_returns_404(self, client, staff_headers, create_inventory_item):
        item = create_inventory_item()
        payload = {
            "supplier_id": 999,
            "order_date": "2025-04-02",
            "items": [{"inventory_id": item["id"], "quantity_ordered": "1", "unit_price": "1"}],
        }

        response = client.post("/inventory/purchase-orders/", json=payload, headers=staff_headers)

        assert response.status_code == 404

    def test_receiving_books_stock_and_movements(self, client, staff_headers, create_inventory_item, create_order):
        first = create_inventory_item(current_stock="5")
        second = create_inventory_item(current_stock="0")
        order = create_order([
            {"inventory_id": first["id"], "quantity_ordered": "10", "unit_price": "3"},
            {"inventory_id": second["id"], "quantity_ordered": "8", "unit_price": "1"},
        ])
        short_line = next(line for line in order["items"] if line["inventory_id"] == second["id"])

        response = client.put(
            f"/inventory/purchase-orders/{order['id']}",
            json={
                "status": "received",
                "actual_delivery": "2025-04-10",
                "items": [{"id": short_line["id"], "quantity_received": "6"}],
            },
            headers=staff_headers,
        )

        assert response.status_code == 200, response.text
        body = response.json()
        assert body["status"] == "received"
        assert body["actual_delivery"] == "2025-04-10"
        assert item_stock(client, staff_headers, first["id"]) == Decimal("15")
        assert item_stock(client, staff_headers, second["id"]) == Decimal("6")

        movements = client.get(
            "/inventory/stock-movements/", params={"inventory_id": first["id"]}, headers=staff_headers
        ).json()["data"]
        assert len(movements) == 1
        assert movements[0]["movement_type"] == "purchase"
        assert movements[0]["reference_number"] == order["order_number"]
        assert Decimal(movements[0]["balance_after"]) == Decimal("15")
        assert movements[0]["movement_date"] == "2025-04-10"

    def test_received_order_cannot_go_back(self, client, staff_headers, create_inventory_item, create_order):
        item = create_inventory_item()
        order = create_order([{"inventory_id": item["id"], "quantity_ordered": "2", "unit_price": "1"}])
        client.put(f"/inventory/purchase-orders/{order['id']}", json={"status": "received"}, headers=staff_headers)

        response = client.put(f"/inventory/purchase-orders/{order['id']}", json={"status": "draft"}, headers=staff_headers)

        assert response.status_code == 409
        assert item_stock(client, staff_headers, item["id"]) == Decimal("2")

    def test_receiving_twice_books_stock_once(self, client, staff_headers, create_inventory_item, create_order):
        item = create_inventory_item()
        order = create_order([{"inventory_id": item["id"], "quantity_ordered": "2", "unit_price": "1"}])

        for _ in range(2):
            response = client.put(
                f"/inventory/purchase-orders/{order['id']}", json={"status": "received"}, headers=staff_headers
            )
            assert response.status_code == 200

        assert item_stock(client, staff_headers, item["id"]) == Decimal("2")

    def test_received_order_cannot_be_deleted(self, client, staff_headers, create_inventory_item, create_order):
        item = create_inventory_item()
        order = create_order([{"inventory_id": item["id"], "quantity_ordered": "2", "unit_price": "1"}])
        client.put(f"/inventory/purchase-orders/{order['id']}", json={"status": "received"}, headers=staff_headers)

        response = client.delete(f"/inventory/purchase-orders/{order['id']}", headers=staff_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Cannot delete a received purchase order"}

    def test_draft_order_can_be_deleted(self, client, staff_headers, create_inventory_item, create_order):
        item = create_inventory_item()
        order = create_order([{"inventory_id": item["id"], "quantity_ordered": "2", "unit_price": "1"}])

        response = client.delete(f"/inventory/purchase-orders/{order['id']}", headers=staff_headers)

        assert response.status_code == 200
        assert client.get(f"/inventory/purchase-orders/{order['id']}", headers=staff_headers).status_code == 404

    def test_summary_groups_statuses(self, client, staff_headers, create_inventory_item, create_order):
        item = create_inventory_item()
        line = [{"inventory_id": item["id"], "quantity_ordered": "1", "unit_price": "10"}]
        create_order(line)
        create_order(line, status="submitted")
        received = create_order(line)
        client.put(f"/inventory/purchase-orders/{received['id']}", json={"status": "received"}, headers=staff_headers)

        summary = client.get("/inventory/purchase-orders/", headers=staff_headers).json()["summary"]

        assert summary["total_orders"] == 3
        assert summary["draft_orders"] == 1
        assert summary["pending_orders"] == 1
        assert summary["received_orders"] == 1
        assert Decimal(summary["total_value"]) == Decimal("30")

    def test_line_received_as_zero_books_nothing(self, client, staff_headers, create_inventory_item, create_order):
        arrived = create_inventory_item(current_stock="3")
        missing = create_inventory_item(current_stock="3")
        order = create_order([
            {"inventory_id": arrived["id"], "quantity_ordered": "5", "unit_price": "2"},
            {"inventory_id": missing["id"], "quantity_ordered": "5", "unit_price": "2"},
        ])
        missing_line = next(line for line in order["items"] if line["inventory_id"] == missing["id"])

        response = client.put(
            f"/inventory/purchase-orders/{order['id']}",
            json={"status": "received", "items": [{"id": missing_line["id"], "quantity_received": "0"}]},
            headers=staff_headers,
        )

        assert response.status_code == 200, response.text
        lines = {line["inventory_id"]: line for line in response.json()["items"]}
        assert Decimal(lines[missing["id"]]["quantity_received"]) == Decimal("0")
        assert item_stock(client, staff_headers, arrived["id"]) == Decimal("8")
        assert item_stock(client, staff_headers, missing["id"]) == Decimal("3")
        movements = client.get(
            "/inventory/stock-movements/", params={"inventory_id": missing["id"]}, headers=staff_headers
        ).json()["data"]
        assert movements == []


# =============================================================================
# ROW LOCKS
# =============================================================================

def postgres_sql(query):
    return str(query.statement.compile(dialect=postgresql.dialect()))


class TestRowLocks:
    """Order receipt/delete and movement delete read their row FOR UPDATE."""

    def test_order_is_read_for_update(self):
        with Session() as session:
            sql = postgres_sql(purchase_orders.locked_order_query(session, 1))

        assert "FROM purchase_orders" in sql
        assert sql.rstrip().endswith("FOR UPDATE")

    def test_movement_is_read_for_update(self):
        with Session() as session:
            sql = postgres_sql(stock_movements.locked_movement_query(session, 1))

        assert "FROM stock_movements" in sql
        assert sql.rstrip().endswith("FOR UPDATE")

    def test_second_delete_of_movement_finds_nothing(self, client, staff_headers, create_inventory_item):
        item = create_inventory_item(current_stock="10")
        movement = move(client, staff_headers, item["id"], "consumption", "4").json()

        first = client.delete(f"/inventory/stock-movements/{movement['id']}", headers=staff_headers)
        second = client.delete(f"/inventory/stock-movements/{movement['id']}", headers=staff_headers)

        assert first.status_code == 200
        assert second.status_code == 404
        assert item_stock(client, staff_headers, item["id"]) == Decimal("10")
