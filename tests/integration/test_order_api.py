"""Integration tests for order placement and order queries."""

from __future__ import annotations

from datetime import timedelta

import pytest
from django.utils import timezone

from modules.orders.models import Order, OrderItem
from modules.products.models import Product

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


def _place(api_client, *lines):
    payload = {
        "items": [{"product_id": pid, "quantity": qty} for pid, qty in lines],
    }
    return api_client.post(URL, payload, format="json")


class TestPlaceOrder:
    def test_returns_201_with_detail(self, api_client, make_product):
        hub = make_product(name="USB-C Hub", sku="ELEC-003", price_cents=4999, stock_quantity=120)
        lamp = make_product(name="Desk Lamp", sku="FURN-003", price_cents=3999, stock_quantity=85)

        response = _place(api_client, (hub.id, 2), (lamp.id, 1))

        assert response.status_code == 201
        data = response.json()
        assert set(data) == {"id", "created_at", "items", "total_cents", "item_count"}
        assert data["total_cents"] == 2 * 4999 + 3999
        assert data["item_count"] == 3
        assert data["items"] == [
            {
                "product_id": hub.id,
                "product_name": "USB-C Hub",
                "product_sku": "ELEC-003",
                "quantity": 2,
                "unit_price_cents": 4999,
                "subtotal_cents": 9998,
            },
            {
                "product_id": lamp.id,
                "product_name": "Desk Lamp",
                "product_sku": "FURN-003",
                "quantity": 1,
                "unit_price_cents": 3999,
                "subtotal_cents": 3999,
            },
        ]

    def test_decrements_stock(self, api_client, make_product):
        product = make_product(stock_quantity=10)

        _place(api_client, (product.id, 4))

        product.refresh_from_db()
        assert product.stock_quantity == 6

    def test_exact_stock_is_allowed(self, api_client, make_product):
        product = make_product(stock_quantity=3)

        response = _place(api_client, (product.id, 3))

        assert response.status_code == 201
        product.refresh_from_db()
        assert product.stock_quantity == 0

    def test_duplicate_lines_are_merged(self, api_client, make_product):
        product = make_product(price_cents=100, stock_quantity=10)

        response = _place(api_client, (product.id, 2), (product.id, 3))

        assert response.status_code == 201
        items = response.json()["items"]
        assert len(items) == 1
        assert items[0]["quantity"] == 5
        product.refresh_from_db()
        assert product.stock_quantity == 5

    def test_items_total_matches_line_items(self, api_client, make_product):
        products = [make_product(price_cents=price) for price in (199, 2500, 7)]

        data = _place(api_client, *[(p.id, n + 1) for n, p in enumerate(products)]).json()

        assert data["total_cents"] == sum(item["subtotal_cents"] for item in data["items"])

    def test_unknown_product_returns_404(self, api_client, make_product):
        product = make_product(stock_quantity=10)

        response = _place(api_client, (product.id, 1), (999999, 1))

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "product_not_found"
        assert Order.objects.count() == 0
        product.refresh_from_db()
        assert product.stock_quantity == 10

    def test_insufficient_stock_returns_409(self, api_client, make_product):
        product = make_product(stock_quantity=3)

        response = _place(api_client, (product.id, 4))

        assert response.status_code == 409
        error = response.json()["errors"][0]
        assert error["code"] == "insufficient_stock"
        assert "available 3" in error["detail"]
        product.refresh_from_db()
        assert product.stock_quantity == 3
        assert Order.objects.count() == 0

    @pytest.mark.parametrize(
        ("payload", "attr"),
        [
            ({}, "items"),
            ({"items": []}, "items"),
            ({"items": [{"product_id": 1, "quantity": 0}]}, "items.0.quantity"),
            ({"items": [{"quantity": 1}]}, "items.0.product_id"),
            ({"items": [{"product_id": "abc", "quantity": 1}]}, "items.0.product_id"),
            ({"items": "nope"}, "items"),
            ({"items": [{"product_id": 10**20, "quantity": 1}]}, "items.0.product_id"),
            ({"items": [{"product_id": 1, "quantity": 2**31}]}, "items.0.quantity"),
        ],
    )
    def test_invalid_payload_returns_400(self, api_client, payload, attr):
        response = api_client.post(URL, payload, format="json")

        assert response.status_code == 400
        data = response.json()
        assert data["type"] == "validation_error"
        assert attr in {error["attr"] for error in data["errors"]}

    def test_price_change_after_placement_does_not_touch_order(
        self, api_client, make_product
    ):
        product = make_product(price_cents=1000, stock_quantity=10)
        order_id = _place(api_client, (product.id, 2)).json()["id"]

        api_client.patch(
            f"/api/v1/products/{product.id}/", {"price_cents": 5000}, format="json"
        )

        data = api_client.get(f"{URL}{order_id}/").json()
        assert data["items"][0]["unit_price_cents"] == 1000
        assert data["total_cents"] == 2000


class TestOrderQueries:
    def test_retrieve(self, api_client, make_product):
        product = make_product()
        order_id = _place(api_client, (product.id, 1)).json()["id"]

        response = api_client.get(f"{URL}{order_id}/")

        assert response.status_code == 200
        assert response.json()["id"] == order_id
        assert len(response.json()["items"]) == 1

    def test_retrieve_missing_returns_404(self, api_client):
        response = api_client.get(f"{URL}999999/")
        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "order_not_found"

    def test_list_returns_summaries_newest_first(self, api_client, make_product):
        product = make_product(price_cents=300, stock_quantity=50)
        first = _place(api_client, (product.id, 1)).json()["id"]
        second = _place(api_client, (product.id, 2)).json()["id"]

        response = api_client.get(URL)

        assert response.status_code == 200
        data = response.json()
        assert [order["id"] for order in data] == [second, first]
        assert data[0] == {
            "id": second,
            "created_at": data[0]["created_at"],
            "total_cents": 600,
            "item_count": 2,
        }

    def test_list_filters_by_total(self, api_client, make_product):
        product = make_product(price_cents=100, stock_quantity=50)
        small = _place(api_client, (product.id, 1)).json()["id"]
        large = _place(api_client, (product.id, 10)).json()["id"]

        ids = [o["id"] for o in api_client.get(URL, {"min_total": 500}).json()]
        assert ids == [large]
        ids = [o["id"] for o in api_client.get(URL, {"max_total": 500}).json()]
        assert ids == [small]

    def test_list_filters_by_date(self, api_client, make_product):
        product = make_product(stock_quantity=50)
        old = _place(api_client, (product.id, 1)).json()["id"]
        recent = _place(api_client, (product.id, 1)).json()["id"]
        cutoff = timezone.now() - timedelta(days=1)
        Order.objects.filter(id=old).update(created_at=cutoff - timedelta(days=2))

        after = api_client.get(URL, {"created_after": cutoff.isoformat()}).json()
        before = api_client.get(URL, {"created_before": cutoff.isoformat()}).json()

        assert [o["id"] for o in after] == [recent]
        assert [o["id"] for o in before] == [old]

    def test_orders_cannot_be_modified(self, api_client, make_product):
        product = make_product()
        order_id = _place(api_client, (product.id, 1)).json()["id"]

        assert api_client.patch(f"{URL}{order_id}/", {}, format="json").status_code == 405
        assert api_client.delete(f"{URL}{order_id}/").status_code == 405
        assert OrderItem.objects.filter(order_id=order_id).count() == 1
        assert Product.objects.get(id=product.id).stock_quantity == 9
