"""Integration tests for standardized error responses."""

from unittest.mock import patch

import pytest

pytestmark = pytest.mark.integration


def _assert_envelope(data, error_type):
    assert data["type"] == error_type
    assert isinstance(data["errors"], list)
    assert data["errors"]
    for error in data["errors"]:
        assert set(error) == {"code", "detail", "attr"}


class TestStandardizedErrors:
    def test_malformed_json_is_validation_error(self, api_client):
        response = api_client.post(
            "/api/v1/products/", data="{", content_type="application/json"
        )
        assert response.status_code == 400
        _assert_envelope(response.json(), "validation_error")

    def test_serializer_error_has_standard_format(self, api_client):
        response = api_client.post("/api/v1/orders/", {"items": []}, format="json")
        assert response.status_code == 400
        _assert_envelope(response.json(), "validation_error")

    def test_not_found_has_standard_format(self, api_client):
        response = api_client.get("/api/v1/orders/424242/")
        assert response.status_code == 404
        _assert_envelope(response.json(), "client_error")

    def test_conflict_has_standard_format(self, api_client, make_product):
        make_product(sku="DUP-1")
        response = api_client.post(
            "/api/v1/products/",
            {"name": "Dup", "sku": "DUP-1", "price_cents": 1},
            format="json",
        )
        assert response.status_code == 409
        _assert_envelope(response.json(), "client_error")

    def test_method_not_allowed_has_standard_format(self, api_client):
        response = api_client.put("/api/v1/orders/1/", {}, format="json")
        assert response.status_code == 405
        _assert_envelope(response.json(), "client_error")

    def test_unexpected_error_is_generic_500(self, api_client, make_product):
        product = make_product()
        with patch(
            "modules.products.services.ProductService.get_product",
            side_effect=RuntimeError("sqlstate 40001 at products_pkey"),
        ):
            response = api_client.get(f"/api/v1/products/{product.id}/")

        assert response.status_code == 500
        data = response.json()
        _assert_envelope(data, "server_error")
        assert data["errors"][0]["detail"] == "Internal server error."
        assert "products_pkey" not in response.content.decode()
