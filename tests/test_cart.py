"""
Tests for cart endpoints.

Tests cover:
- Cart listing with order summary
- Cart badge count
- Adding a product (upsert) and best-effort history tracking
- Quantity updates, including rejection of quantities below 1
- Item removal
- Authentication and error cases
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock, patch

from storefront.main import app

client = TestClient(app)


@pytest.fixture
def mock_cart_row(catalog):
    """A cart row with its embedded product."""
    return {
        "id": "cart-123",
        "user_id": "test-user-id",
        "product_id": "e-1",
        "quantity": 1,
        "products": catalog["electronics"][0],
    }


@pytest.fixture
def mock_get_supabase_client():
    """Mock get_supabase_client to return a fake client."""
    with patch("storefront.routes.cart.get_supabase_client") as mock:
        mock.return_value = MagicMock()
        yield mock


class TestGetCart:
    """Tests for GET /cart"""

    @patch("storefront.routes.cart.get_cart_items", new_callable=AsyncMock)
    def test_get_cart_success(self, mock_get_items, mock_auth, mock_get_supabase_client, mock_cart_row, catalog):
        second = dict(mock_cart_row, id="cart-456", product_id="s-1", quantity=2,
                      products=catalog["smart home"][0])
        mock_get_items.return_value = [mock_cart_row, second]

        response = client.get("/cart")

        assert response.status_code == 200
        data = response.json()
        assert len(data["items"]) == 2
        assert data["items"][0]["product"]["name"] == "Noise Cancelling Headphones"
        assert data["summary"] == {
            "subtotal": 8999 + 2 * 799,
            "shipping": 0.0,
            "total": 8999 + 2 * 799,
            "item_count": 3,
        }

    @patch("storefront.routes.cart.get_cart_items", new_callable=AsyncMock)
    def test_get_cart_empty(self, mock_get_items, mock_auth, mock_get_supabase_client):
        mock_get_items.return_value = []

        response = client.get("/cart")

        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["summary"]["total"] == 0

    @patch("storefront.routes.cart.get_cart_items", new_callable=AsyncMock)
    def test_get_cart_store_error(self, mock_get_items, mock_auth, mock_get_supabase_client):
        mock_get_items.side_effect = Exception("timeout")

        response = client.get("/cart")

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "fetch_error"

    def test_get_cart_requires_auth(self):
        response = client.get("/cart")

        assert response.status_code == 401


class TestCartCount:
    """Tests for GET /cart/count"""

    @patch("storefront.routes.cart.get_cart_items_count", new_callable=AsyncMock)
    def test_count(self, mock_count, mock_auth, mock_get_supabase_client):
        mock_count.return_value = 4

        response = client.get("/cart/count")

        assert response.status_code == 200
        assert response.json() == {"count": 4}


class TestAddCartItem:
    """Tests for POST /cart/items"""

    @patch("storefront.routes.cart.try_record_product_view", new_callable=AsyncMock)
    @patch("storefront.routes.cart.add_to_cart", new_callable=AsyncMock)
    def test_add_success(self, mock_add, mock_track, mock_auth, mock_get_supabase_client, mock_cart_row):
        row = dict(mock_cart_row)
        row.pop("products")
        mock_add.return_value = row

        response = client.post("/cart/items", json={"product_id": "e-1"})

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "ADDED"
        assert data["message"] == "Added to cart!"
        assert data["item"]["quantity"] == 1
        assert data["item"]["product"] is None

        supabase = mock_get_supabase_client.return_value
        mock_add.assert_awaited_once_with(supabase, "test-user-id", "e-1")
        mock_track.assert_awaited_once_with(supabase, "test-user-id", "e-1")

    @patch("storefront.routes.cart.try_record_product_view", new_callable=AsyncMock)
    @patch("storefront.routes.cart.add_to_cart", new_callable=AsyncMock)
    def test_add_store_error(self, mock_add, mock_track, mock_auth, mock_get_supabase_client):
        mock_add.side_effect = Exception("foreign key violation")

        response = client.post("/cart/items", json={"product_id": "missing"})

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "create_error"
        # The view is recorded even though the cart write failed
        mock_track.assert_awaited_once_with(mock_get_supabase_client.return_value, "test-user-id", "missing")

    def test_add_missing_product_id(self, mock_auth, mock_get_supabase_client):
        response = client.post("/cart/items", json={})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"


class TestUpdateCartItem:
    """Tests for PATCH /cart/items/{cart_item_id}"""

    @patch("storefront.routes.cart.update_cart_item_quantity", new_callable=AsyncMock)
    def test_update_success(self, mock_update, mock_auth, mock_get_supabase_client, mock_cart_row):
        mock_update.return_value = dict(mock_cart_row, quantity=3)

        response = client.patch("/cart/items/cart-123", json={"quantity": 3})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "UPDATED"
        assert data["item"]["quantity"] == 3
        mock_update.assert_awaited_once_with(
            mock_get_supabase_client.return_value, "test-user-id", "cart-123", 3
        )

    @pytest.mark.parametrize("quantity", [0, -2])
    @patch("storefront.routes.cart.update_cart_item_quantity", new_callable=AsyncMock)
    def test_update_below_one_rejected(self, mock_update, quantity, mock_auth, mock_get_supabase_client):
        response = client.patch("/cart/items/cart-123", json={"quantity": quantity})

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invalid_quantity"
        mock_update.assert_not_awaited()
        mock_get_supabase_client.assert_not_called()

    @patch("storefront.routes.cart.update_cart_item_quantity", new_callable=AsyncMock)
    def test_update_not_found(self, mock_update, mock_auth, mock_get_supabase_client):
        mock_update.return_value = None

        response = client.patch("/cart/items/missing", json={"quantity": 2})

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "not_found"


class TestDeleteCartItem:
    """Tests for DELETE /cart/items/{cart_item_id}"""

    @patch("storefront.routes.cart.remove_cart_item", new_callable=AsyncMock)
    def test_delete_success(self, mock_remove, mock_auth, mock_get_supabase_client):
        mock_remove.return_value = True

        response = client.delete("/cart/items/cart-123")

        assert response.status_code == 200
        assert response.json() == {
            "status": "DELETED",
            "cart_item_id": "cart-123",
            "message": "Item removed from cart",
        }

    @patch("storefront.routes.cart.remove_cart_item", new_callable=AsyncMock)
    def test_delete_not_found(self, mock_remove, mock_auth, mock_get_supabase_client):
        mock_remove.return_value = False

        response = client.delete("/cart/items/missing")

        assert response.status_code == 404
