"""
Tests for the cart service.

Covers:
- Upsert on (user_id, product_id) so repeated adds keep a single row
- Quantity validation before any store call
- Order summary arithmetic
"""

import pytest
from unittest.mock import MagicMock

from storefront.services.cart_service import (
    InvalidQuantityError,
    add_to_cart,
    calculate_cart_totals,
    get_cart_items,
    get_cart_items_count,
    remove_cart_item,
    update_cart_item_quantity,
)


class FakeCartTable:
    """In-memory cart_items table honouring the (user_id, product_id) upsert key."""

    def __init__(self):
        self.rows = []
        self._pending = None

    def upsert(self, row, on_conflict=None):
        keys = on_conflict.split(",")
        for existing in self.rows:
            if all(existing[k] == row[k] for k in keys):
                existing.update(row)
                self._pending = [dict(existing)]
                return self
        new_row = dict(row, id=f"cart-{len(self.rows) + 1}")
        self.rows.append(new_row)
        self._pending = [dict(new_row)]
        return self

    def execute(self):
        return MagicMock(data=self._pending)


@pytest.fixture
def fake_cart_client():
    table = FakeCartTable()
    client = MagicMock()
    client.table.return_value = table
    client.cart_table = table
    return client


class TestAddToCart:

    @pytest.mark.asyncio
    async def test_upserts_with_quantity_one(self, supabase_client):
        table = supabase_client.table.return_value
        table.upsert.return_value.execute.return_value.data = [
            {"id": "cart-1", "user_id": "u-1", "product_id": "p-1", "quantity": 1}
        ]

        row = await add_to_cart(supabase_client, "u-1", "p-1")

        supabase_client.table.assert_called_with("cart_items")
        table.upsert.assert_called_once_with(
            {"user_id": "u-1", "product_id": "p-1", "quantity": 1},
            on_conflict="user_id,product_id",
        )
        assert row["id"] == "cart-1"

    @pytest.mark.asyncio
    async def test_adding_twice_leaves_one_row(self, fake_cart_client):
        first = await add_to_cart(fake_cart_client, "u-1", "p-1")
        second = await add_to_cart(fake_cart_client, "u-1", "p-1")

        assert len(fake_cart_client.cart_table.rows) == 1
        assert first["id"] == second["id"]
        assert second["quantity"] == 1

    @pytest.mark.asyncio
    async def test_existing_quantity_resets_to_one(self, fake_cart_client):
        await add_to_cart(fake_cart_client, "u-1", "p-1")
        fake_cart_client.cart_table.rows[0]["quantity"] = 4

        row = await add_to_cart(fake_cart_client, "u-1", "p-1")

        assert row["quantity"] == 1

    @pytest.mark.asyncio
    async def test_different_users_get_separate_rows(self, fake_cart_client):
        await add_to_cart(fake_cart_client, "u-1", "p-1")
        await add_to_cart(fake_cart_client, "u-2", "p-1")

        assert len(fake_cart_client.cart_table.rows) == 2

    @pytest.mark.asyncio
    async def test_no_data_raises(self, supabase_client):
        supabase_client.table.return_value.upsert.return_value.execute.return_value.data = []

        with pytest.raises(Exception, match="Failed to add item to cart"):
            await add_to_cart(supabase_client, "u-1", "p-1")


class TestUpdateCartItemQuantity:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, -1])
    async def test_below_one_raises_without_store_call(self, supabase_client, quantity):
        with pytest.raises(InvalidQuantityError):
            await update_cart_item_quantity(supabase_client, "u-1", "cart-1", quantity)

        supabase_client.table.assert_not_called()

    @pytest.mark.asyncio
    async def test_updates_scoped_row(self, supabase_client):
        table = supabase_client.table.return_value
        update_query = table.update.return_value.eq.return_value.eq.return_value
        update_query.execute.return_value.data = [{"id": "cart-1", "quantity": 3}]

        row = await update_cart_item_quantity(supabase_client, "u-1", "cart-1", 3)

        table.update.assert_called_once_with({"quantity": 3})
        table.update.return_value.eq.assert_called_once_with("id", "cart-1")
        table.update.return_value.eq.return_value.eq.assert_called_once_with("user_id", "u-1")
        assert row == {"id": "cart-1", "quantity": 3}

    @pytest.mark.asyncio
    async def test_missing_row_returns_none(self, supabase_client):
        table = supabase_client.table.return_value
        table.update.return_value.eq.return_value.eq.return_value.execute.return_value.data = []

        assert await update_cart_item_quantity(supabase_client, "u-1", "missing", 2) is None


class TestRemoveCartItem:

    @pytest.mark.asyncio
    async def test_deleted_row_returns_true(self, supabase_client):
        table = supabase_client.table.return_value
        table.delete.return_value.eq.return_value.eq.return_value.execute.return_value.data = [{"id": "cart-1"}]

        assert await remove_cart_item(supabase_client, "u-1", "cart-1") is True

    @pytest.mark.asyncio
    async def test_missing_row_returns_false(self, supabase_client):
        table = supabase_client.table.return_value
        table.delete.return_value.eq.return_value.eq.return_value.execute.return_value.data = []

        assert await remove_cart_item(supabase_client, "u-1", "missing") is False


class TestCartReads:

    @pytest.mark.asyncio
    async def test_get_cart_items_embeds_products(self, supabase_client):
        table = supabase_client.table.return_value
        table.select.return_value.eq.return_value.execute.return_value.data = [{"id": "cart-1"}]

        items = await get_cart_items(supabase_client, "u-1")

        table.select.assert_called_once_with("*, products(*)")
        table.select.return_value.eq.assert_called_once_with("user_id", "u-1")
        assert items == [{"id": "cart-1"}]

    @pytest.mark.asyncio
    async def test_count_sums_quantities(self, supabase_client):
        table = supabase_client.table.return_value
        table.select.return_value.eq.return_value.execute.return_value.data = [
            {"quantity": 2}, {"quantity": 3}
        ]

        assert await get_cart_items_count(supabase_client, "u-1") == 5

    @pytest.mark.asyncio
    async def test_count_of_empty_cart_is_zero(self, supabase_client):
        table = supabase_client.table.return_value
        table.select.return_value.eq.return_value.execute.return_value.data = None

        assert await get_cart_items_count(supabase_client, "u-1") == 0


class TestCalculateCartTotals:

    def test_totals(self):
        items = [
            {"quantity": 2, "products": {"price": 1999}},
            {"quantity": 1, "products": {"price": 799}},
        ]

        totals = calculate_cart_totals(items)

        assert totals == {
            "subtotal": 4797.0,
            "shipping": 0.0,
            "total": 4797.0,
            "item_count": 3,
        }

    def test_missing_product_contributes_nothing(self):
        totals = calculate_cart_totals([{"quantity": 2, "products": None}])

        assert totals["subtotal"] == 0.0
        assert totals["item_count"] == 2

    def test_empty_cart(self):
        assert calculate_cart_totals([]) == {
            "subtotal": 0.0,
            "shipping": 0.0,
            "total": 0.0,
            "item_count": 0,
        }
