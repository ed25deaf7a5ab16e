"""
Cart service.

Handles reads and writes on cart_items. A cart row is unique per
(user_id, product_id); adding a product that is already in the cart upserts
the existing row instead of inserting a duplicate. Quantities below 1 are
never written.
"""

import logging
from typing import Any, Dict, List, Optional, cast

from supabase import Client

from storefront.utils.constants import CART_CONFLICT_COLUMNS

logger = logging.getLogger(__name__)


class InvalidQuantityError(ValueError):
    """Raised when a cart quantity below 1 is requested."""

    def __init__(self, quantity: int):
        super().__init__(f"Quantity must be at least 1 (got {quantity})")
        self.quantity = quantity


async def get_cart_items(
    supabase_client: Client,
    user_id: str
) -> List[Dict[str, Any]]:
    """
    Fetch the user's cart rows with embedded products.

    Each row has a "products" key holding the joined product (or None if the
    product was removed from the catalog).

    Security:
        - RLS enforces user_id = auth.uid()
    """
    logger.debug(f"Fetching cart for user {user_id}")

    result = (
        supabase_client.table("cart_items")
        .select("*, products(*)")
        .eq("user_id", user_id)
        .execute()
    )

    items: List[Dict[str, Any]] = cast(List[Dict[str, Any]], result.data or [])
    logger.info(f"Found {len(items)} cart items for user {user_id}")

    return items


async def get_cart_items_count(
    supabase_client: Client,
    user_id: str
) -> int:
    """Return the sum of quantities across the user's cart rows."""
    result = (
        supabase_client.table("cart_items")
        .select("quantity")
        .eq("user_id", user_id)
        .execute()
    )

    rows = cast(List[Dict[str, Any]], result.data or [])
    return sum(int(row.get("quantity") or 0) for row in rows)


def calculate_cart_totals(items: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Compute the order summary for a list of cart rows.

    Rows whose product is missing contribute nothing to the subtotal.
    Shipping is free, so total equals subtotal.
    """
    subtotal = 0.0
    item_count = 0
    for item in items:
        quantity = int(item.get("quantity") or 0)
        item_count += quantity
        product = item.get("products") or {}
        subtotal += float(product.get("price") or 0) * quantity

    return {
        "subtotal": subtotal,
        "shipping": 0.0,
        "total": subtotal,
        "item_count": item_count,
    }


async def add_to_cart(
    supabase_client: Client,
    user_id: str,
    product_id: str
) -> Dict[str, Any]:
    """
    Add a product to the user's cart.

    Writes {user_id, product_id, quantity: 1} with upsert on the
    (user_id, product_id) unique constraint, so repeated adds leave a single
    row with quantity 1.

    Returns:
        The upserted cart row

    Raises:
        Exception: If the store returns no row
    """
    logger.info(f"Adding product {product_id} to cart for user {user_id}")

    cart_row = {
        "user_id": user_id,
        "product_id": product_id,
        "quantity": 1,
    }

    result = (
        supabase_client.table("cart_items")
        .upsert(cart_row, on_conflict=CART_CONFLICT_COLUMNS)
        .execute()
    )

    if not result.data or len(result.data) == 0:
        raise Exception("Failed to add item to cart: no data returned")

    return cast(Dict[str, Any], result.data[0])


async def update_cart_item_quantity(
    supabase_client: Client,
    user_id: str,
    cart_item_id: str,
    quantity: int
) -> Optional[Dict[str, Any]]:
    """
    Set the quantity of a cart row.

    Returns:
        The updated row, or None if no row matched

    Raises:
        InvalidQuantityError: If quantity < 1 (no store call is made)
    """
    if quantity < 1:
        raise InvalidQuantityError(quantity)

    logger.info(f"Updating cart item {cart_item_id} to quantity={quantity} for user {user_id}")

    result = (
        supabase_client.table("cart_items")
        .update({"quantity": quantity})
        .eq("id", cart_item_id)
        .eq("user_id", user_id)
        .execute()
    )

    if not result.data or len(result.data) == 0:
        logger.warning(f"Cart item {cart_item_id} not found for user {user_id}")
        return None

    return cast(Dict[str, Any], result.data[0])


async def remove_cart_item(
    supabase_client: Client,
    user_id: str,
    cart_item_id: str
) -> bool:
    """
    Delete a cart row.

    Returns:
        True if a row was deleted, False if none matched
    """
    logger.info(f"Removing cart item {cart_item_id} for user {user_id}")

    result = (
        supabase_client.table("cart_items")
        .delete()
        .eq("id", cart_item_id)
        .eq("user_id", user_id)
        .execute()
    )

    if not result.data or len(result.data) == 0:
        logger.warning(f"Cart item {cart_item_id} not found for user {user_id}")
        return False

    return True
