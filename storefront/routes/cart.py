"""
Cart API endpoints.

All endpoints require a signed-in user (401 otherwise).

- GET /cart: cart rows with products and order summary
- GET /cart/count: total quantity for the navigation badge
- POST /cart/items: add a product (upsert on user/product)
- PATCH /cart/items/{cart_item_id}: set quantity (must be >= 1)
- DELETE /cart/items/{cart_item_id}: remove a row
"""

import logging
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Path, status

from storefront.auth.dependencies import AuthenticatedUser, get_authenticated_user
from storefront.db.client import get_supabase_client
from storefront.schemas.cart import (
    CartAddRequest,
    CartAddResponse,
    CartCountResponse,
    CartDeleteResponse,
    CartItemResponse,
    CartQuantityUpdateRequest,
    CartResponse,
    CartSummary,
    CartUpdateResponse,
)
from storefront.schemas.products import product_from_row
from storefront.services.cart_service import (
    InvalidQuantityError,
    add_to_cart,
    calculate_cart_totals,
    get_cart_items,
    get_cart_items_count,
    remove_cart_item,
    update_cart_item_quantity,
)
from storefront.services.history_service import try_record_product_view

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cart", tags=["cart"])


def _cart_item_from_row(row: Dict[str, Any]) -> CartItemResponse:
    product = row.get("products")
    return CartItemResponse(
        id=str(row.get("id")),
        user_id=str(row.get("user_id")),
        product_id=str(row.get("product_id")),
        quantity=int(row.get("quantity") or 1),
        product=product_from_row(product) if product else None,
    )


@router.get(
    "",
    response_model=CartResponse,
    status_code=status.HTTP_200_OK,
    summary="Get cart",
    description="""
    Retrieve the authenticated user's cart with embedded products and the
    order summary (subtotal, free shipping, total, item count).
    """
)
async def get_cart(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> CartResponse:
    """Get the user's cart."""
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        rows = await get_cart_items(supabase_client, auth_user.user_id)
        totals = calculate_cart_totals(rows)

        return CartResponse(
            items=[_cart_item_from_row(row) for row in rows],
            summary=CartSummary(**totals),
        )

    except Exception as e:
        logger.error(f"Failed to fetch cart for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to retrieve cart"
            }
        )


@router.get(
    "/count",
    response_model=CartCountResponse,
    status_code=status.HTTP_200_OK,
    summary="Get cart item count",
)
async def get_cart_count(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> CartCountResponse:
    """Sum of quantities across the user's cart rows."""
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        count = await get_cart_items_count(supabase_client, auth_user.user_id)
        return CartCountResponse(count=count)

    except Exception as e:
        logger.error(f"Failed to count cart items for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to retrieve cart count"
            }
        )


@router.post(
    "/items",
    response_model=CartAddResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add product to cart",
    description="""
    Add a product to the cart with quantity 1.

    The write is an upsert on (user_id, product_id): adding a product that is
    already in the cart leaves a single row. The product is also appended to
    the browsing history, whether or not the cart write succeeds.
    """
)
async def add_cart_item(
    request: CartAddRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> CartAddResponse:
    """Add a product to the user's cart."""
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        row = await add_to_cart(supabase_client, auth_user.user_id, request.product_id)

    except Exception as e:
        logger.error(
            f"Failed to add product {request.product_id} to cart for user {auth_user.user_id}: {e}",
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "create_error",
                "details": "Failed to add item to cart"
            }
        )

    finally:
        await try_record_product_view(supabase_client, auth_user.user_id, request.product_id)

    return CartAddResponse(
        status="ADDED",
        item=_cart_item_from_row(row),
        message="Added to cart!"
    )


@router.patch(
    "/items/{cart_item_id}",
    response_model=CartUpdateResponse,
    status_code=status.HTTP_200_OK,
    summary="Update cart item quantity",
    description="""
    Set a cart item's quantity.

    Quantities below 1 are rejected with 400 and nothing is written.
    Use DELETE to remove an item.
    """
)
async def update_cart_item(
    cart_item_id: Annotated[str, Path(description="Cart item UUID")],
    request: CartQuantityUpdateRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> CartUpdateResponse:
    """Update the quantity of a cart item."""
    if request.quantity < 1:
        logger.warning(f"Rejected quantity={request.quantity} for cart item {cart_item_id}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "invalid_quantity",
                "details": "Quantity must be at least 1"
            }
        )

    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        row = await update_cart_item_quantity(
            supabase_client,
            auth_user.user_id,
            cart_item_id,
            request.quantity
        )

    except InvalidQuantityError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_quantity", "details": str(e)}
        )

    except Exception as e:
        logger.error(f"Failed to update cart item {cart_item_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "update_error",
                "details": "Failed to update quantity"
            }
        )

    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "not_found",
                "details": "Cart item not found"
            }
        )

    return CartUpdateResponse(
        status="UPDATED",
        item=_cart_item_from_row(row),
        message="Quantity updated"
    )


@router.delete(
    "/items/{cart_item_id}",
    response_model=CartDeleteResponse,
    status_code=status.HTTP_200_OK,
    summary="Remove cart item",
)
async def delete_cart_item(
    cart_item_id: Annotated[str, Path(description="Cart item UUID")],
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> CartDeleteResponse:
    """Remove a row from the user's cart."""
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        deleted = await remove_cart_item(supabase_client, auth_user.user_id, cart_item_id)

    except Exception as e:
        logger.error(f"Failed to remove cart item {cart_item_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "delete_error",
                "details": "Failed to remove item"
            }
        )

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "not_found",
                "details": "Cart item not found"
            }
        )

    return CartDeleteResponse(
        status="DELETED",
        cart_item_id=cart_item_id,
        message="Item removed from cart"
    )
