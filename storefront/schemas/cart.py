"""
Pydantic schemas for cart endpoints.

A cart row is unique per (user_id, product_id) and its quantity is never
below 1.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from storefront.schemas.products import ProductResponse


class CartItemResponse(BaseModel):
    """A cart row with its embedded product."""
    id: str = Field(..., description="Cart item UUID")
    user_id: str = Field(..., description="Owner user UUID")
    product_id: str = Field(..., description="Product UUID")
    quantity: int = Field(..., description="Quantity (>= 1)", ge=1)
    product: Optional[ProductResponse] = Field(
        None,
        description="Embedded product (null if the product no longer exists)"
    )


class CartSummary(BaseModel):
    """Order summary shown next to the cart."""
    subtotal: float = Field(..., description="Sum of price x quantity", ge=0)
    shipping: float = Field(0.0, description="Shipping cost (always free)", ge=0)
    total: float = Field(..., description="subtotal + shipping", ge=0)
    item_count: int = Field(..., description="Sum of quantities", ge=0)


class CartResponse(BaseModel):
    """Response for GET /cart."""
    items: List[CartItemResponse] = Field(..., description="Cart rows")
    summary: CartSummary


class CartCountResponse(BaseModel):
    """Response for GET /cart/count (navigation badge)."""
    count: int = Field(..., description="Sum of quantities across cart rows", ge=0)


class CartAddRequest(BaseModel):
    """Request to add a product to the cart."""
    product_id: str = Field(..., min_length=1, description="Product UUID")


class CartAddResponse(BaseModel):
    """Response after adding a product to the cart."""
    status: Literal["ADDED"] = Field("ADDED")
    item: CartItemResponse
    message: str = Field(..., examples=["Added to cart!"])


class CartQuantityUpdateRequest(BaseModel):
    """
    Request to set a cart item's quantity.

    Values below 1 are accepted by the schema and rejected by the route with
    400 so the client gets a domain error rather than a validation dump.
    """
    quantity: int = Field(..., description="New quantity (must be >= 1)")


class CartUpdateResponse(BaseModel):
    """Response after updating a cart item."""
    status: Literal["UPDATED"] = Field("UPDATED")
    item: CartItemResponse
    message: str = Field(..., examples=["Quantity updated"])


class CartDeleteResponse(BaseModel):
    """Response after removing a cart item."""
    status: Literal["DELETED"] = Field("DELETED")
    cart_item_id: str
    message: str = Field(..., examples=["Item removed from cart"])
