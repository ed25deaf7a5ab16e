"""
Pydantic schemas for the account endpoint.

The account page shows the profile, recent purchases, and the cart badge.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from storefront.schemas.products import ProductResponse


class ProfileResponse(BaseModel):
    """A profiles row (id equals the auth user id)."""
    id: str = Field(..., description="User UUID")
    full_name: Optional[str] = Field(None, description="Display name")
    created_at: Optional[str] = Field(None, description="ISO-8601 member-since timestamp")


class PurchaseResponse(BaseModel):
    """A past purchase with its embedded product."""
    id: str
    product_id: str
    price_at_purchase: float = Field(..., ge=0)
    purchased_at: str = Field(..., description="ISO-8601 purchase timestamp")
    product: Optional[ProductResponse] = None


class AccountResponse(BaseModel):
    """Response for GET /account."""
    user_id: str
    profile: Optional[ProfileResponse] = Field(
        None,
        description="Profile row, or null if the user has none yet"
    )
    purchases: List[PurchaseResponse] = Field(..., description="Most recent purchases first")
    cart_items_count: int = Field(..., ge=0)
