"""
Pydantic schemas for catalog endpoints.

Products are owned by the hosted store; these models mirror the columns of
the products table as consumed by the storefront.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ProductResponse(BaseModel):
    """A single catalog product."""
    id: str = Field(..., description="Product UUID")
    name: str = Field(..., description="Display name", examples=["Wireless Earbuds Pro"])
    price: float = Field(..., description="Unit price in INR", ge=0, examples=[2499.0])
    rating: float = Field(0.0, description="Average rating (0-5)", ge=0, le=5, examples=[4.5])
    rating_count: int = Field(0, description="Number of ratings", ge=0, examples=[1280])
    image_url: Optional[str] = Field(None, description="Product image URL")
    description: Optional[str] = Field(None, description="Long description")
    category: str = Field(..., description="Catalog category", examples=["electronics"])
    in_stock: bool = Field(True, description="Whether the product can be added to cart")


class ProductListResponse(BaseModel):
    """Response for product listing and search endpoints."""
    products: List[ProductResponse] = Field(..., description="Matching products")
    count: int = Field(..., description="Number of products returned", ge=0)


def product_from_row(row: Dict[str, Any]) -> ProductResponse:
    """Map a products row (or an embedded products object) to ProductResponse."""
    return ProductResponse(
        id=str(row.get("id")),
        name=str(row.get("name") or ""),
        price=float(row.get("price") or 0),
        rating=float(row.get("rating") or 0),
        rating_count=int(row.get("rating_count") or 0),
        image_url=row.get("image_url"),
        description=row.get("description"),
        category=str(row.get("category") or ""),
        in_stock=bool(row.get("in_stock", True)),
    )
