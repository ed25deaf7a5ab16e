"""
Catalog API endpoints.

Public endpoints (authentication optional):
- GET /products: top-rated products for the home page
- GET /products/search: search by text and/or category
- GET /products/{product_id}: product detail

When the caller is signed in, viewing a product detail appends a
browsing_history row (best-effort).
"""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from supabase import Client

from storefront.auth.dependencies import AuthenticatedUser, get_optional_user
from storefront.db.client import get_anon_supabase_client, get_supabase_client
from storefront.schemas.products import ProductListResponse, ProductResponse, product_from_row
from storefront.services.history_service import try_record_product_view
from storefront.services.product_service import (
    get_product_by_id,
    list_top_rated_products,
    search_products,
)
from storefront.utils.constants import TOP_RATED_DEFAULT_LIMIT

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


def _catalog_client(auth_user: Optional[AuthenticatedUser]) -> Client:
    """Signed-in callers read with their own client, everyone else anonymously."""
    if auth_user is not None:
        return get_supabase_client(auth_user.access_token)
    return get_anon_supabase_client()


def _product_list(rows: List[dict]) -> ProductListResponse:
    products = [product_from_row(row) for row in rows]
    return ProductListResponse(products=products, count=len(products))


@router.get(
    "",
    response_model=ProductListResponse,
    status_code=status.HTTP_200_OK,
    summary="List top rated products",
    description="""
    Retrieve the highest-rated products, best first.

    Used by the home page product grid. Public endpoint.
    """
)
async def list_products(
    auth_user: Annotated[Optional[AuthenticatedUser], Depends(get_optional_user)],
    limit: int = Query(TOP_RATED_DEFAULT_LIMIT, ge=1, le=100, description="Maximum number of products")
) -> ProductListResponse:
    """List top rated products."""
    supabase_client = _catalog_client(auth_user)

    try:
        rows = await list_top_rated_products(supabase_client, limit=limit)
        return _product_list(rows)

    except Exception as e:
        logger.error(f"Failed to list products: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to retrieve products from database"
            }
        )


@router.get(
    "/search",
    response_model=ProductListResponse,
    status_code=status.HTTP_200_OK,
    summary="Search products",
    description="""
    Search the catalog.

    - `q`: case-insensitive substring match on name or description
    - `category`: exact category match

    Both filters are optional and combine with AND. Public endpoint.
    """
)
async def search_catalog(
    auth_user: Annotated[Optional[AuthenticatedUser], Depends(get_optional_user)],
    q: Optional[str] = Query(None, max_length=200, description="Free-text search term"),
    category: Optional[str] = Query(None, max_length=100, description="Category filter"),
) -> ProductListResponse:
    """Search products by text and/or category."""
    supabase_client = _catalog_client(auth_user)

    try:
        rows = await search_products(supabase_client, query=q, category=category)
        return _product_list(rows)

    except Exception as e:
        logger.error(f"Failed to search products (q='{q}', category='{category}'): {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to search products"
            }
        )


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    status_code=status.HTTP_200_OK,
    summary="Get product detail",
    description="""
    Retrieve a single product.

    Returns 404 if the product does not exist. If the caller is signed in,
    the view is appended to their browsing history.
    """
)
async def get_product(
    product_id: Annotated[str, Path(description="Product UUID")],
    auth_user: Annotated[Optional[AuthenticatedUser], Depends(get_optional_user)],
) -> ProductResponse:
    """Get product by ID."""
    supabase_client = _catalog_client(auth_user)

    try:
        product = await get_product_by_id(supabase_client, product_id)

    except Exception as e:
        logger.error(f"Failed to fetch product {product_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to retrieve product"
            }
        )

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "not_found",
                "details": "Product not found"
            }
        )

    if auth_user is not None:
        await try_record_product_view(supabase_client, auth_user.user_id, product_id)

    return product_from_row(product)
