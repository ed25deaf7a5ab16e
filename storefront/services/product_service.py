"""
Product catalog service.

Read-only access to the products table: top-rated listing, search, and
detail lookup. The catalog is public, so callers may pass an anonymous client.
"""

import logging
import re
from typing import Any, Dict, List, Optional, cast

from supabase import Client

from storefront.utils.constants import TOP_RATED_DEFAULT_LIMIT

logger = logging.getLogger(__name__)

# Characters with meaning inside a PostgREST or=(...) filter
_OR_FILTER_RESERVED = re.compile(r"[,()]")


def _sanitize_search_term(term: str) -> str:
    """Strip characters that would split or close the PostgREST or-filter."""
    return _OR_FILTER_RESERVED.sub(" ", term).strip()


async def list_top_rated_products(
    supabase_client: Client,
    limit: int = TOP_RATED_DEFAULT_LIMIT
) -> List[Dict[str, Any]]:
    """
    Fetch the highest-rated products for the home page grid.

    Args:
        supabase_client: Supabase client (anonymous or authenticated)
        limit: Maximum number of products to return

    Returns:
        List of product dicts ordered by rating, best first
    """
    logger.debug(f"Fetching top {limit} rated products")

    result = (
        supabase_client.table("products")
        .select("*")
        .order("rating", desc=True)
        .limit(limit)
        .execute()
    )

    products: List[Dict[str, Any]] = cast(List[Dict[str, Any]], result.data or [])
    logger.info(f"Found {len(products)} top rated products")

    return products


async def search_products(
    supabase_client: Client,
    query: Optional[str] = None,
    category: Optional[str] = None
) -> List[Dict[str, Any]]:
    """
    Search the catalog.

    Both filters are optional and combine with AND:
    - category: exact match on products.category
    - query: case-insensitive substring match on name OR description

    With neither filter the whole catalog is returned.
    """
    logger.info(f"Searching products: query='{query}', category='{category}'")

    builder = supabase_client.table("products").select("*")

    if category:
        builder = builder.eq("category", category)

    term = _sanitize_search_term(query) if query else ""
    if term:
        builder = builder.or_(f"name.ilike.%{term}%,description.ilike.%{term}%")

    result = builder.execute()

    products: List[Dict[str, Any]] = cast(List[Dict[str, Any]], result.data or [])
    logger.info(f"Search returned {len(products)} products")

    return products


async def get_product_by_id(
    supabase_client: Client,
    product_id: str
) -> Optional[Dict[str, Any]]:
    """
    Fetch a single product.

    Returns:
        Product dict, or None if not found
    """
    logger.debug(f"Fetching product {product_id}")

    result = (
        supabase_client.table("products")
        .select("*")
        .eq("id", product_id)
        .execute()
    )

    if not result.data or len(result.data) == 0:
        logger.warning(f"Product {product_id} not found")
        return None

    return cast(Dict[str, Any], result.data[0])


async def get_top_rated_in_category(
    supabase_client: Client,
    category: str
) -> Optional[Dict[str, Any]]:
    """
    Fetch the single highest-rated product of a category, in stock or not.

    Returns:
        Product dict, or None if the category has no products
    """
    result = (
        supabase_client.table("products")
        .select("*")
        .eq("category", category)
        .order("rating", desc=True)
        .limit(1)
        .execute()
    )

    if not result.data or len(result.data) == 0:
        logger.debug(f"No products found in category '{category}'")
        return None

    return cast(Dict[str, Any], result.data[0])
