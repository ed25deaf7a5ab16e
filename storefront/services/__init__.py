"""
Service layer for the Storefront backend.

Contains the data access and orchestration logic that:
- Reads and writes storefront tables under RLS
- Runs the recommendation pipeline (signals -> LLM -> catalog lookups)

Services act as the glue between routes (HTTP layer) and Supabase / the
language model gateway. Routes translate service exceptions into HTTP errors.
"""

from .account_service import get_recent_purchases, get_user_profile
from .cart_service import (
    InvalidQuantityError,
    add_to_cart,
    calculate_cart_totals,
    get_cart_items,
    get_cart_items_count,
    remove_cart_item,
    update_cart_item_quantity,
)
from .history_service import record_product_view, try_record_product_view
from .product_service import (
    get_product_by_id,
    get_top_rated_in_category,
    list_top_rated_products,
    search_products,
)
from .recommendation_service import get_recommendations

__all__ = [
    "get_user_profile",
    "get_recent_purchases",
    "InvalidQuantityError",
    "add_to_cart",
    "calculate_cart_totals",
    "get_cart_items",
    "get_cart_items_count",
    "remove_cart_item",
    "update_cart_item_quantity",
    "record_product_view",
    "try_record_product_view",
    "get_product_by_id",
    "get_top_rated_in_category",
    "list_top_rated_products",
    "search_products",
    "get_recommendations",
]
