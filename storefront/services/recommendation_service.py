"""
Recommendation Service - LLM category preferences resolved against the catalog

Pipeline (sequential, stateless):
1. Read the user's recent browsing history (10 newest), cart, and recent
   purchases (10 newest), each joined to product name/category
2. Build a prompt with the three name lists
3. Ask the language model for 6 category preferences as a JSON array
4. Parse the reply; on any parse failure use FALLBACK_CATEGORY_PREFERENCES
5. Resolve each category, in order, to its single top-rated product

Categories outside PRODUCT_CATEGORIES and categories with no products
contribute nothing, so fewer than 6 products may be returned.

Errors are not caught here. Gateway errors (RateLimitExceededError,
CreditsExhaustedError, AIGatewayError) and store errors propagate to the
route, which maps them to HTTP responses. Nothing is written back.
"""

import json
import re
from typing import Any, Dict, List, Optional, cast

from supabase import Client

from storefront.agents.recommendation.prompts import (
    RECOMMENDATION_SYSTEM_PROMPT,
    build_recommendation_user_prompt,
)
from storefront.services.ai_gateway import complete_chat
from storefront.services.product_service import get_top_rated_in_category
from storefront.utils.constants import (
    BROWSING_HISTORY_LIMIT,
    FALLBACK_CATEGORY_PREFERENCES,
    PRODUCT_CATEGORIES,
    PURCHASE_HISTORY_LIMIT,
    RECOMMENDATION_COUNT,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SIGNAL_COLUMNS = "product_id, products(name, category)"

_CODE_FENCE = re.compile(r"^```(?:json)?\s*([\s\S]*?)\s*```$", re.IGNORECASE)


def _product_names(rows: List[Dict[str, Any]]) -> List[str]:
    """Names of the embedded products, skipping rows without one."""
    names = []
    for row in rows:
        product = row.get("products") or {}
        name = product.get("name")
        if name:
            names.append(str(name))
    return names


async def _fetch_signal(
    supabase_client: Client,
    table: str,
    user_id: str,
    order_column: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[str]:
    """
    Read one activity signal and return the joined product names.

    Store errors propagate.
    """
    builder = (
        supabase_client.table(table)
        .select(SIGNAL_COLUMNS)
        .eq("user_id", user_id)
    )
    if order_column:
        builder = builder.order(order_column, desc=True)
    if limit:
        builder = builder.limit(limit)

    result = builder.execute()
    rows = cast(List[Dict[str, Any]], result.data or [])
    return _product_names(rows)


def _strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    text = text.strip()
    match = _CODE_FENCE.match(text)
    if match:
        return match.group(1).strip()
    return text


def parse_category_preferences(content: Optional[str]) -> List[str]:
    """
    Parse the model reply into a category preference sequence.

    The reply must be a JSON array of strings (optionally inside a markdown
    code fence). Anything else, including empty text, a JSON object, or an
    array with non-string elements, yields a copy of
    FALLBACK_CATEGORY_PREFERENCES.
    """
    if not content:
        logger.warning("Empty model reply, using fallback category preferences")
        return list(FALLBACK_CATEGORY_PREFERENCES)

    try:
        parsed = json.loads(_strip_code_fence(content))
    except json.JSONDecodeError as e:
        logger.warning(f"Could not parse model reply as JSON ({e}), using fallback category preferences")
        return list(FALLBACK_CATEGORY_PREFERENCES)

    if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
        logger.warning("Model reply is not a JSON array of strings, using fallback category preferences")
        return list(FALLBACK_CATEGORY_PREFERENCES)

    return parsed


async def resolve_category_products(
    supabase_client: Client,
    categories: List[str],
) -> List[Dict[str, Any]]:
    """
    Resolve each category to its top-rated product, preserving order.

    One store round-trip per known category; lookups stay sequential so the
    result order is the model's preference order. Duplicates are kept.

    Only the first RECOMMENDATION_COUNT preferences are resolved, even when the
    model returns a longer array. RecommendationResponse allows at most that
    many products, so a longer list would fail response validation.
    """
    products: List[Dict[str, Any]] = []

    for category in categories[:RECOMMENDATION_COUNT]:
        if category not in PRODUCT_CATEGORIES:
            logger.warning(f"Skipping unknown category preference '{category}'")
            continue

        product = await get_top_rated_in_category(supabase_client, category)
        if product is not None:
            products.append(product)

    return products


async def get_recommendations(
    supabase_client: Client,
    user_id: str,
) -> List[Dict[str, Any]]:
    """
    Produce up to 6 product recommendations for a user.

    Args:
        supabase_client: Authenticated Supabase client (RLS scoped to user_id)
        user_id: User UUID from the verified token

    Returns:
        Product dicts, one per resolved category preference, in preference order

    Raises:
        RateLimitExceededError: the model provider answered 429
        CreditsExhaustedError: the model provider answered 402
        AIGatewayError: any other provider failure
        Exception: store read failures
    """
    logger.info(f"get_recommendations called for user_id={user_id}")

    viewed_products = await _fetch_signal(
        supabase_client, "browsing_history", user_id,
        order_column="viewed_at", limit=BROWSING_HISTORY_LIMIT,
    )
    cart_products = await _fetch_signal(supabase_client, "cart_items", user_id)
    purchased_products = await _fetch_signal(
        supabase_client, "purchases", user_id,
        order_column="purchased_at", limit=PURCHASE_HISTORY_LIMIT,
    )

    logger.info(
        f"Signals for user_id={user_id}: viewed={len(viewed_products)}, "
        f"cart={len(cart_products)}, purchased={len(purchased_products)}"
    )

    user_prompt = build_recommendation_user_prompt(
        viewed_products=viewed_products,
        cart_products=cart_products,
        purchased_products=purchased_products,
    )
    logger.debug(f"Recommendation prompt: {user_prompt}")

    content = await complete_chat(RECOMMENDATION_SYSTEM_PROMPT, user_prompt)

    categories = parse_category_preferences(content)
    logger.info(f"Category preferences: {categories}")

    recommendations = await resolve_category_products(supabase_client, categories)
    logger.info(f"Returning {len(recommendations)} recommendations for user_id={user_id}")

    return recommendations
