"""
Browsing history service.

browsing_history is an append-only log: every view inserts a new row and
nothing is deduplicated. viewed_at is set by the database default.
"""

import logging
from typing import Any, Dict, cast

from supabase import Client

logger = logging.getLogger(__name__)


async def record_product_view(
    supabase_client: Client,
    user_id: str,
    product_id: str
) -> Dict[str, Any]:
    """
    Append a browsing_history row for a product view.

    Returns:
        The inserted row

    Raises:
        Exception: If the store returns no row
    """
    logger.debug(f"Recording view of product {product_id} for user {user_id}")

    result = (
        supabase_client.table("browsing_history")
        .insert({"user_id": user_id, "product_id": product_id})
        .execute()
    )

    if not result.data or len(result.data) == 0:
        raise Exception("Failed to record product view: no data returned")

    return cast(Dict[str, Any], result.data[0])


async def try_record_product_view(
    supabase_client: Client,
    user_id: str,
    product_id: str
) -> None:
    """
    Best-effort variant of record_product_view.

    History tracking must never fail the request that triggered it (product
    detail, add to cart), so errors are logged and dropped here.
    """
    try:
        await record_product_view(supabase_client, user_id, product_id)
    except Exception as e:
        logger.warning(f"Failed to record view of product {product_id} for user {user_id}: {e}")
