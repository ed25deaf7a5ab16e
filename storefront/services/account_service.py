"""
Account service.

Profile and purchase-history reads for the account page. Profiles are 1:1
with auth.users (profiles.id = user id).
"""

import logging
from typing import Any, Dict, List, Optional, cast

from supabase import Client

from storefront.utils.constants import ACCOUNT_PURCHASES_LIMIT

logger = logging.getLogger(__name__)


async def get_user_profile(
    supabase_client: Client,
    user_id: str
) -> Optional[Dict[str, Any]]:
    """
    Fetch the user's profile.

    Returns:
        The profile dict, or None if the user has no profile row

    Security:
        - RLS enforces id = auth.uid()
    """
    logger.debug(f"Fetching profile for user {user_id}")

    result = (
        supabase_client.table("profiles")
        .select("*")
        .eq("id", user_id)
        .execute()
    )

    if not result.data or len(result.data) == 0:
        logger.warning(f"Profile not found for user {user_id}")
        return None

    return cast(Dict[str, Any], result.data[0])


async def get_recent_purchases(
    supabase_client: Client,
    user_id: str,
    limit: int = ACCOUNT_PURCHASES_LIMIT
) -> List[Dict[str, Any]]:
    """
    Fetch the user's most recent purchases with embedded products.

    Returns:
        Purchase dicts, newest first
    """
    result = (
        supabase_client.table("purchases")
        .select("*, products(*)")
        .eq("user_id", user_id)
        .order("purchased_at", desc=True)
        .limit(limit)
        .execute()
    )

    purchases: List[Dict[str, Any]] = cast(List[Dict[str, Any]], result.data or [])
    logger.info(f"Found {len(purchases)} purchases for user {user_id}")

    return purchases
