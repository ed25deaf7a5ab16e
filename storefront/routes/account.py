"""
Account API endpoint.

- GET /account: profile, recent purchases, and cart badge count

Requires a signed-in user; the UI redirects to sign-in on 401.
"""

import logging
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from storefront.auth.dependencies import AuthenticatedUser, get_authenticated_user
from storefront.db.client import get_supabase_client
from storefront.schemas.account import AccountResponse, ProfileResponse, PurchaseResponse
from storefront.schemas.products import product_from_row
from storefront.services.account_service import get_recent_purchases, get_user_profile
from storefront.services.cart_service import get_cart_items_count

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/account", tags=["account"])


def _as_optional_str(v: Any) -> Optional[str]:
    return str(v) if v is not None else None


def _profile_from_row(row: Dict[str, Any]) -> ProfileResponse:
    return ProfileResponse(
        id=str(row.get("id")),
        full_name=row.get("full_name"),
        created_at=_as_optional_str(row.get("created_at")),
    )


def _purchase_from_row(row: Dict[str, Any]) -> PurchaseResponse:
    product = row.get("products")
    return PurchaseResponse(
        id=str(row.get("id")),
        product_id=str(row.get("product_id")),
        price_at_purchase=float(row.get("price_at_purchase") or 0),
        purchased_at=str(row.get("purchased_at") or ""),
        product=product_from_row(product) if product else None,
    )


@router.get(
    "",
    response_model=AccountResponse,
    status_code=status.HTTP_200_OK,
    summary="Get account overview",
    description="""
    Retrieve the account page data for the authenticated user:
    - profile (null if the user has no profile row)
    - the 10 most recent purchases, newest first
    - the cart item count
    """
)
async def get_account(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> AccountResponse:
    """Get the account overview."""
    logger.info(f"Fetching account overview for user {auth_user.user_id}")

    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        profile = await get_user_profile(supabase_client, auth_user.user_id)
        purchases = await get_recent_purchases(supabase_client, auth_user.user_id)
        cart_count = await get_cart_items_count(supabase_client, auth_user.user_id)

    except Exception as e:
        logger.error(f"Failed to fetch account for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to retrieve account"
            }
        )

    return AccountResponse(
        user_id=auth_user.user_id,
        profile=_profile_from_row(profile) if profile else None,
        purchases=[_purchase_from_row(p) for p in purchases],
        cart_items_count=cart_count,
    )
