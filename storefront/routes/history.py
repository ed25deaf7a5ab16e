"""
Browsing history API endpoint.

- POST /history: record a product view (append-only, no dedup)
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from storefront.auth.dependencies import AuthenticatedUser, get_authenticated_user
from storefront.db.client import get_supabase_client
from storefront.schemas.history import HistoryCreateRequest, HistoryEntryResponse
from storefront.services.history_service import record_product_view

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/history", tags=["history"])


@router.post(
    "",
    response_model=HistoryEntryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record product view",
)
async def create_history_entry(
    request: HistoryCreateRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> HistoryEntryResponse:
    """Append a browsing_history row for the authenticated user."""
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        row = await record_product_view(supabase_client, auth_user.user_id, request.product_id)

    except Exception as e:
        logger.error(f"Failed to record history for user {auth_user.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "create_error",
                "details": "Failed to record product view"
            }
        )

    viewed_at = row.get("viewed_at")
    return HistoryEntryResponse(
        user_id=str(row.get("user_id", auth_user.user_id)),
        product_id=str(row.get("product_id", request.product_id)),
        viewed_at=str(viewed_at) if viewed_at is not None else None,
    )
