"""
Pydantic schemas for browsing history endpoints.
"""

from typing import Optional

from pydantic import BaseModel, Field


class HistoryCreateRequest(BaseModel):
    """Request to record a product view."""
    product_id: str = Field(..., min_length=1, description="Viewed product UUID")


class HistoryEntryResponse(BaseModel):
    """A browsing_history row (append-only, no dedup)."""
    user_id: str
    product_id: str
    viewed_at: Optional[str] = Field(None, description="ISO-8601 view timestamp")
