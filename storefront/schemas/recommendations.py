"""
Pydantic schemas for the recommendation endpoint.

The wire format is fixed by the storefront client: camelCase `userId` in the
request, `{"recommendations": [...]}` on success, `{"error": "..."}` on failure.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from storefront.schemas.products import ProductResponse


class RecommendationRequest(BaseModel):
    """Request body for POST /functions/get-recommendations."""
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(
        ...,
        alias="userId",
        min_length=1,
        description="Requesting user's UUID (must match the bearer token)",
        examples=["0b6b7d3c-1f5e-4a55-9d0e-2b1f3c4d5e6f"]
    )


class RecommendationResponse(BaseModel):
    """Successful recommendation response (0-6 products, in preference order)."""
    recommendations: List[ProductResponse] = Field(
        ...,
        description="One top-rated product per preferred category",
        max_length=6
    )


class RecommendationErrorResponse(BaseModel):
    """Error envelope for 402 / 403 / 429 / 500 responses."""
    error: str = Field(..., examples=["Rate limit exceeded. Please try again later."])
