"""
Schema for GET /health.
"""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness plus the runtime settings that matter when debugging a deploy."""

    status: Literal["ok"] = "ok"
    service: str = Field("storefront-backend", examples=["storefront-backend"])
    environment: str = Field(..., examples=["production"])
    llm_provider: str = Field(
        ...,
        description="Model provider used by the recommendation endpoint",
        examples=["gateway", "gemini"]
    )
