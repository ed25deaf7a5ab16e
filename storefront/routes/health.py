"""
GET /health: public, unauthenticated liveness check.
"""

from fastapi import APIRouter, status

from storefront.config import settings
from storefront.schemas.health import HealthResponse

router = APIRouter(tags=["system"])


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health_check() -> HealthResponse:
    """Report liveness, environment and model provider. No store or model call is made."""
    return HealthResponse(
        environment=settings.ENVIRONMENT,
        llm_provider=settings.LLM_PROVIDER,
    )
