"""
FastAPI route for the AI recommendation endpoint.

- OPTIONS /functions/get-recommendations: preflight, empty body
  (answered by recommendations_cors_middleware)
- POST /functions/get-recommendations: body {"userId": "..."}

Every response carries the fixed CORS_HEADERS, and errors use the
{"error": "<message>"} envelope expected by the storefront client:

- 403: userId does not match the bearer token
- 429: model provider rate limit
- 402: model provider credits exhausted
- 500: anything else, with the raw error message
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from storefront.auth.dependencies import AuthenticatedUser, get_authenticated_user
from storefront.db.client import get_supabase_client
from storefront.schemas.products import product_from_row
from storefront.schemas.recommendations import (
    RecommendationErrorResponse,
    RecommendationRequest,
    RecommendationResponse,
)
from storefront.services.ai_gateway import CreditsExhaustedError, RateLimitExceededError
from storefront.services.recommendation_service import get_recommendations
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/functions",
    tags=["recommendations"]
)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

RECOMMENDATIONS_PATH = "/functions/get-recommendations"

USER_MISMATCH_MESSAGE = "userId does not match the authenticated user"


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=RecommendationErrorResponse(error=message).model_dump(),
        headers=CORS_HEADERS,
    )


async def recommendations_cors_middleware(request: Request, call_next):
    """
    HTTP middleware that owns CORS for the recommendation endpoint.

    Must be installed outside the app-wide CORSMiddleware, which would
    otherwise answer preflights itself and apply the configured origin list.
    On RECOMMENDATIONS_PATH:
    - OPTIONS gets an empty 200 with CORS_HEADERS
    - any other response, including 401/422 raised before the handler, has
      CORS_HEADERS written over the headers set further in
    """
    if request.url.path != RECOMMENDATIONS_PATH:
        return await call_next(request)

    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)

    response = await call_next(request)
    if "access-control-allow-credentials" in response.headers:
        del response.headers["access-control-allow-credentials"]
    response.headers.update(CORS_HEADERS)
    return response


@router.post(
    "/get-recommendations",
    response_model=RecommendationResponse,
    status_code=status.HTTP_200_OK,
    summary="Get AI product recommendations",
    responses={
        402: {"model": RecommendationErrorResponse, "description": "AI credits exhausted"},
        403: {"model": RecommendationErrorResponse, "description": "userId does not match token"},
        429: {"model": RecommendationErrorResponse, "description": "AI rate limit exceeded"},
        500: {"model": RecommendationErrorResponse, "description": "Unexpected failure"},
    },
    description="""
    Recommends up to 6 products for the signed-in user.

    **Authentication:** Required (Bearer token). `userId` must equal the
    token's subject.

    **Pipeline:**
    1. Read recent browsing history, cart, and recent purchases
    2. Ask the language model for 6 category preferences (JSON array)
    3. Fall back to a balanced category list if the reply cannot be parsed
    4. Return the top-rated product of each preferred category, in order
    """
)
async def get_recommendations_endpoint(
    request: RecommendationRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> JSONResponse:
    """
    Recommendation endpoint.

    - Auth: get_authenticated_user dependency, plus userId == token subject
    - Call service: signals -> LLM -> catalog lookups
    - Map errors: typed gateway errors to 429/402, everything else to 500
    """
    logger.info(f"POST /functions/get-recommendations called by user_id={auth_user.user_id}")

    if request.user_id != auth_user.user_id:
        logger.warning(
            f"Recommendation request for user_id={request.user_id} "
            f"rejected for token user_id={auth_user.user_id}"
        )
        return _error_response(USER_MISMATCH_MESSAGE, status.HTTP_403_FORBIDDEN)

    try:
        supabase_client = get_supabase_client(auth_user.access_token)
        products = await get_recommendations(supabase_client, auth_user.user_id)

        body = RecommendationResponse(
            recommendations=[product_from_row(p) for p in products]
        )
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=body.model_dump(),
            headers=CORS_HEADERS,
        )

    except RateLimitExceededError as e:
        logger.warning(f"Recommendation rate limited for user_id={auth_user.user_id}")
        return _error_response(e.message, status.HTTP_429_TOO_MANY_REQUESTS)

    except CreditsExhaustedError as e:
        logger.error("AI credits exhausted")
        return _error_response(e.message, status.HTTP_402_PAYMENT_REQUIRED)

    except Exception as e:
        logger.error(f"Error in get-recommendations: {e}", exc_info=True)
        return _error_response(str(e) or "Unknown error", status.HTTP_500_INTERNAL_SERVER_ERROR)
