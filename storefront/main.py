"""
FastAPI application entry point for the Storefront backend.

This module creates the FastAPI app instance and registers all routers.
"""

import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from storefront.config import settings
from storefront.routes.account import router as account_router
from storefront.routes.cart import router as cart_router
from storefront.routes.health import router as health_router
from storefront.routes.history import router as history_router
from storefront.routes.products import router as products_router
from storefront.routes.recommendations import (
    recommendations_cors_middleware,
    router as recommendations_router,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def _get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: uses CORS_ALLOWED_ORIGINS (comma-separated);
      with none configured no web origin is allowed
    - any other environment: allows all origins for local development

    The recommendation endpoint sets its own permissive headers regardless.
    """
    if settings.is_production():
        origins = settings.CORS_ALLOWED_ORIGINS
        if origins:
            logger.info(f"CORS configured for production with {len(origins)} allowed origins")
        else:
            logger.warning(
                "CORS_ALLOWED_ORIGINS not set in production. "
                "No web origins allowed. Set CORS_ALLOWED_ORIGINS for the storefront UI."
            )
        return origins

    logger.info(f"CORS configured for {settings.ENVIRONMENT}: allowing all origins")
    return ["*"]


def _jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors with non-serializable context values stringified."""
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {k: str(v) for k, v in error["ctx"].items()}
        errors.append(error)
    return errors


def configure_cors(application: FastAPI, origins: list[str]) -> None:
    """
    Install CORS handling on an application.

    CORSMiddleware applies `origins` to every route. The recommendation
    middleware is added after it, which makes it the outer layer, so the
    recommendation endpoint keeps its fixed permissive headers whatever the
    origin list is.
    """
    application.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.middleware("http")(recommendations_cors_middleware)


# Create FastAPI app
app = FastAPI(
    title="Storefront API",
    description="Backend service for the storefront: catalog, cart, account, and AI recommendations",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Log detailed validation errors for debugging.

    This helps diagnose 422 errors from the frontend.
    """
    logger.error(
        f"Validation error on {request.method} {request.url.path}: {exc.errors()}"
    )

    return JSONResponse(
        status_code=422,
        content={
            "error": "validation_error",
            "details": _jsonable_errors(exc),
            "body": exc.body
        }
    )


configure_cors(app, _get_cors_origins())

# Register routers
app.include_router(health_router)
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(history_router)
app.include_router(account_router)
app.include_router(recommendations_router)

logger.info("FastAPI app initialized successfully")
