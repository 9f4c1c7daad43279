"""
Keymesh OAuth Proxy - FastAPI Application
Main entry point for the proxy service.
Handles Twitter OAuth, wallet to social identity verification, user lookup and prekey uploads.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from keymesh_proxy.core.config import is_production, settings
from keymesh_proxy.core.exceptions import ProxyException, get_exception_status_code
from keymesh_proxy.core.logging import get_logger, log_error, log_request, setup_logging
from keymesh_proxy.domain.repositories.mongo import mongo_connection
from keymesh_proxy.infrastructure.cache import redis_client

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    setup_logging()
    if settings.STORE_CHECK_ON_STARTUP:
        # An unreachable store aborts startup
        await mongo_connection.ping()
    yield
    # Shutdown
    mongo_connection.close()
    await redis_client.disconnect()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title="Keymesh OAuth Proxy",
        description="Twitter OAuth, social proof verification, user lookup and prekey storage",
        version="1.0.0",
        docs_url=None if is_production() else "/docs",
        redoc_url=None,
        openapi_url=None if is_production() else "/openapi.json",
        lifespan=lifespan,
    )

    logger.info(f"CORS configured with origins: {settings.ALLOWED_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_methods=["GET", "PUT", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        log_request(
            method=request.method,
            url=request.url.path,
            status_code=response.status_code,
            duration=time.perf_counter() - start,
        )
        return response

    @app.exception_handler(ProxyException)
    async def proxy_exception_handler(request: Request, exc: ProxyException):
        status_code = get_exception_status_code(exc)
        if status_code >= 500:
            log_error(exc, {"path": request.url.path, "error_code": exc.error_code})
        else:
            logger.warning(
                "Request rejected",
                path=request.url.path,
                error_code=exc.error_code,
                message=exc.message,
            )
        return JSONResponse(
            status_code=status_code,
            content={
                "error_code": exc.error_code,
                "message": exc.message,
                "details": exc.details,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "error_code": "VALIDATION_ERROR",
                "message": "Invalid request",
                "details": {"errors": jsonable_errors(exc)},
            },
        )

    from keymesh_proxy.api.routers import (
        account_router,
        prekey_router,
        twitter_oauth_router,
        user_router,
    )

    app.include_router(
        twitter_oauth_router.router, prefix="/oauth/twitter", tags=["Twitter OAuth"]
    )
    app.include_router(user_router.router, tags=["Users"])
    app.include_router(prekey_router.router, tags=["Prekeys"])
    app.include_router(account_router.router, tags=["Account Info"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "features_enabled": {
                "twitter_oauth": bool(settings.TWITTER_CONSUMER_KEY),
                "prekeys_bucket": settings.PREKEYS_BUCKET_NAME,
                "social_proof_lookup": settings.SOCIAL_PROOF_LOOKUP_FUNCTION,
            },
        }

    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    """Request validation errors without raw input or exception context."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


# Create the FastAPI app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "keymesh_proxy.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )
