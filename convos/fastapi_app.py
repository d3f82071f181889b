"""
FastAPI Application Factory.
Creates and configures the FastAPI application with routers, middleware, and DI.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from convos.config.logging_config import correlation_id_var, setup_logging
from convos.config.settings import Config
from convos.presentation.api import conversations_router
from convos.presentation.contracts import bad_request, fault_response
from convos.setup.ioc.container import create_container

# Setup logging
setup_logging(Config.LOG_LEVEL, Config.LOG_PATH)

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to extract and set correlation ID from request headers."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_ID_HEADER, "NO Correlation ID")

        # Set in contextvars (propagates to async tasks and logging)
        correlation_id_var.set(correlation_id)

        response = await call_next(request)
        response.headers[CORRELATION_ID_HEADER] = correlation_id
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager.

    - Startup: container and Dishka already set up before the app starts
    - Shutdown: close the DI container (store pool, Redis client)
    """
    logger.info("Convos API started. DI container initialized.")
    yield
    await app.state.dishka_container.close()
    logger.info("Convos API shutdown. DI container closed.")


def create_fastapi_app(container: Optional[AsyncContainer] = None) -> FastAPI:
    """
    Application factory for creating FastAPI app.

    Args:
        container: DI container to use; built from Config when omitted

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Convos API",
        description="Conversations and threaded messages between two users",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Setup Dishka BEFORE app starts (must add middleware before startup)
    setup_dishka(container or create_container(), app)

    app.add_middleware(CorrelationIdMiddleware)

    # Malformed path values or JSON never reach the contract
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Rejected {request.method} {request.url.path}: {exc.errors()}")
        return bad_request("Invalid request")

    # Global exception handler - 500 with no entity body
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return fault_response()

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy"}

    app.include_router(conversations_router)

    return app


# Create the app instance
app = create_fastapi_app()
