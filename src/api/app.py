"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src import __version__
from src.api.chat import router as chat_router
from src.models.schemas import HealthStatus

logger = logging.getLogger(__name__)

SERVICE_NAME = "chat-relay"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Log application startup and shutdown.

    The completion provider is created lazily on the first chat request,
    so a missing API key does not prevent the API from starting.
    """
    logger.info("Starting Chat Relay API...")
    yield
    logger.info("Shutting down Chat Relay API...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Chat Relay API",
        description=(
            "Relays chat prompts to a hosted LLM completion API and returns the "
            "reply either whole or as a Server-Sent Events token stream."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.include_router(chat_router)

    @application.get("/health", response_model=HealthStatus)
    async def health_check() -> HealthStatus:
        """Check service health status."""
        return HealthStatus(
            status="ok",
            service=SERVICE_NAME,
            timestamp=datetime.now(UTC).isoformat(),
        )

    return application


app = create_app()
