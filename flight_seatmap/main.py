"""FastAPI application setup and configuration."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flight_seatmap.config import settings
from flight_seatmap.api import api_router
from flight_seatmap.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from flight_seatmap.schemas.common import HealthStatus
from flight_seatmap.services.selection_session_service import (
    SelectionSessionService, get_selection_session_service
)
from flight_seatmap.utils.logging_config import setup_logging

setup_logging(
    log_level="DEBUG" if settings.debug else settings.log_level,
    log_file=settings.log_file,
    enable_json_logging=settings.enable_json_logging or settings.environment == "production"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    logger.info("Starting flight seat map service")
    yield
    logger.info(
        f"Shutting down flight seat map service with "
        f"{get_selection_session_service().active_sessions} open selection session(s)"
    )

app = FastAPI(
    title=settings.app_name,
    description="""
    ## Flight Seat Map

    Seat map layout and seat selection for a flight booking front-end.

    ### Key Features

    * **Seat Map Layout**: Seat codes such as `12A` are grouped into rows and columns with an aisle gap
    * **Bounded Selection**: Exactly one seat per passenger, kept in the order it was picked
    * **Live Refresh**: Newer seat snapshots drop selected seats that were taken meanwhile
    * **Final Check**: Confirming a selection can re-check it against the latest snapshot

    ### Error Handling

    Errors are returned as:

    ```json
    {
      "error": {
        "error_code": "ERROR_CODE",
        "message": "Human readable error message",
        "details": {},
        "suggestions": []
      }
    }
    ```

    Selection notices such as `SELECTION_FULL` are not errors; they are
    returned in the `notices` list of the selection state.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {
            "name": "seat-selections",
            "description": "Seat map layout and seat selection operations"
        },
        {
            "name": "health",
            "description": "System health endpoints"
        }
    ],
    lifespan=lifespan,
)

# Middleware order matters: the last one added wraps the others.

if settings.enable_request_logging:
    app.add_middleware(LoggingMiddleware, log_requests=True, log_responses=True)

app.add_middleware(ErrorHandlerMiddleware, debug=settings.debug)

if settings.debug:
    cors_origins = ["*"]
    cors_allow_credentials = False  # Cannot use credentials with wildcard origins
else:
    cors_origins = settings.cors_origins
    cors_allow_credentials = settings.cors_allow_credentials

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
    expose_headers=settings.cors_expose_headers
)

app.include_router(api_router)


@app.get("/", tags=["health"])
async def root():
    """Root endpoint for API information."""
    return {
        "message": settings.app_name,
        "version": "1.0.0",
        "docs_url": "/docs",
        "redoc_url": "/redoc",
        "status": "operational"
    }


@app.get("/health", response_model=HealthStatus, tags=["health"])
async def health_check(service: SelectionSessionService = Depends(get_selection_session_service)):
    """Basic health check endpoint."""
    return HealthStatus(
        status="healthy",
        service="flight-seatmap",
        active_sessions=service.active_sessions
    )
