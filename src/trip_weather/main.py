"""Main FastAPI application for the trip weather service."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from trip_weather.api.endpoints import router as weather_router
from trip_weather.config import (
    HOST, PORT, DEBUG, WEATHERAPI_KEY, OPENWEATHER_API_KEY
)
from trip_weather.logging_config import configure_logging
from trip_weather.weather.cache import weather_cache

# Configure logging
configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    if not WEATHERAPI_KEY:
        logger.warning("WEATHERAPI_KEY not set, near-term forecasts disabled")
    if not OPENWEATHER_API_KEY:
        logger.warning("OPENWEATHER_API_KEY not set, mid-range forecasts disabled")

    logger.info("Starting Trip Weather Service")
    try:
        yield
    finally:
        weather_cache.clear()
        logger.info("Shutting down Trip Weather Service")


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Trip Weather Service",
        description="Per-day weather for travel itineraries with tiered forecast sources",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routers
    app.include_router(weather_router)

    @app.get("/", tags=["root"])
    async def api_info() -> dict:
        """API information endpoint.

        Returns:
            Basic service information
        """
        return {
            "message": "Trip Weather Service",
            "docs": "/docs",
            "trip_weather": "/weather/trip",
            "health": "/weather/health"
        }

    return app


# Create app instance for uvicorn
app = create_app()


def main() -> None:
    """Main entry point for the application."""
    logger.info(f"Starting server on {HOST}:{PORT}")
    uvicorn.run(
        app,
        host=HOST,
        port=PORT,
        reload=DEBUG,
        log_level="info" if not DEBUG else "debug"
    )


if __name__ == "__main__":
    main()
