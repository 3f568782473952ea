"""FastAPI application factory and lifespan for the weather dashboard API."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.dependencies import set_services
from .api.router import api_router
from .config import settings
from .services.openweather import OpenWeatherClient
from .services.precipitation_monitor import PrecipitationMonitor
from .services.recommendations import RecommendationService

# Configure logging for our app (uvicorn only configures its own loggers)
logging.basicConfig(
    level=settings.log_level,
    format="%(levelname)s:     %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def sweep_caches(
    recommendations: RecommendationService,
    monitor: PrecipitationMonitor,
    interval: float,
) -> None:
    """Evict expired cache and cooldown entries every ``interval`` seconds."""
    while True:
        await asyncio.sleep(interval)
        try:
            removed = recommendations.cache.sweep() + monitor.sweep()
            if removed:
                logger.debug("Sweep removed %d expired entries", removed)
        except Exception as e:
            logger.error("Cache sweep failed: %s", e, exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: wire services and run the cache sweeper."""
    provider = OpenWeatherClient()
    recommendations = RecommendationService(provider)
    monitor = PrecipitationMonitor(provider)
    set_services(recommendations, monitor)

    sweeper = asyncio.create_task(
        sweep_caches(recommendations, monitor, settings.cache_sweep_interval_sec)
    )
    logger.info("Cache sweeper started (%ds interval)", settings.cache_sweep_interval_sec)

    yield

    logger.info("Shutting down...")
    sweeper.cancel()
    try:
        await sweeper
    except asyncio.CancelledError:
        pass
    set_services(None, None)
    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Weather Dashboard Decision API",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app


# Application instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
