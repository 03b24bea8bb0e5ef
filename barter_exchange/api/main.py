"""
FastAPI application for the barter exchange.
"""

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging

from barter_exchange import __version__
from barter_exchange.config import AppSettings, get_app_settings
from barter_exchange.error_handling import BarterExchangeError
from barter_exchange.store import KeyValueStore, RedisStore, create_store
from barter_exchange.api.dependencies import ExchangeServices
from barter_exchange.api.errors import barter_error_handler
from barter_exchange.api.routers import auth, barters, communities, listings, notifications, trust

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(
    store: Optional[KeyValueStore] = None,
    settings: Optional[AppSettings] = None
) -> FastAPI:
    """
    Build the API around one store.

    Args:
        store: Store to use; built from settings when omitted
        settings: Application settings; read from the environment when omitted

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_app_settings()
    logging.getLogger("barter_exchange").setLevel(settings.log_level.upper())
    store = store if store is not None else create_store(settings.store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events"""
        logger.info(f"Starting Barter Exchange API with {type(store).__name__}...")

        yield

        logger.info("Shutting down Barter Exchange API...")
        if isinstance(store, RedisStore):
            store.close()

    app = FastAPI(
        title="Barter Exchange API",
        description="Community barter marketplace with trust scoring",
        version=__version__,
        lifespan=lifespan
    )
    app.state.services = ExchangeServices.build(store, settings)

    # CORS middleware - allow all origins for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BarterExchangeError, barter_error_handler)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "version": __version__,
            "store": type(store).__name__
        }

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "Barter Exchange API",
            "docs": "/docs",
            "health": "/health"
        }

    app.include_router(auth.router, prefix="/api", tags=["auth"])
    app.include_router(communities.router, prefix="/api", tags=["communities"])
    app.include_router(listings.router, prefix="/api", tags=["listings"])
    app.include_router(barters.router, prefix="/api", tags=["barters"])
    app.include_router(trust.router, prefix="/api", tags=["trust"])
    app.include_router(notifications.router, prefix="/api", tags=["notifications"])

    return app


app = create_app()
