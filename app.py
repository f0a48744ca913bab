import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog.api import router as catalog_router
from config import get_cors_allowed_origins, get_server_port
from core.http.session import cleanup_session
from db import db_manager
from location import router as location_router

load_dotenv()

# Basic logging configuration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Initialize Beanie on startup; close HTTP and DB clients on shutdown."""
    await db_manager.init_beanie()
    logger.info("Application startup complete")
    try:
        yield
    finally:
        await cleanup_session()
        await db_manager.cleanup_connections()
        logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    application = FastAPI(title="Doorstep", lifespan=lifespan)

    origins = get_cors_allowed_origins()
    if origins:
        logger.info("CORS configured with specific origins: %s", origins)
    else:
        # Development fallback - the storefront dev server
        origins = [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
        logger.warning(
            "CORS_ALLOWED_ORIGINS not set. Using development defaults: %s",
            origins,
        )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    application.include_router(location_router)
    application.include_router(catalog_router)
    return application


app = create_app()


# --- Main Execution Block ---
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=get_server_port(),
        log_level="info",
        reload=True,
    )
