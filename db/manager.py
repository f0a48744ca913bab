"""
Database connection manager module.

Provides a singleton DatabaseManager owning the Motor client and Beanie
initialization.
"""

from __future__ import annotations

import logging
import os
import threading
from datetime import UTC
from typing import Any, Self

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from config import get_mongodb_database, get_mongodb_uri

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Singleton class to manage the MongoDB client and database connection.

    Environment Variables:
        MONGODB_URI: MongoDB URI (default: mongodb://localhost:27017)
        MONGODB_DATABASE: Database name (default: doorstep)
        MONGODB_MAX_POOL_SIZE: Connection pool size (default: 20)
        MONGODB_SERVER_SELECTION_TIMEOUT_MS: Server selection timeout (default: 5000)
    """

    _instance: DatabaseManager | None = None
    _lock = threading.Lock()

    def __new__(cls) -> Self:
        """Create or return the singleton instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if getattr(self, "_initialized", False):
            return
        self._client: AsyncIOMotorClient | None = None
        self._db: AsyncIOMotorDatabase | None = None
        self._beanie_initialized = False
        self._max_pool_size = int(os.getenv("MONGODB_MAX_POOL_SIZE", "20"))
        self._server_selection_timeout_ms = int(
            os.getenv("MONGODB_SERVER_SELECTION_TIMEOUT_MS", "5000"),
        )
        self._initialized = True

    def _initialize_client(self) -> None:
        client_kwargs: dict[str, Any] = {
            "tz_aware": True,
            "tzinfo": UTC,
            "maxPoolSize": self._max_pool_size,
            "serverSelectionTimeoutMS": self._server_selection_timeout_ms,
            "retryReads": True,
            "appname": "Doorstep",
        }
        self._client = AsyncIOMotorClient(get_mongodb_uri(), **client_kwargs)
        self._db = self._client[get_mongodb_database()]
        logger.info("MongoDB client initialized for database %s", self._db.name)

    @property
    def db(self) -> AsyncIOMotorDatabase:
        if self._db is None:
            self._initialize_client()
        return self._db

    async def init_beanie(self) -> None:
        """Bind all document models to the database. Safe to call twice."""
        if self._beanie_initialized:
            return

        from beanie import init_beanie

        from db.models import ALL_DOCUMENT_MODELS

        await init_beanie(database=self.db, document_models=ALL_DOCUMENT_MODELS)
        self._beanie_initialized = True
        logger.info(
            "Beanie ODM initialized with %d document models",
            len(ALL_DOCUMENT_MODELS),
        )

    async def cleanup_connections(self) -> None:
        """Close the MongoDB client and reset state."""
        if self._client is not None:
            logger.info("Closing MongoDB client connections...")
            self._client.close()
        self._client = None
        self._db = None
        self._beanie_initialized = False


# Singleton instance
db_manager = DatabaseManager()
