"""
MongoDB connection management following FastAPI best practices

A single Database is constructed at startup, held on app.state for the
process lifetime and closed at shutdown.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.core.config import Config
from app.core.errors import StoreUnavailable
from app.core.logger import logger


class Database:
    """Database connection manager"""

    def __init__(self, settings: Config):
        self.settings = settings
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None

    async def connect(self):
        """Create the client and verify the server answers"""
        logger.info("Connecting to MongoDB...")

        try:
            options = {}
            if self.settings.store_timeout_ms is not None:
                options["serverSelectionTimeoutMS"] = self.settings.store_timeout_ms

            self.client = AsyncIOMotorClient(self.settings.mongo_uri, **options)
            self.database = self.client.get_default_database(self.settings.mongodb_database)

            await self.ping()

            logger.info(
                f"Successfully connected to MongoDB database '{self.database.name}'",
                metadata={"event": "mongodb_connected", "database": self.database.name}
            )
        except PyMongoError as e:
            logger.error(
                f"Could not connect to MongoDB: {e}",
                error=e,
                metadata={"event": "mongodb_connection_error"}
            )
            raise StoreUnavailable("Could not connect to MongoDB", error=e)

    async def ping(self):
        await self.client.admin.command("ping")

    async def close(self):
        """Close database connection"""
        logger.info("Closing connection to MongoDB...")
        if self.client is not None:
            self.client.close()
            self.client = None
            self.database = None

    @property
    def products(self) -> AsyncIOMotorCollection:
        return self.database[self.settings.products_collection]

    @property
    def users(self) -> AsyncIOMotorCollection:
        return self.database[self.settings.users_collection]
