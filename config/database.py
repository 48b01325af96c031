"""Database configuration for async MongoDB connection using Motor."""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from typing import Optional


USERS_COLLECTION = "users"
TEMPLATES_COLLECTION = "templates"
SUBSCRIPTIONS_COLLECTION = "subscriptions"
REVENUES_COLLECTION = "revenues"


class Database:
    """MongoDB database connection manager."""

    def __init__(self, url: str, name: str, client: Optional[AsyncIOMotorClient] = None):
        self.url = url
        self.name = name
        self.client = client
        self.db: Optional[AsyncIOMotorDatabase] = client[name] if client is not None else None

    async def connect(self) -> None:
        """
        Establish connection to MongoDB and verify it answers.

        Raises whatever the driver raises when the server cannot be reached, so
        startup aborts instead of serving without a store.
        """
        if self.client is None:
            self.client = AsyncIOMotorClient(
                self.url,
                maxPoolSize=10,
                minPoolSize=1,
                serverSelectionTimeoutMS=5000
            )
        self.db = self.client[self.name]
        await self.client.admin.command("ping")

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()

    async def health_check(self) -> bool:
        """Check if database connection is healthy."""
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
            return True
        except Exception:
            return False

    def get_collection(self, collection_name: str):
        """Get a specific collection from the database."""
        return self.db[collection_name]
