import logging

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from app.config import Settings

logger = logging.getLogger(__name__)


async def connect_to_mongo(settings: Settings):
    """Open the client, verify the server answers and make sure indexes exist."""
    if not settings.MONGO_URI:
        raise ValueError("MONGO_URI environment variable is not set! Check your .env file.")

    client = AsyncIOMotorClient(settings.MONGO_URI)
    db = client[settings.DATABASE_NAME]
    await client.admin.command("ping")

    if "mongodb+srv" in settings.MONGO_URI:
        logger.info("Connected to MongoDB Atlas (database=%s)", settings.DATABASE_NAME)
    else:
        logger.info("Connected to MongoDB at %s (database=%s)", settings.MONGO_URI, settings.DATABASE_NAME)

    await ensure_indexes(db)
    return client, db


async def ensure_indexes(db: AsyncIOMotorDatabase):
    # (jobId, appliedBy) is unique so duplicate submissions fail atomically on insert
    await db.applications.create_index(
        [("jobId", ASCENDING), ("appliedBy", ASCENDING)],
        unique=True,
        name="jobId_appliedBy_unique",
    )
    await db.applications.create_index([("status", ASCENDING)])
    await db.applications.create_index([("createdAt", DESCENDING)])
    await db.users.create_index([("email", ASCENDING)], unique=True)
    logger.info("Indexes ensured on applications and users")


async def close_mongo_connection(client):
    if client:
        client.close()
        logger.info("MongoDB connection closed")


def get_db(request: Request) -> AsyncIOMotorDatabase:
    """Dependency returning the database acquired at startup."""
    return request.app.state.db
