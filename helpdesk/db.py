# helpdesk/db.py
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING

from helpdesk.config import DEFAULT_DATABASE
from helpdesk.utils.logging_config import logger

TICKETS = "tickets"
CUSTOMERS = "users"


def create_client(uri: str) -> AsyncIOMotorClient:
    # Timestamps come back UTC-aware, matching what the API writes
    return AsyncIOMotorClient(uri, tz_aware=True)


def get_database(client: AsyncIOMotorClient) -> AsyncIOMotorDatabase:
    # Falls back when the connection string has no database path
    return client.get_default_database(DEFAULT_DATABASE)


async def init_indexes(db: AsyncIOMotorDatabase):
    """
    Create the indexes the API relies on.
    The unique ticketId index is what rejects duplicate tickets.
    """
    await db[TICKETS].create_index([("ticketId", ASCENDING)], unique=True)
    await db[TICKETS].create_index([("createdAt", ASCENDING)])
    await db[CUSTOMERS].create_index([("email", ASCENDING)], unique=True)
    logger.info("Indexes ensured on '%s' and '%s'", TICKETS, CUSTOMERS)
