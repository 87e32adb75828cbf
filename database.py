"""
MongoDB handle for the grievance portal.

`db` is None when no DATABASE_URL / MONGO_URI is configured; callers check
for that before touching a collection.
"""

import logging
from typing import Optional

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from config import settings

logger = logging.getLogger(__name__)

USERS = "users"
COMPLAINTS = "complaints"
COUNTERS = "counters"

client: Optional[MongoClient] = None
db: Optional[Database] = None


def make_client(url: str, timeout_ms: int) -> MongoClient:
    """Lazy client; the first operation fails after timeout_ms when no server answers."""
    return MongoClient(url, serverSelectionTimeoutMS=timeout_ms)


if settings.DATABASE_URL:
    client = make_client(settings.DATABASE_URL, settings.DATABASE_TIMEOUT_MS)
    db = client[settings.DATABASE_NAME]


def ping(database: Database) -> None:
    """Round-trip to the server; raises a PyMongoError when unreachable."""
    database.client.admin.command("ping")


def ensure_indexes(database: Database) -> None:
    database[USERS].create_index([("email", ASCENDING)], unique=True)
    database[COMPLAINTS].create_index([("id", ASCENDING)], unique=True)
    logger.debug("Indexes ensured on %s.email and %s.id", USERS, COMPLAINTS)
