# catalog_api/storage.py
import logging

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from . import config


logger = logging.getLogger(__name__)


def connect(
    mongo_url: str = config.MONGO_URL,
    db_name: str = config.DB_NAME,
    timeout_ms: int = config.MONGO_TIMEOUT_MS,
) -> Database:
    """Open the MongoDB connection and return the database handle.

    The server is pinged before returning so a bad URL or an unreachable
    cluster fails here, at startup, instead of on the first request.
    """
    client: MongoClient = MongoClient(mongo_url, serverSelectionTimeoutMS=timeout_ms)
    try:
        client.admin.command("ping")
    except PyMongoError:
        client.close()
        raise
    logger.info("Connected to MongoDB database '%s'", db_name)
    return client[db_name]


def close(db: Database) -> None:
    db.client.close()
