"""Process-wide MongoDB client for the member store.

The client is created lazily and re-pinged on every call. A missing URL or a
failed first connection marks the store unavailable until ``reset_client``.
"""

import logging
import os
from pymongo import MongoClient
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

MONGO_URL = os.getenv('MONGO_URL')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'ttr_funnel')

CLIENT_OPTIONS = {
    'serverSelectionTimeoutMS': 5000,
    'connectTimeoutMS': 5000,
    'socketTimeoutMS': 15000,
    'maxPoolSize': 10,
    'retryWrites': True,
    'retryReads': True,
}

_client: MongoClient | None = None
_ever_connected = False
_unavailable = False


def reset_client():
    global _client, _ever_connected, _unavailable
    _client = None
    _ever_connected = False
    _unavailable = False


def _is_alive(client: MongoClient) -> bool:
    try:
        client.admin.command('ping')
        return True
    except PyMongoError:
        return False


def get_mongodb_client() -> MongoClient | None:
    """Return a live client, or None when MongoDB cannot be reached.

    A cached client that stops answering is replaced. Once a connection has
    succeeded, later failures are treated as transient and retried on the
    next call.
    """
    global _client, _ever_connected, _unavailable

    if _client is not None:
        if _is_alive(_client):
            return _client
        logger.warning("MongoDB client lost, reconnecting", extra={"database": DATABASE_NAME})
        _client = None

    if _unavailable:
        return None

    if not MONGO_URL:
        logger.error("MONGO_URL not configured, member store disabled")
        _unavailable = True
        return None

    try:
        client = MongoClient(MONGO_URL, **CLIENT_OPTIONS)
        client.admin.command('ping')
    except PyMongoError as e:
        if not _ever_connected:
            logger.error("MongoDB initial connection failed", extra={"error": str(e)[:200]})
            _unavailable = True
        return None

    if not _ever_connected:
        logger.info("Connected to MongoDB", extra={"database": DATABASE_NAME})
    _ever_connected = True
    _client = client
    return client
