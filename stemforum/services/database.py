"""
MongoDB connection management.

The connection is established lazily: the first caller of
``ensure_connected`` starts a single connection attempt that every concurrent
caller awaits. A failed attempt is dropped so that the next request retries
instead of taking the process down.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

import pymongo
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from stemforum.config import settings

logger = logging.getLogger(__name__)

ARTICLES = "articles"
COMMENTS = "comments"
NEWSLETTERS = "newsletters"


class DatabaseUnavailableError(Exception):
    """Raised when the data store cannot be reached."""


def default_client_factory() -> MongoClient:
    return MongoClient(
        settings.MONGODB_URI,
        serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS,
        tz_aware=True,
    )


def create_indexes(db: Database) -> None:
    """Create the indexes the collections rely on, if missing"""
    db[ARTICLES].create_index("articleId", unique=True)
    db[NEWSLETTERS].create_index("email", unique=True)
    db[COMMENTS].create_index(
        [("articleId", pymongo.ASCENDING), ("createdAt", pymongo.DESCENDING)]
    )


class ConnectionManager:
    """Owns the MongoClient and memoizes the in-flight connection attempt"""

    def __init__(
        self,
        client_factory: Callable[[], MongoClient] = default_client_factory,
        database_name: Optional[str] = None,
    ):
        self._client_factory = client_factory
        self._database_name = database_name
        self._client: Optional[MongoClient] = None
        self._db: Optional[Database] = None
        self._attempt: Optional[asyncio.Future] = None

    @property
    def database_name(self) -> str:
        return self._database_name or settings.database_name

    @property
    def is_connected(self) -> bool:
        return self._db is not None

    def configure(
        self,
        client_factory: Callable[[], MongoClient],
        database_name: Optional[str] = None,
    ) -> None:
        """Swap the client factory (used by tests and scripts) and drop state"""
        self.close()
        self._client_factory = client_factory
        if database_name is not None:
            self._database_name = database_name

    async def ensure_connected(self) -> Database:
        """
        Return the connected database, connecting on first use.

        Raises:
            DatabaseUnavailableError: if the connection attempt failed
        """
        if self._db is not None:
            return self._db

        loop = asyncio.get_running_loop()
        attempt = self._attempt
        # An attempt started on another (since closed) loop cannot be awaited here
        if attempt is None or attempt.get_loop() is not loop:
            attempt = loop.create_task(self._connect())
            self._attempt = attempt

        try:
            self._db = await asyncio.shield(attempt)
        except DatabaseUnavailableError:
            if self._attempt is attempt:
                self._attempt = None
            raise
        return self._db

    async def _connect(self) -> Database:
        logger.info("Connecting to MongoDB database '%s'", self.database_name)
        try:
            return await asyncio.to_thread(self._connect_sync)
        except PyMongoError as e:
            logger.error(f"MongoDB connection error: {e}")
            raise DatabaseUnavailableError(str(e)) from e

    def _connect_sync(self) -> Database:
        client = self._client_factory()
        try:
            client.admin.command("ping")
            db = client[self.database_name]
            create_indexes(db)
        except PyMongoError:
            client.close()
            raise
        self._client = client
        logger.info("MongoDB connected successfully")
        return db

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None
        self._db = None
        self._attempt = None


db_manager = ConnectionManager()
