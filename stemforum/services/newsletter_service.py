"""
Newsletter sign-up backed by the ``newsletters`` collection
"""

import asyncio
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import pymongo
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from stemforum.models.newsletter import (
    NewsletterSubscription,
    mongo_subscription_to_model,
)
from stemforum.services.database import NEWSLETTERS, ConnectionManager, db_manager
from stemforum.services.degrade import degrade_to

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DEFAULT_SOURCE = "website"


class InvalidEmailError(ValueError):
    """Raised when the email does not look like an address"""


class AlreadySubscribedError(Exception):
    """Raised when an active subscription already exists for the email"""


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class NewsletterService:
    def __init__(self, manager: ConnectionManager = db_manager):
        self.manager = manager

    async def _collection(self):
        db = await self.manager.ensure_connected()
        return db[NEWSLETTERS]

    async def subscribe(
        self,
        email: Optional[str],
        source: Optional[str] = None,
        article_id: Optional[int] = None,
    ) -> Tuple[NewsletterSubscription, bool]:
        """
        Create or reactivate a subscription.

        Returns:
            (subscription, reactivated)

        Raises:
            InvalidEmailError: email fails validation
            AlreadySubscribedError: an active subscription exists
        """
        address = normalize_email(email)
        if not EMAIL_PATTERN.match(address):
            raise InvalidEmailError("Please provide a valid email address")

        coll = await self._collection()
        source = source or DEFAULT_SOURCE
        now = datetime.now(timezone.utc)

        existing = await asyncio.to_thread(coll.find_one, {"email": address})
        if existing is not None:
            if existing.get("isActive", True):
                raise AlreadySubscribedError("Email is already subscribed")
            doc = await asyncio.to_thread(
                coll.find_one_and_update,
                {"_id": existing["_id"], "isActive": False},
                {
                    "$set": {
                        "isActive": True,
                        "source": source,
                        "articleId": article_id,
                        "subscribedAt": now,
                        "updatedAt": now,
                    }
                },
                return_document=ReturnDocument.AFTER,
            )
            if doc is None:
                # Reactivated by a concurrent request
                raise AlreadySubscribedError("Email is already subscribed")
            logger.info(f"Newsletter subscription reactivated for {address}")
            return mongo_subscription_to_model(doc), True

        data = {
            "email": address,
            "source": source,
            "articleId": article_id,
            "isActive": True,
            "subscribedAt": now,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            result = await asyncio.to_thread(coll.insert_one, data)
        except DuplicateKeyError as e:
            raise AlreadySubscribedError("Email is already subscribed") from e
        data["_id"] = result.inserted_id
        logger.info(f"New newsletter subscription for {address} (source={source})")
        return mongo_subscription_to_model(data), False

    @degrade_to(
        {"subscriptions": [], "count": 0, "totalCount": 0, "activeCount": 0}
    )
    async def list_subscriptions(self, active: Optional[bool] = None) -> Dict[str, Any]:
        """Subscriptions (optionally filtered by ``isActive``) with counts"""
        coll = await self._collection()
        query: Dict[str, Any] = {}
        if active is not None:
            query["isActive"] = active

        docs = await asyncio.to_thread(
            lambda: list(coll.find(query).sort("createdAt", pymongo.DESCENDING))
        )
        total = await asyncio.to_thread(coll.count_documents, {})
        active_count = await asyncio.to_thread(coll.count_documents, {"isActive": True})

        subscriptions = [mongo_subscription_to_model(doc) for doc in docs]
        return {
            "subscriptions": subscriptions,
            "count": len(subscriptions),
            "totalCount": total,
            "activeCount": active_count,
        }


newsletter_service = NewsletterService()
