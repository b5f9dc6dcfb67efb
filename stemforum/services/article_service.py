"""
Article view/like counters backed by the ``articles`` collection
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from pymongo import ReturnDocument

from stemforum.models.article import Article, mongo_article_to_model
from stemforum.services.database import (
    ARTICLES,
    COMMENTS,
    ConnectionManager,
    db_manager,
)
from stemforum.services.degrade import degrade_to

logger = logging.getLogger(__name__)

LIKE = "like"
UNLIKE = "unlike"

EMPTY_STATS = {"views": 0, "likes": 0, "hasLiked": False, "comments": 0}


class ArticleService:
    """View counting, like toggling and stats aggregation"""

    def __init__(self, manager: ConnectionManager = db_manager):
        self.manager = manager

    async def _collection(self, name: str = ARTICLES):
        db = await self.manager.ensure_connected()
        return db[name]

    async def get_or_create(self, article_id: int) -> Article:
        """Find an article, creating it with zero counters on first sight"""
        coll = await self._collection()
        now = datetime.now(timezone.utc)
        doc = await asyncio.to_thread(
            coll.find_one_and_update,
            {"articleId": article_id},
            {
                "$setOnInsert": {
                    "views": 0,
                    "likes": [],
                    "createdAt": now,
                    "updatedAt": now,
                }
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return mongo_article_to_model(doc)

    @degrade_to(EMPTY_STATS)
    async def get_stats(self, article_id: int) -> Dict[str, Any]:
        article = await self.get_or_create(article_id)
        comments = await self._collection(COMMENTS)
        comment_count = await asyncio.to_thread(
            comments.count_documents, {"articleId": article_id}
        )
        return {
            "views": article.views,
            "likes": article.like_count,
            "hasLiked": False,
            "comments": comment_count,
        }

    async def record_view(self, article_id: int, session_id: str) -> int:
        """
        Increment the view counter by one and return the new total.

        The session id only gates the call client-side; no per-session
        dedup is kept here.
        """
        coll = await self._collection()
        now = datetime.now(timezone.utc)
        doc = await asyncio.to_thread(
            coll.find_one_and_update,
            {"articleId": article_id},
            {
                "$inc": {"views": 1},
                "$set": {"updatedAt": now},
                "$setOnInsert": {"likes": [], "createdAt": now},
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        logger.debug(f"View recorded for article {article_id} (session {session_id})")
        return doc["views"]

    async def toggle_like(self, article_id: int, user_id: str, action: str) -> int:
        """
        Apply a like/unlike for ``user_id`` and return the new like count.

        Liking twice and unliking a non-liked article are both no-ops.
        """
        if action not in (LIKE, UNLIKE):
            raise ValueError(f"Unknown like action: {action}")

        await self.get_or_create(article_id)
        coll = await self._collection()
        now = datetime.now(timezone.utc)

        if action == LIKE:
            # The filter only matches while the user is absent from the array
            await asyncio.to_thread(
                coll.update_one,
                {"articleId": article_id, "likes.userId": {"$ne": user_id}},
                {
                    "$push": {"likes": {"userId": user_id, "likedAt": now}},
                    "$set": {"updatedAt": now},
                },
            )
        else:
            await asyncio.to_thread(
                coll.update_one,
                {"articleId": article_id, "likes.userId": user_id},
                {
                    "$pull": {"likes": {"userId": user_id}},
                    "$set": {"updatedAt": now},
                },
            )

        doc = await asyncio.to_thread(coll.find_one, {"articleId": article_id})
        return len(doc.get("likes") or [])

    @degrade_to({})
    async def get_all_stats(self) -> Dict[str, Dict[str, int]]:
        """Per-article summary for every known article plus ``_totals``"""
        articles = await self._collection()
        comments = await self._collection(COMMENTS)

        article_docs = await asyncio.to_thread(
            lambda: list(articles.find({}, {"articleId": 1, "views": 1, "likes": 1}))
        )
        comment_counts = await asyncio.to_thread(
            lambda: list(
                comments.aggregate(
                    [{"$group": {"_id": "$articleId", "count": {"$sum": 1}}}]
                )
            )
        )

        stats: Dict[str, Dict[str, int]] = {}
        for doc in article_docs:
            stats[str(doc["articleId"])] = {
                "views": doc.get("views", 0),
                "likes": len(doc.get("likes") or []),
                "comments": 0,
            }
        # Comments may reference ids that have no article document yet
        for row in comment_counts:
            entry = stats.setdefault(
                str(row["_id"]), {"views": 0, "likes": 0, "comments": 0}
            )
            entry["comments"] = row["count"]

        totals = {
            "views": sum(s["views"] for s in stats.values()),
            "likes": sum(s["likes"] for s in stats.values()),
            "comments": sum(s["comments"] for s in stats.values()),
            "articles": len(stats),
        }
        stats["_totals"] = totals
        return stats


article_service = ArticleService()
