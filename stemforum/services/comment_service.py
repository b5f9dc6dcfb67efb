"""
Comment storage backed by the ``comments`` collection
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional

import pymongo

from stemforum.models.comment import (
    MAX_COMMENT_LENGTH,
    Comment,
    default_author,
    mongo_comment_to_model,
)
from stemforum.services.database import COMMENTS, ConnectionManager, db_manager
from stemforum.services.degrade import degrade_to

logger = logging.getLogger(__name__)


class CommentValidationError(ValueError):
    """Raised when a submitted comment is rejected"""


class CommentService:
    def __init__(self, manager: ConnectionManager = db_manager):
        self.manager = manager

    async def _collection(self):
        db = await self.manager.ensure_connected()
        return db[COMMENTS]

    @degrade_to([])
    async def list_comments(self, article_id: int) -> List[Comment]:
        """All comments for an article, most recent first"""
        coll = await self._collection()
        docs = await asyncio.to_thread(
            lambda: list(
                coll.find({"articleId": article_id}).sort(
                    [("createdAt", pymongo.DESCENDING), ("_id", pymongo.DESCENDING)]
                )
            )
        )
        return [mongo_comment_to_model(doc) for doc in docs]

    async def add_comment(
        self,
        article_id: int,
        content: Optional[str],
        user_id: Optional[str],
        author: Optional[str] = None,
    ) -> Comment:
        """
        Validate and store a comment.

        Raises:
            CommentValidationError: empty or over-long content, or no user id
        """
        text = (content or "").strip()
        if not text:
            raise CommentValidationError("Comment content is required")
        if len(text) > MAX_COMMENT_LENGTH:
            raise CommentValidationError("Comment is too long")
        if not user_id:
            raise CommentValidationError("User ID required")

        now = datetime.now(timezone.utc)
        data = {
            "articleId": article_id,
            "content": text,
            "author": (author or "").strip() or default_author(user_id),
            "userId": user_id,
            "createdAt": now,
            "updatedAt": now,
        }
        coll = await self._collection()
        result = await asyncio.to_thread(coll.insert_one, data)
        data["_id"] = result.inserted_id
        logger.info(f"Comment {result.inserted_id} added to article {article_id}")
        return mongo_comment_to_model(data)


comment_service = CommentService()
