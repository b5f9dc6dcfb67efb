"""
Comment model and MongoDB conversion helpers
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

MAX_COMMENT_LENGTH = 1000


class Comment(BaseModel):
    comment_id: Optional[str] = Field(None, alias="_id")
    article_id: int = Field(..., alias="articleId")
    content: str = Field(..., max_length=MAX_COMMENT_LENGTH)
    author: str
    user_id: str = Field(..., alias="userId")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)


def default_author(user_id: str) -> str:
    return f"User {user_id[:8]}"


def mongo_comment_to_model(doc: dict) -> Comment:
    return Comment.model_validate({**doc, "_id": str(doc["_id"])})
