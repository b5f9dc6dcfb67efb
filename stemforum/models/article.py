"""
Article model and MongoDB conversion helpers
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

# Largest value BSON can store as an int64
MAX_ARTICLE_ID = 2**63 - 1


class Like(BaseModel):
    user_id: str = Field(..., alias="userId")
    liked_at: Optional[datetime] = Field(None, alias="likedAt")

    model_config = ConfigDict(populate_by_name=True)


class Article(BaseModel):
    article_id: int = Field(..., alias="articleId")
    views: int = 0
    likes: list[Like] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def like_count(self) -> int:
        return len(self.likes)


def mongo_article_to_model(doc: dict) -> Article:
    data = {k: v for k, v in doc.items() if k != "_id"}
    return Article.model_validate(data)

