"""
Newsletter request/response schemas
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime

from stemforum.models.article import MAX_ARTICLE_ID


class SubscribeRequest(BaseModel):
    email: str
    source: Optional[str] = None
    article_id: Optional[int] = Field(None, alias="articleId", gt=0, le=MAX_ARTICLE_ID)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {"email": "reader@example.com", "source": "article", "articleId": 3}
        },
    )


class SubscriptionResponse(BaseModel):
    subscription_id: str = Field(..., alias="_id")
    email: str
    source: str
    article_id: Optional[int] = Field(None, alias="articleId")
    is_active: bool = Field(..., alias="isActive")
    subscribed_at: Optional[datetime] = Field(None, alias="subscribedAt")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)


class SubscribeResponse(BaseModel):
    message: str
    reactivated: bool = False
    subscription: SubscriptionResponse


class SubscriptionListResponse(BaseModel):
    subscriptions: list[SubscriptionResponse]
    count: int
    total_count: int = Field(..., alias="totalCount")
    active_count: int = Field(..., alias="activeCount")

    model_config = ConfigDict(populate_by_name=True)
