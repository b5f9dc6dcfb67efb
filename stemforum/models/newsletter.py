"""
Newsletter subscription model and MongoDB conversion helpers
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class NewsletterSubscription(BaseModel):
    subscription_id: Optional[str] = Field(None, alias="_id")
    email: str
    source: str = "website"
    article_id: Optional[int] = Field(None, alias="articleId")
    is_active: bool = Field(True, alias="isActive")
    subscribed_at: Optional[datetime] = Field(None, alias="subscribedAt")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)


def mongo_subscription_to_model(doc: dict) -> NewsletterSubscription:
    return NewsletterSubscription.model_validate({**doc, "_id": str(doc["_id"])})
