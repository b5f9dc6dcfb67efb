"""
Comment request/response schemas
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime


class CommentCreateSchema(BaseModel):
    # Length rules are checked on the trimmed text by the route
    content: Optional[str] = None
    author: Optional[str] = None
    user_id: Optional[str] = Field(None, alias="userId")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "content": "Great piece on CRISPR!",
                "author": "Ada",
                "userId": "user_9x8y7z_1697500000000",
            }
        },
    )


class CommentResponse(BaseModel):
    comment_id: str = Field(..., alias="_id")
    article_id: int = Field(..., alias="articleId")
    content: str
    author: str
    user_id: str = Field(..., alias="userId")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)
