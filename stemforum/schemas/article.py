"""
Article stats request/response schemas
"""

from fastapi import Path
from pydantic import BaseModel, Field, ConfigDict
from typing import Annotated, Literal, Optional

from stemforum.models.article import MAX_ARTICLE_ID

ArticleId = Annotated[
    int, Path(gt=0, le=MAX_ARTICLE_ID, description="Numeric article identifier")
]


class ViewRequest(BaseModel):
    session_id: Optional[str] = Field(None, alias="sessionId")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"sessionId": "session_k3j2h1_1697500000000"}},
    )


class LikeRequest(BaseModel):
    user_id: Optional[str] = Field(None, alias="userId")
    action: Literal["like", "unlike"]

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {"userId": "user_9x8y7z_1697500000000", "action": "like"}
        },
    )


class ArticleStatsResponse(BaseModel):
    views: int = 0
    likes: int = 0
    # Like state lives in the browser; the server never claims it
    has_liked: bool = Field(False, alias="hasLiked")
    comments: int = 0

    model_config = ConfigDict(populate_by_name=True)


class ViewResponse(BaseModel):
    views: int
    message: str = "View recorded successfully"


class LikeResponse(BaseModel):
    likes: int
    has_liked: bool = Field(..., alias="hasLiked")
    message: str

    model_config = ConfigDict(populate_by_name=True)

