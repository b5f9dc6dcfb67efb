"""Article comments API routes"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, status

from stemforum.services.comment_service import CommentValidationError, comment_service
from stemforum.services.degrade import DATA_LAYER_ERRORS
from stemforum.schemas.article import ArticleId
from stemforum.schemas.comment import CommentCreateSchema, CommentResponse

router = APIRouter(prefix="/api/articles", tags=["Comments"])
logger = logging.getLogger(__name__)


@router.get("/{article_id}/comments", response_model=List[CommentResponse])
async def list_comments(article_id: ArticleId):
    comments = await comment_service.list_comments(article_id)
    return [c.model_dump(by_alias=True) for c in comments]


@router.post(
    "/{article_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(payload: CommentCreateSchema, article_id: ArticleId):
    try:
        comment = await comment_service.add_comment(
            article_id,
            content=payload.content,
            user_id=payload.user_id,
            author=payload.author,
        )
    except CommentValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DATA_LAYER_ERRORS as e:
        logger.error(f"Error adding comment to article {article_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )
    return comment.model_dump(by_alias=True)
