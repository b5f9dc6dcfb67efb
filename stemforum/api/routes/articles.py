"""Article stats API routes: views, likes and homepage aggregates"""

import logging
from typing import Dict

from fastapi import APIRouter, HTTPException, status

from stemforum.services.article_service import article_service
from stemforum.services.degrade import DATA_LAYER_ERRORS
from stemforum.schemas.article import (
    ArticleId,
    ArticleStatsResponse,
    LikeRequest,
    LikeResponse,
    ViewRequest,
    ViewResponse,
)

router = APIRouter(prefix="/api", tags=["Articles"])
logger = logging.getLogger(__name__)


@router.get("/article/{article_id}/stats", response_model=ArticleStatsResponse)
async def get_article_stats(article_id: ArticleId):
    """Views, likes and comment count; zeros when the database is down"""
    return await article_service.get_stats(article_id)


@router.post("/article/{article_id}/view", response_model=ViewResponse)
async def record_view(payload: ViewRequest, article_id: ArticleId):
    """Count one view. Callers send this at most once per browser session."""
    if not payload.session_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Session ID required"
        )
    try:
        views = await article_service.record_view(article_id, payload.session_id)
    except DATA_LAYER_ERRORS as e:
        logger.error(f"Error recording view for article {article_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )
    return ViewResponse(views=views)


@router.post("/article/{article_id}/like", response_model=LikeResponse)
async def toggle_like(payload: LikeRequest, article_id: ArticleId):
    if not payload.user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="User ID required"
        )
    try:
        likes = await article_service.toggle_like(
            article_id, payload.user_id, payload.action
        )
    except DATA_LAYER_ERRORS as e:
        logger.error(f"Error toggling like for article {article_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )
    # hasLiked echoes the requested action
    return LikeResponse(
        likes=likes,
        hasLiked=payload.action == "like",
        message=f"Article {payload.action}d successfully",
    )


@router.get("/articles/stats", response_model=Dict[str, Dict[str, int]])
async def get_all_article_stats():
    """Stats for every known article keyed by id, plus ``_totals``"""
    return await article_service.get_all_stats()
