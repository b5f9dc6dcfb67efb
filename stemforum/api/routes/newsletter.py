"""Newsletter subscription API routes"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Response, status

from stemforum.services.degrade import DATA_LAYER_ERRORS
from stemforum.services.newsletter_service import (
    AlreadySubscribedError,
    InvalidEmailError,
    newsletter_service,
)
from stemforum.schemas.newsletter import (
    SubscribeRequest,
    SubscribeResponse,
    SubscriptionListResponse,
)

router = APIRouter(prefix="/api/newsletter", tags=["Newsletter"])
logger = logging.getLogger(__name__)


@router.post(
    "/subscribe",
    response_model=SubscribeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def subscribe(payload: SubscribeRequest, response: Response):
    """Create a subscription, or reactivate an inactive one (200)"""
    try:
        subscription, reactivated = await newsletter_service.subscribe(
            payload.email, source=payload.source, article_id=payload.article_id
        )
    except InvalidEmailError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except AlreadySubscribedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except DATA_LAYER_ERRORS as e:
        logger.error(f"Error subscribing to newsletter: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )

    if reactivated:
        response.status_code = status.HTTP_200_OK
        message = "Welcome back! Your subscription has been reactivated"
    else:
        message = "Successfully subscribed to the newsletter"
    return {
        "message": message,
        "reactivated": reactivated,
        "subscription": subscription.model_dump(by_alias=True),
    }


@router.get("/subscriptions", response_model=SubscriptionListResponse)
async def list_subscriptions(active: Optional[bool] = Query(None)):
    listing = await newsletter_service.list_subscriptions(active)
    listing["subscriptions"] = [
        s.model_dump(by_alias=True) for s in listing["subscriptions"]
    ]
    return listing
