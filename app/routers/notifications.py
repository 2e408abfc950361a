from fastapi import APIRouter, Depends, Request

from app import schemas
from app.auth import get_current_user
from app.dependencies import get_event_router
from app.middleware.rate_limit import rate_limit_app_backgrounded
from app.notifications import AppBackgrounded, EventRouter
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("/app-backgrounded", response_model=schemas.AppBackgroundedResponse)
@rate_limit_app_backgrounded
async def app_backgrounded(
    request: Request,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    event_router: EventRouter = Depends(get_event_router),
):
    """
    Called by the client when it moves to the background.

    Posts a single "N unread messages" summary to the caller's Android devices
    when anything is unread, and reports the count back to the client.
    """
    result = await event_router.handle(AppBackgrounded(user_id=current_user.id))
    logger.info(f"App backgrounded for user {current_user.id}: unread={result.unread_count} success={result.success}")
    return result.to_response()


@router.get("/unread-count", response_model=schemas.UnreadCountResponse)
async def unread_count(
    current_user: schemas.CurrentUser = Depends(get_current_user),
    event_router: EventRouter = Depends(get_event_router),
):
    count = await event_router.aggregator.compute_unread(current_user.id)
    return {"unreadCount": count}
