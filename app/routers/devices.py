from fastapi import APIRouter, Depends

from app import schemas
from app.auth import get_current_user
from app.dependencies import get_event_router
from app.notifications import EventRouter

router = APIRouter(prefix="/devices", tags=["devices"])


@router.post("/register", response_model=schemas.DeviceResponse)
async def register_device(
    body: schemas.DeviceRegisterRequest,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    event_router: EventRouter = Depends(get_event_router),
):
    return await event_router.registry.register_token(
        current_user.id,
        body.fcm_token,
        body.platform,
        body.app_version,
    )


@router.delete("/unregister")
async def unregister_device(
    fcm_token: str,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    event_router: EventRouter = Depends(get_event_router),
):
    # Only the caller's copy; the same token under another account is left alone
    await event_router.registry.unregister_token(current_user.id, fcm_token)
    return {"status": "ok"}


@router.get("", response_model=list[schemas.DeviceTokenInfo])
async def my_tokens(
    current_user: schemas.CurrentUser = Depends(get_current_user),
    event_router: EventRouter = Depends(get_event_router),
):
    devices = await event_router.registry.list_tokens(current_user.id)
    return [schemas.DeviceTokenInfo(token=d.token, platform=d.platform) for d in devices]
