from typing import List, Optional

from sqlalchemy import select, delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from app.models import Device, User


async def register_or_update_device(
    db: AsyncSession,
    user_id: str,
    token: str,
    platform: str,
    app_version: str | None,
) -> Device:
    result = await db.execute(
        select(Device).where(Device.user_id == user_id, Device.fcm_token == token)
    )
    device = result.scalar_one_or_none()
    if device:
        device.platform = platform
        device.app_version = app_version
        device.last_seen = func.now()
    else:
        device = Device(
            user_id=user_id,
            fcm_token=token,
            platform=platform,
            app_version=app_version,
        )
        db.add(device)
    await db.commit()
    await db.refresh(device)
    return device


async def list_user_devices(db: AsyncSession, user_id: str) -> List[Device]:
    result = await db.execute(
        select(Device).where(Device.user_id == user_id).order_by(Device.created_at)
    )
    return list(result.scalars().all())


async def get_legacy_token(db: AsyncSession, user_id: str) -> tuple[Optional[str], Optional[str]]:
    """Return (token, platform) stored on the user row, or (None, None)."""
    result = await db.execute(
        select(User.fcm_token, User.fcm_platform).where(User.id == user_id)
    )
    row = result.first()
    if row is None:
        return None, None
    return row[0], row[1]


async def delete_user_token(db: AsyncSession, user_id: str, token: str) -> int:
    """Remove one user's copy of a token, including a matching legacy token."""
    result = await db.execute(
        delete(Device).where(Device.user_id == user_id, Device.fcm_token == token)
    )
    legacy = await db.execute(
        update(User)
        .where(User.id == user_id, User.fcm_token == token)
        .values(fcm_token=None, fcm_platform=None)
    )
    await db.commit()
    return (result.rowcount or 0) + (legacy.rowcount or 0)


async def delete_token_everywhere(db: AsyncSession, token: str) -> int:
    """Remove every record holding this token value across all users. Returns rows touched."""
    result = await db.execute(delete(Device).where(Device.fcm_token == token))
    legacy = await db.execute(
        update(User).where(User.fcm_token == token).values(fcm_token=None, fcm_platform=None)
    )
    await db.commit()
    return (result.rowcount or 0) + (legacy.rowcount or 0)
