"""Registry of push delivery tokens per user."""
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app import crud
from app.config import settings
from app.models import Device
from app.notifications.types import DeviceToken, Platform
from app.utils.logger import get_logger, mask_token

logger = get_logger(__name__)


def _parse_platform(value: Optional[str], default: Platform) -> Platform:
    try:
        return Platform(value) if value else default
    except ValueError:
        return default


class TokenRegistry:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], legacy_platform: Optional[str] = None):
        self._session_factory = session_factory
        self._legacy_platform = _parse_platform(legacy_platform or settings.LEGACY_TOKEN_PLATFORM, Platform.ANDROID)

    async def list_tokens(self, user_id: str) -> List[DeviceToken]:
        """
        Registered tokens for a user, deduplicated by token value.

        Per-device rows come first; the legacy token on the user row is added
        only when no device row already carries the same value.
        """
        async with self._session_factory() as db:
            devices = await crud.list_user_devices(db, user_id)
            legacy_token, legacy_platform = await crud.get_legacy_token(db, user_id)

        tokens: List[DeviceToken] = []
        seen = set()
        for device in devices:
            if device.fcm_token in seen:
                continue
            seen.add(device.fcm_token)
            tokens.append(DeviceToken(device.fcm_token, _parse_platform(device.platform, self._legacy_platform)))

        if legacy_token and legacy_token not in seen:
            tokens.append(DeviceToken(legacy_token, _parse_platform(legacy_platform, self._legacy_platform)))
        return tokens

    async def register_token(
        self,
        user_id: str,
        token: str,
        platform: Platform,
        app_version: Optional[str] = None,
    ) -> Device:
        async with self._session_factory() as db:
            device = await crud.register_or_update_device(db, user_id, token, Platform(platform).value, app_version)
        logger.info(f"Device token registered for user {user_id}: {mask_token(token)} ({device.platform})")
        return device

    async def unregister_token(self, user_id: str, token: str) -> int:
        """Remove a token for one user only. Absent tokens are a no-op."""
        async with self._session_factory() as db:
            return await crud.delete_user_token(db, user_id, token)

    async def prune_token(self, token: str) -> int:
        """
        Delete every record holding this token value, across all users.

        Safe to call repeatedly and concurrently; a second call removes nothing.
        """
        async with self._session_factory() as db:
            removed = await crud.delete_token_everywhere(db, token)
        if removed:
            logger.warning(f"Pruned dead device token {mask_token(token)} ({removed} record(s))")
        else:
            logger.debug(f"Token {mask_token(token)} already pruned")
        return removed
