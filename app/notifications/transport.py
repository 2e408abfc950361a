"""Firebase Cloud Messaging transport with failure classification."""
import asyncio
from typing import Optional, Protocol

import firebase_admin
from firebase_admin import exceptions as firebase_exceptions
from firebase_admin import messaging

from app.notifications.payloads import PlatformPayload
from app.utils.logger import get_logger, mask_token

logger = get_logger(__name__)


class DeliveryError(Exception):
    """Base class for push delivery failures."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


class PermanentDeliveryError(DeliveryError):
    """The token will never succeed again (unregistered, malformed, wrong sender)."""


class TransientDeliveryError(DeliveryError):
    """A later attempt might succeed (quota, network, server errors)."""


class PushTransport(Protocol):
    async def send(self, token: str, payload: PlatformPayload) -> str:
        """Deliver one payload to one token and return the provider message id."""
        ...


# Errors that mean the token itself is dead
PERMANENT_ERRORS = (
    messaging.UnregisteredError,
    messaging.SenderIdMismatchError,
)


def _is_invalid_token(error: Exception) -> bool:
    # INVALID_ARGUMENT also covers malformed messages; only a bad token is permanent
    return (
        isinstance(error, firebase_exceptions.InvalidArgumentError)
        and "registration token" in str(error).lower()
    )


def classify_firebase_error(error: Exception) -> DeliveryError:
    """Map a firebase_admin exception onto the permanent/transient split."""
    code = getattr(error, "code", None)
    if isinstance(error, PERMANENT_ERRORS) or _is_invalid_token(error):
        return PermanentDeliveryError(str(error), code=code)
    return TransientDeliveryError(str(error), code=code)


class FcmTransport:
    """
    Sends payloads through firebase_admin.messaging.

    messaging.send is a blocking HTTP call, so each send runs in the default
    thread pool and many sends can be in flight at once.
    """

    def __init__(self, app: Optional[firebase_admin.App] = None, dry_run: bool = False):
        self.app = app
        self.dry_run = dry_run

    async def send(self, token: str, payload: PlatformPayload) -> str:
        message = payload.to_fcm_message(token)
        try:
            return await asyncio.to_thread(messaging.send, message, self.dry_run, self.app)
        except firebase_exceptions.FirebaseError as e:
            raise classify_firebase_error(e) from e
        except (ValueError, TypeError) as e:
            # Local message validation failed; the token itself is not at fault
            raise TransientDeliveryError(f"Invalid message for {mask_token(token)}: {e}", code="invalid-message") from e
        except Exception as e:
            raise TransientDeliveryError(f"{type(e).__name__}: {e}") from e
