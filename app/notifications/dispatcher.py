"""
Fan-out of built payloads to the push transport.

Every item is sent as its own task and the batch is joined at the end, so a
slow or failing token never holds back its siblings. Dead tokens are pruned
from the registry; transient failures are logged and left for the next event.
"""
import asyncio
import enum
from dataclasses import dataclass
from typing import List, Optional, Sequence

from app.notifications.payloads import PlatformPayload
from app.notifications.tokens import TokenRegistry
from app.notifications.transport import PermanentDeliveryError, PushTransport, TransientDeliveryError
from app.notifications.types import Recipient
from app.utils.logger import get_logger, mask_token

logger = get_logger(__name__)


class DeliveryStatus(str, enum.Enum):
    SENT = "sent"
    PRUNED = "pruned"
    FAILED = "failed"


@dataclass(frozen=True)
class DispatchItem:
    recipient: Recipient
    payload: PlatformPayload


@dataclass(frozen=True)
class DispatchOutcome:
    user_id: str
    token: str
    status: DeliveryStatus
    message_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == DeliveryStatus.SENT


class NotificationDispatcher:
    def __init__(self, transport: PushTransport, registry: TokenRegistry):
        self.transport = transport
        self.registry = registry

    async def _prune(self, token: str) -> None:
        try:
            await self.registry.prune_token(token)
        except Exception as e:
            logger.error(f"Failed to prune token {mask_token(token)}: {e}")

    async def _send_one(self, item: DispatchItem) -> DispatchOutcome:
        recipient = item.recipient
        try:
            message_id = await self.transport.send(recipient.token, item.payload)
        except PermanentDeliveryError as e:
            logger.warning(
                f"Permanent push failure for user {recipient.user_id} "
                f"token {mask_token(recipient.token)} [{e.code}]: {e}"
            )
            await self._prune(recipient.token)
            return DispatchOutcome(recipient.user_id, recipient.token, DeliveryStatus.PRUNED, error=str(e))
        except TransientDeliveryError as e:
            logger.warning(
                f"Transient push failure for user {recipient.user_id} "
                f"token {mask_token(recipient.token)} [{e.code}]: {e}"
            )
            return DispatchOutcome(recipient.user_id, recipient.token, DeliveryStatus.FAILED, error=str(e))
        except Exception as e:
            logger.error(f"Unexpected push error for token {mask_token(recipient.token)}: {e}")
            return DispatchOutcome(recipient.user_id, recipient.token, DeliveryStatus.FAILED, error=str(e))

        logger.debug(f"Push sent to user {recipient.user_id} token {mask_token(recipient.token)}")
        return DispatchOutcome(recipient.user_id, recipient.token, DeliveryStatus.SENT, message_id=message_id)

    async def dispatch(self, items: Sequence[DispatchItem]) -> List[DispatchOutcome]:
        """
        Send every item independently and report one outcome per item.

        Never raises; partial failure of a fan-out is not an error of the event.
        """
        if not items:
            return []

        outcomes = await asyncio.gather(*[self._send_one(item) for item in items])

        sent = sum(1 for o in outcomes if o.status == DeliveryStatus.SENT)
        pruned = sum(1 for o in outcomes if o.status == DeliveryStatus.PRUNED)
        failed = sum(1 for o in outcomes if o.status == DeliveryStatus.FAILED)
        logger.info(f"Push notifications dispatched: {sent} sent, {failed} failed, {pruned} pruned")
        return list(outcomes)
