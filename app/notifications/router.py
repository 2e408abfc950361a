"""
Event orchestration: domain event -> unread aggregation -> payloads -> dispatch.

The router keeps no state of its own. Concurrent events for the same user are
not serialized; the absolute iOS badge and the shared Android tag make the
latest delivery win on the device.
"""
import asyncio
from dataclasses import dataclass
from typing import List, Optional

from app.notifications.aggregator import UnreadAggregator
from app.notifications.builder import BadgeSync, MessageDelivery, NotificationBuilder, UnreadSummary
from app.notifications.directory import RoomDirectory
from app.notifications.dispatcher import DispatchItem, DispatchOutcome, NotificationDispatcher
from app.notifications.events import AppBackgrounded, DomainEvent, NewChatMessage, ReadStateChanged
from app.notifications.tokens import TokenRegistry
from app.notifications.types import MessageType, Platform, Recipient
from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AppBackgroundedResult:
    success: bool
    unread_count: int
    outcomes: tuple = ()

    def to_response(self) -> dict:
        return {"success": self.success, "unreadCount": self.unread_count}


def _message_type(value: Optional[str]) -> MessageType:
    try:
        return MessageType(value)
    except ValueError:
        return MessageType.CHAT


class EventRouter:
    def __init__(
        self,
        directory: RoomDirectory,
        registry: TokenRegistry,
        aggregator: UnreadAggregator,
        builder: NotificationBuilder,
        dispatcher: NotificationDispatcher,
    ):
        self.directory = directory
        self.registry = registry
        self.aggregator = aggregator
        self.builder = builder
        self.dispatcher = dispatcher
        self._handlers = {
            NewChatMessage: self.on_new_chat_message,
            ReadStateChanged: self.on_read_state_changed,
            AppBackgrounded: self.on_app_backgrounded,
        }

    async def handle(self, event: DomainEvent):
        """Route an event to its handler. Handlers never raise."""
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported event type: {type(event).__name__}")
        logger.debug(f"Handling {event.kind.value} event")
        return await handler(event)

    async def recipients_for_message(self, room_code: str, sender_id: str) -> List[str]:
        """Host and players of the room, minus the sender. Empty if the room is gone."""
        room = await self.directory.get_room(room_code)
        if room is None:
            return []
        players = await self.directory.get_room_players(room_code)

        recipients = []
        if room.host_id and room.host_id != sender_id:
            recipients.append(room.host_id)
        for player in players:
            if player.user_id != sender_id and player.user_id not in recipients:
                recipients.append(player.user_id)
        return recipients

    async def _items_for_user(self, user_id: str, delivery) -> List[DispatchItem]:
        try:
            tokens = await self.registry.list_tokens(user_id)
        except Exception as e:
            logger.error(f"Could not list device tokens for user {user_id}: {e}")
            return []
        if not tokens:
            logger.debug(f"No device tokens for user {user_id}")
            return []

        unread = await self.aggregator.compute_unread(user_id)
        items = []
        for device in tokens:
            recipient = Recipient(user_id, device)
            items.append(DispatchItem(recipient, self.builder.build(delivery, recipient, unread)))
        return items

    async def on_new_chat_message(self, event: NewChatMessage) -> List[DispatchOutcome]:
        try:
            message = await self.directory.get_message(event.room_code, event.message_id)
            if message is None:
                logger.info(f"Message {event.message_id} not found in room {event.room_code}, skipping notification")
                return []
            recipients = await self.recipients_for_message(event.room_code, message.sender_id)
        except Exception as e:
            logger.error(f"Failed to resolve recipients for message {event.message_id}: {e}")
            return []

        if not recipients:
            logger.info(f"No recipients for message {event.message_id} in room {event.room_code}")
            return []

        delivery = MessageDelivery(
            room_code=event.room_code,
            sender_name=message.sender_name,
            text=message.text,
            message_type=_message_type(message.type),
        )
        per_user = await asyncio.gather(*[self._items_for_user(user_id, delivery) for user_id in recipients])
        items = [item for user_items in per_user for item in user_items]

        logger.info(
            f"New message in room {event.room_code}: {len(recipients)} recipient(s), {len(items)} device(s)"
        )
        return await self.dispatcher.dispatch(items)

    async def on_read_state_changed(self, event: ReadStateChanged) -> List[DispatchOutcome]:
        items = await self._items_for_user(event.user_id, BadgeSync(room_code=event.room_code))
        if not items:
            return []
        return await self.dispatcher.dispatch(items)

    async def on_app_backgrounded(self, event: AppBackgrounded) -> AppBackgroundedResult:
        unread = await self.aggregator.compute_unread(event.user_id)
        if unread == 0:
            return AppBackgroundedResult(success=True, unread_count=0)

        try:
            tokens = await self.registry.list_tokens(event.user_id)
        except Exception as e:
            logger.error(f"Could not list device tokens for user {event.user_id}: {e}")
            return AppBackgroundedResult(success=False, unread_count=unread)

        summary = UnreadSummary()
        items = [
            DispatchItem(recipient, self.builder.build(summary, recipient, unread))
            for recipient in (Recipient(event.user_id, device) for device in tokens)
            if recipient.platform == Platform.ANDROID
        ]
        outcomes = await self.dispatcher.dispatch(items)
        return AppBackgroundedResult(success=True, unread_count=unread, outcomes=tuple(outcomes))
