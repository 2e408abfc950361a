"""Turns delivery events and unread counts into platform payloads."""
from dataclasses import dataclass
from typing import Optional, Union

from app.config import settings
from app.notifications.payloads import AndroidPayload, IosPayload, PlatformPayload
from app.notifications.types import MessageType, Platform, Recipient

# Values of data["type"], read by the mobile clients for routing
DATA_TYPE_CHAT = "chat_message"
DATA_TYPE_BADGE = "badge_update"
DATA_TYPE_SUMMARY = "unread_summary"


@dataclass(frozen=True)
class MessageDelivery:
    """A visible chat message notification."""
    room_code: str
    sender_name: Optional[str]
    text: str
    message_type: MessageType = MessageType.CHAT


@dataclass(frozen=True)
class BadgeSync:
    """A silent badge refresh after a read-state change."""
    room_code: Optional[str] = None


@dataclass(frozen=True)
class UnreadSummary:
    """An aggregate 'N unread messages' notification shown when the app goes to background."""


DeliveryEvent = Union[MessageDelivery, BadgeSync, UnreadSummary]


def notification_tag(user_id: str, prefix: Optional[str] = None) -> str:
    """Stable per-user tag shared by message, badge and summary notifications."""
    return f"{prefix or settings.NOTIFICATION_TAG_PREFIX}_{user_id}"


def truncate_preview(text: str, max_length: int) -> str:
    text = " ".join((text or "").split())
    if len(text) <= max_length:
        return text
    return text[:max_length - 1].rstrip() + "…"


def unread_phrase(count: int) -> str:
    return f"{count} unread message" if count == 1 else f"{count} unread messages"


class NotificationBuilder:
    def __init__(
        self,
        title: Optional[str] = None,
        channel_id: Optional[str] = None,
        tag_prefix: Optional[str] = None,
        preview_max_length: Optional[int] = None,
        answer_placeholder: Optional[str] = None,
    ):
        self.title = title or settings.NOTIFICATION_TITLE
        self.channel_id = channel_id or settings.ANDROID_CHANNEL_ID
        self.tag_prefix = tag_prefix or settings.NOTIFICATION_TAG_PREFIX
        self.preview_max_length = preview_max_length or settings.PREVIEW_MAX_LENGTH
        self.answer_placeholder = answer_placeholder or settings.ANSWER_PLACEHOLDER

    def build(self, event: DeliveryEvent, recipient: Recipient, unread_count: int) -> PlatformPayload:
        unread_count = max(0, unread_count)
        if recipient.platform == Platform.IOS:
            return self._build_ios(event, unread_count)
        return self._build_android(event, recipient.user_id, unread_count)

    def _preview(self, event: MessageDelivery) -> str:
        # Never echo another player's guess
        if event.message_type == MessageType.ANSWER:
            return self.answer_placeholder
        return truncate_preview(event.text, self.preview_max_length)

    def _data(self, event: DeliveryEvent, unread_count: int) -> dict:
        if isinstance(event, MessageDelivery):
            data_type = DATA_TYPE_CHAT
        elif isinstance(event, BadgeSync):
            data_type = DATA_TYPE_BADGE
        else:
            data_type = DATA_TYPE_SUMMARY
        data = {"type": data_type, "unreadCount": str(unread_count)}
        room_code = getattr(event, "room_code", None)
        if room_code:
            data["roomCode"] = room_code
        return data

    def _build_ios(self, event: DeliveryEvent, unread_count: int) -> IosPayload:
        data = self._data(event, unread_count)
        if isinstance(event, MessageDelivery):
            return IosPayload(
                badge=unread_count,
                data=data,
                title=event.sender_name or self.title,
                body=self._preview(event),
            )
        if isinstance(event, UnreadSummary):
            return IosPayload(
                badge=unread_count,
                data=data,
                title=self.title,
                body=unread_phrase(unread_count),
            )
        return IosPayload(badge=unread_count, data=data, sound=None, content_available=True)

    def _build_android(self, event: DeliveryEvent, user_id: str, unread_count: int) -> AndroidPayload:
        data = self._data(event, unread_count)
        tag = notification_tag(user_id, self.tag_prefix)
        if isinstance(event, MessageDelivery):
            body = self._preview(event)
            if event.sender_name:
                body = f"{event.sender_name}: {body}"
            others = unread_count - 1
            if others > 0:
                body = f"{body} (+{others} more)"
            return AndroidPayload(
                tag=tag,
                channel_id=self.channel_id,
                notification_count=unread_count,
                data=data,
                title=self.title,
                body=body,
            )
        if isinstance(event, UnreadSummary):
            return AndroidPayload(
                tag=tag,
                channel_id=self.channel_id,
                notification_count=unread_count,
                data=data,
                title=self.title,
                body=unread_phrase(unread_count),
            )
        return AndroidPayload(
            tag=tag,
            channel_id=self.channel_id,
            notification_count=unread_count,
            data=data,
            data_only=True,
        )
