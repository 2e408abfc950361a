"""
Domain events consumed by the EventRouter.

Each event is a small immutable value so handlers can be driven directly from
tests or from HTTP endpoints without any trigger infrastructure.
"""
import enum
from dataclasses import dataclass
from typing import ClassVar, Union


class EventKind(str, enum.Enum):
    NEW_CHAT_MESSAGE = "new_chat_message"
    READ_STATE_CHANGED = "read_state_changed"
    APP_BACKGROUNDED = "app_backgrounded"


@dataclass(frozen=True)
class NewChatMessage:
    """A message was written to a room's chat."""
    kind: ClassVar[EventKind] = EventKind.NEW_CHAT_MESSAGE
    room_code: str
    message_id: str


@dataclass(frozen=True)
class ReadStateChanged:
    """A user moved their last-read marker for a room."""
    kind: ClassVar[EventKind] = EventKind.READ_STATE_CHANGED
    user_id: str
    room_code: str


@dataclass(frozen=True)
class AppBackgrounded:
    """The client reported it is moving to the background."""
    kind: ClassVar[EventKind] = EventKind.APP_BACKGROUNDED
    user_id: str


DomainEvent = Union[NewChatMessage, ReadStateChanged, AppBackgrounded]
