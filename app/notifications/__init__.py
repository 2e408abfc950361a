"""Unread-count aggregation and push notification dispatch."""
from app.notifications.aggregator import UnreadAggregator
from app.notifications.builder import NotificationBuilder
from app.notifications.directory import RoomDirectory
from app.notifications.dispatcher import NotificationDispatcher, DispatchItem, DispatchOutcome, DeliveryStatus
from app.notifications.events import NewChatMessage, ReadStateChanged, AppBackgrounded
from app.notifications.router import EventRouter, AppBackgroundedResult
from app.notifications.tokens import TokenRegistry
from app.notifications.transport import FcmTransport, PushTransport

__all__ = [
    "UnreadAggregator",
    "NotificationBuilder",
    "RoomDirectory",
    "NotificationDispatcher",
    "DispatchItem",
    "DispatchOutcome",
    "DeliveryStatus",
    "NewChatMessage",
    "ReadStateChanged",
    "AppBackgrounded",
    "EventRouter",
    "AppBackgroundedResult",
    "TokenRegistry",
    "FcmTransport",
    "PushTransport",
]
