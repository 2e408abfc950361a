"""
Platform-specific push payloads.

iOS and Android disagree on how a badge works: APNs takes an absolute badge
number, Android replaces an earlier notification that carries the same tag.
Each payload type knows how to render itself both as the plain wire dict and
as a firebase_admin Message, so nothing downstream branches on platform.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from firebase_admin import messaging

from app.notifications.types import Platform


def _string_data(data: Dict[str, Any]) -> Dict[str, str]:
    # FCM data values must be strings
    return {key: str(value) for key, value in data.items() if value is not None}


@dataclass(frozen=True)
class IosPayload:
    badge: int
    data: Dict[str, str] = field(default_factory=dict)
    title: Optional[str] = None
    body: Optional[str] = None
    sound: Optional[str] = "default"
    content_available: bool = False

    platform = Platform.IOS

    @property
    def is_silent(self) -> bool:
        return self.title is None and self.body is None

    def to_dict(self) -> Dict[str, Any]:
        aps: Dict[str, Any] = {"badge": self.badge}
        if self.sound and not self.is_silent:
            aps["sound"] = self.sound
        if self.content_available:
            aps["content-available"] = 1

        payload: Dict[str, Any] = {"apns": {"aps": aps}, "data": dict(self.data)}
        if not self.is_silent:
            payload["notification"] = {"title": self.title, "body": self.body}
        return payload

    def to_fcm_message(self, token: str) -> messaging.Message:
        headers = {
            "apns-push-type": "background" if self.is_silent else "alert",
            "apns-priority": "5" if self.is_silent else "10",
        }
        aps = messaging.Aps(
            badge=self.badge,
            sound=None if self.is_silent else self.sound,
            content_available=self.content_available or None,
        )
        return messaging.Message(
            token=token,
            notification=None if self.is_silent else messaging.Notification(title=self.title, body=self.body),
            apns=messaging.APNSConfig(headers=headers, payload=messaging.APNSPayload(aps=aps)),
            data=_string_data(self.data),
        )


@dataclass(frozen=True)
class AndroidPayload:
    tag: str
    channel_id: str
    notification_count: int
    data: Dict[str, str] = field(default_factory=dict)
    title: Optional[str] = None
    body: Optional[str] = None
    data_only: bool = False

    platform = Platform.ANDROID

    def to_dict(self) -> Dict[str, Any]:
        if self.data_only:
            # The client app reads the tag from data to clear its own notification
            return {
                "android": {"priority": "high"},
                "data": {**self.data, "tag": self.tag},
            }
        return {
            "notification": {"title": self.title, "body": self.body},
            "android": {
                "notification": {
                    "channelId": self.channel_id,
                    "tag": self.tag,
                    "notificationCount": self.notification_count,
                },
                "priority": "high",
            },
            "data": dict(self.data),
        }

    def to_fcm_message(self, token: str) -> messaging.Message:
        if self.data_only:
            return messaging.Message(
                token=token,
                android=messaging.AndroidConfig(priority="high"),
                data=_string_data({**self.data, "tag": self.tag}),
            )
        return messaging.Message(
            token=token,
            notification=messaging.Notification(title=self.title, body=self.body),
            android=messaging.AndroidConfig(
                priority="high",
                notification=messaging.AndroidNotification(
                    channel_id=self.channel_id,
                    tag=self.tag,
                    notification_count=self.notification_count,
                ),
            ),
            data=_string_data(self.data),
        )


PlatformPayload = Union[IosPayload, AndroidPayload]
