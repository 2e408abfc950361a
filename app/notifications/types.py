import enum
from dataclasses import dataclass


class Platform(str, enum.Enum):
    IOS = "ios"
    ANDROID = "android"


class MessageType(str, enum.Enum):
    CHAT = "chat"
    ANSWER = "answer"


@dataclass(frozen=True)
class DeviceToken:
    """A push address for one installed app instance."""
    token: str
    platform: Platform


@dataclass(frozen=True)
class Recipient:
    """A device token resolved for a specific user."""
    user_id: str
    device: DeviceToken

    @property
    def token(self) -> str:
        return self.device.token

    @property
    def platform(self) -> Platform:
        return self.device.platform
