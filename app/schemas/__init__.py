from app.schemas.user import CurrentUser
from app.schemas.message import MessageCreate, Message
from app.schemas.read_state import ReadStateUpdate, ReadState
from app.schemas.device import DeviceRegisterRequest, DeviceResponse, DeviceTokenInfo
from app.schemas.notification import UnreadCountResponse, AppBackgroundedResponse
from app.schemas.evaluation import EvaluationRequest, EvaluationResponse

__all__ = [
    "CurrentUser",
    "MessageCreate", "Message",
    "ReadStateUpdate", "ReadState",
    "DeviceRegisterRequest", "DeviceResponse", "DeviceTokenInfo",
    "UnreadCountResponse", "AppBackgroundedResponse",
    "EvaluationRequest", "EvaluationResponse",
]
