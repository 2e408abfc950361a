from app.database import Base
from app.models.user import User
from app.models.device import Device
from app.models.room import Room, Player
from app.models.team import TeamMember
from app.models.message import ChatMessage
from app.models.read_state import RoomReadState
from app.models.answer_evaluation import AnswerEvaluation

__all__ = [
    "Base", "User", "Device", "Room", "Player", "TeamMember",
    "ChatMessage", "RoomReadState", "AnswerEvaluation",
]
