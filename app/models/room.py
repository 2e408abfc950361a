from sqlalchemy import Column, String, DateTime, Float, ForeignKey, Text, UniqueConstraint, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
import uuid


class Room(Base):
    """A single quiz session keyed by its short join code."""
    __tablename__ = "rooms"

    code = Column(String, primary_key=True)
    host_id = Column(String, index=True, nullable=False)
    team_id = Column(String, index=True, nullable=True)
    question = Column(Text, nullable=True)
    answer = Column(Text, nullable=True)
    evaluation_mode = Column(String, nullable=False, default="manual")  # 'manual' or 'ai'
    status = Column(String, nullable=False, default="waiting")  # waiting, playing, finished
    created_at = Column(DateTime, server_default=func.now(), index=True)

    # Relationships
    players = relationship("Player", back_populates="room", cascade="all, delete-orphan")
    messages = relationship("ChatMessage", back_populates="room", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Room code={self.code} host_id={self.host_id} status={self.status}>"


class Player(Base):
    """Membership of a user in a room, with the running score."""
    __tablename__ = "players"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    room_code = Column(String, ForeignKey("rooms.code", ondelete="CASCADE"), nullable=False)
    user_id = Column(String, index=True, nullable=False)
    name = Column(String, nullable=True)
    score = Column(Float, nullable=False, default=0.0)
    joined_at = Column(DateTime, server_default=func.now())

    room = relationship("Room", back_populates="players")

    __table_args__ = (
        UniqueConstraint("room_code", "user_id", name="uq_players_room_user"),
        CheckConstraint("score >= 0", name="ck_players_score_non_negative"),
    )

    def __repr__(self):
        return f"<Player user_id={self.user_id} room_code={self.room_code} score={self.score}>"
