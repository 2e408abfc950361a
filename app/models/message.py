from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Index
from sqlalchemy.orm import relationship
from app.database import Base
import uuid

class ChatMessage(Base):
    """Room chat message. Rows are written once and never updated."""
    __tablename__ = "chat_messages"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    room_code = Column(String, ForeignKey("rooms.code", ondelete="CASCADE"), nullable=False)
    sender_id = Column(String, nullable=False)
    sender_name = Column(String, nullable=True)
    text = Column(Text, nullable=False)
    type = Column(String, nullable=False, default="chat")  # 'chat' or 'answer'
    sent_at = Column(DateTime, nullable=False)

    # Relationships
    room = relationship("Room", back_populates="messages")
    evaluation = relationship("AnswerEvaluation", back_populates="message", uselist=False, cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_chat_messages_room_sent_at", "room_code", "sent_at"),
    )

    def __repr__(self):
        return f"<ChatMessage id={self.id} room_code={self.room_code} sender_id={self.sender_id} type={self.type}>"
