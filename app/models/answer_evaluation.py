from sqlalchemy import Column, String, DateTime, Float, Boolean, ForeignKey, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class AnswerEvaluation(Base):
    """AI verdict for an answer message, stored beside the immutable message."""
    __tablename__ = "answer_evaluations"

    message_id = Column(String, ForeignKey("chat_messages.id", ondelete="CASCADE"), primary_key=True)
    is_correct = Column(Boolean, nullable=True)  # NULL = needs manual review
    confidence = Column(Float, nullable=False, default=0.0)
    reasoning = Column(Text, nullable=True)
    evaluated_at = Column(DateTime, server_default=func.now())

    message = relationship("ChatMessage", back_populates="evaluation")

    def __repr__(self):
        return f"<AnswerEvaluation message_id={self.message_id} is_correct={self.is_correct}>"
