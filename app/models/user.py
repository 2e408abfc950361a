from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base

class User(Base):
    """User model keyed by Firebase UID."""
    __tablename__ = "users"

    id = Column(String, primary_key=True)  # Firebase UID
    email = Column(String, nullable=True, index=True)
    display_name = Column(String, nullable=True)

    # Single pre-multi-device FCM token, kept until the client re-registers
    fcm_token = Column(String, nullable=True, index=True)
    fcm_platform = Column(String, nullable=True)  # "ios" | "android" | None

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships - one to many
    devices = relationship("Device", back_populates="user", cascade="all, delete-orphan")
    read_states = relationship("RoomReadState", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User id={self.id} email={self.email}>"
