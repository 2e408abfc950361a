from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
import uuid


class Device(Base):
    __tablename__ = "devices"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    fcm_token = Column(String, nullable=False, index=True)
    platform = Column(String, nullable=False)  # "ios" | "android"
    app_version = Column(String, nullable=True)

    last_seen = Column(DateTime, server_default=func.now(), onupdate=func.now())
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="devices")

    # A reinstalled app can hand the same token to a second account
    __table_args__ = (
        UniqueConstraint("user_id", "fcm_token", name="uq_devices_user_token"),
    )
