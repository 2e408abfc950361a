from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class RoomReadState(Base):
    """Last time a user marked a room's chat as read."""
    __tablename__ = "room_read_states"

    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    room_code = Column(String, primary_key=True)
    last_read_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="read_states")

    def __repr__(self):
        return f"<RoomReadState user_id={self.user_id} room_code={self.room_code} last_read_at={self.last_read_at}>"
