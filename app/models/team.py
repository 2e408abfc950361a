from sqlalchemy import Column, String
from app.database import Base


class TeamMember(Base):
    """A user's membership in a team; rooms opened for the team become visible to them."""
    __tablename__ = "team_members"

    team_id = Column(String, primary_key=True)
    user_id = Column(String, primary_key=True, index=True)

    def __repr__(self):
        return f"<TeamMember team_id={self.team_id} user_id={self.user_id}>"
