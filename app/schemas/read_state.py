from pydantic import BaseModel
from datetime import datetime
from typing import Optional

class ReadStateUpdate(BaseModel):
    # Defaults to server time when omitted
    last_read_at: Optional[datetime] = None

class ReadState(BaseModel):
    user_id: str
    room_code: str
    last_read_at: Optional[datetime] = None

    class Config:
        from_attributes = True
