from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Literal, Optional

class MessageCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)
    type: Literal["chat", "answer"] = "chat"
    player_name: Optional[str] = Field(None, max_length=100)

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v):
        if not v.strip():
            raise ValueError("Message text cannot be blank")
        return v

class Message(BaseModel):
    id: str
    room_code: str
    sender_id: str
    sender_name: Optional[str] = None
    text: str
    type: str
    sent_at: datetime

    class Config:
        from_attributes = True
