from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from app.notifications.types import Platform

class DeviceRegisterRequest(BaseModel):
    fcm_token: str = Field(..., min_length=1)
    platform: Platform
    app_version: Optional[str] = None

class DeviceResponse(BaseModel):
    id: str
    user_id: str
    platform: str
    app_version: Optional[str] = None
    last_seen: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class DeviceTokenInfo(BaseModel):
    """A registered token as seen by its owner."""
    token: str
    platform: Platform
