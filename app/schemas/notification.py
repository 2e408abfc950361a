from pydantic import BaseModel, ConfigDict, Field

class UnreadCountResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    unread_count: int = Field(..., alias="unreadCount", ge=0)

class AppBackgroundedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    unread_count: int = Field(..., alias="unreadCount", ge=0)
