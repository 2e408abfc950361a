from pydantic import BaseModel
from typing import Optional

class CurrentUser(BaseModel):
    """Simplified user model for authentication responses"""
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
