# API Routers
from app.routers import chat, read_states, notifications, devices, evaluations

__all__ = ["chat", "read_states", "notifications", "devices", "evaluations"]
