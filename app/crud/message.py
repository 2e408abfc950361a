from datetime import timedelta
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import ChatMessage
from app.utils.clock import utcnow


async def get_message(db: AsyncSession, room_code: str, message_id: str) -> Optional[ChatMessage]:
    """Get a message by id, scoped to its room."""
    result = await db.execute(
        select(ChatMessage).where(ChatMessage.id == message_id, ChatMessage.room_code == room_code)
    )
    return result.scalar_one_or_none()


async def create_message(
    db: AsyncSession,
    room_code: str,
    sender_id: str,
    text: str,
    message_type: str = "chat",
    sender_name: Optional[str] = None,
) -> ChatMessage:
    """Create a chat message with a sent_at strictly after the room's previous message."""
    sent_at = utcnow()
    result = await db.execute(
        select(func.max(ChatMessage.sent_at)).where(ChatMessage.room_code == room_code)
    )
    latest = result.scalar_one_or_none()
    if latest is not None and sent_at <= latest:
        sent_at = latest + timedelta(microseconds=1)

    db_message = ChatMessage(
        room_code=room_code,
        sender_id=sender_id,
        sender_name=sender_name,
        text=text,
        type=message_type,
        sent_at=sent_at,
    )
    db.add(db_message)
    await db.commit()
    await db.refresh(db_message)
    return db_message


async def get_message_by_id(db: AsyncSession, message_id: str) -> Optional[ChatMessage]:
    return await db.get(ChatMessage, message_id)
