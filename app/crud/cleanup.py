from datetime import datetime

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Room, Player, ChatMessage, AnswerEvaluation, RoomReadState


async def delete_finished_rooms(db: AsyncSession, created_before: datetime) -> int:
    """Delete finished rooms created before the cutoff, with everything hanging off them."""
    result = await db.execute(
        select(Room.code).where(Room.status == "finished", Room.created_at < created_before)
    )
    codes = list(result.scalars().all())
    if not codes:
        return 0

    message_ids = select(ChatMessage.id).where(ChatMessage.room_code.in_(codes))
    await db.execute(delete(AnswerEvaluation).where(AnswerEvaluation.message_id.in_(message_ids)))
    await db.execute(delete(ChatMessage).where(ChatMessage.room_code.in_(codes)))
    await db.execute(delete(Player).where(Player.room_code.in_(codes)))
    await db.execute(delete(RoomReadState).where(RoomReadState.room_code.in_(codes)))
    await db.execute(delete(Room).where(Room.code.in_(codes)))
    await db.commit()
    return len(codes)
