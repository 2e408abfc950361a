from datetime import datetime
from typing import Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import RoomReadState


async def get_read_states(db: AsyncSession, user_id: str) -> Dict[str, Optional[datetime]]:
    """Map of room code -> last_read_at for every room the user has ever marked read."""
    result = await db.execute(select(RoomReadState).where(RoomReadState.user_id == user_id))
    return {state.room_code: state.last_read_at for state in result.scalars().all()}


async def upsert_read_state(
    db: AsyncSession,
    user_id: str,
    room_code: str,
    last_read_at: datetime,
) -> RoomReadState:
    """Record that the user has read a room up to last_read_at."""
    state = await db.get(RoomReadState, (user_id, room_code))
    if state:
        state.last_read_at = last_read_at
    else:
        state = RoomReadState(user_id=user_id, room_code=room_code, last_read_at=last_read_at)
        db.add(state)
    await db.commit()
    await db.refresh(state)
    return state
