from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Room, Player, TeamMember, ChatMessage


async def get_room(db: AsyncSession, room_code: str) -> Optional[Room]:
    """Get a room by its code."""
    return await db.get(Room, room_code)


async def get_room_players(db: AsyncSession, room_code: str) -> List[Player]:
    """Get all players of a room in join order."""
    result = await db.execute(
        select(Player).where(Player.room_code == room_code).order_by(Player.joined_at)
    )
    return list(result.scalars().all())


async def get_player(db: AsyncSession, room_code: str, user_id: str) -> Optional[Player]:
    result = await db.execute(
        select(Player).where(Player.room_code == room_code, Player.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def get_hosted_room_codes(db: AsyncSession, user_id: str) -> List[str]:
    """Codes of rooms hosted by the user."""
    result = await db.execute(select(Room.code).where(Room.host_id == user_id))
    return list(result.scalars().all())


async def get_joined_room_codes(db: AsyncSession, user_id: str) -> List[str]:
    """Codes of rooms where the user appears in the players table."""
    result = await db.execute(select(Player.room_code).where(Player.user_id == user_id))
    return list(result.scalars().all())


async def get_user_team_ids(db: AsyncSession, user_id: str) -> List[str]:
    result = await db.execute(select(TeamMember.team_id).where(TeamMember.user_id == user_id))
    return list(result.scalars().all())


async def get_room_codes_for_teams(db: AsyncSession, team_ids: List[str]) -> List[str]:
    """Codes of rooms opened for any of the given teams. Callers bound the id list width."""
    if not team_ids:
        return []
    result = await db.execute(select(Room.code).where(Room.team_id.in_(team_ids)))
    return list(result.scalars().all())


async def get_room_messages(
    db: AsyncSession,
    room_code: str,
    sent_after: Optional[datetime] = None,
) -> List[ChatMessage]:
    """Get chat messages of a room, optionally only those sent strictly after a timestamp."""
    query = select(ChatMessage).where(ChatMessage.room_code == room_code)
    if sent_after is not None:
        query = query.where(ChatMessage.sent_at > sent_after)
    result = await db.execute(query.order_by(ChatMessage.sent_at))
    return list(result.scalars().all())


async def is_room_member(db: AsyncSession, room: Room, user_id: str) -> bool:
    """True if the user hosts the room, plays in it, or belongs to the team it was opened for."""
    if room.host_id == user_id:
        return True
    if await get_player(db, room.code, user_id) is not None:
        return True
    if room.team_id:
        result = await db.execute(
            select(TeamMember.user_id).where(TeamMember.team_id == room.team_id, TeamMember.user_id == user_id)
        )
        return result.first() is not None
    return False
