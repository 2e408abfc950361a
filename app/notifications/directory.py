"""
Read-only view over rooms, players, teams, chat and read states.

Every lookup runs in its own short-lived session so callers can fan out
lookups for many rooms concurrently with asyncio.gather.
"""
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app import crud
from app.models import Room, Player, ChatMessage

# Widest IN (...) predicate a single team-room lookup may carry
IN_QUERY_LIMIT = 30


class RoomDirectory:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_room(self, room_code: str) -> Optional[Room]:
        async with self._session_factory() as db:
            return await crud.get_room(db, room_code)

    async def get_room_players(self, room_code: str) -> List[Player]:
        async with self._session_factory() as db:
            return await crud.get_room_players(db, room_code)

    async def get_message(self, room_code: str, message_id: str) -> Optional[ChatMessage]:
        async with self._session_factory() as db:
            return await crud.get_message(db, room_code, message_id)

    async def hosted_room_codes(self, user_id: str) -> List[str]:
        async with self._session_factory() as db:
            return await crud.get_hosted_room_codes(db, user_id)

    async def joined_room_codes(self, user_id: str) -> List[str]:
        async with self._session_factory() as db:
            return await crud.get_joined_room_codes(db, user_id)

    async def team_ids(self, user_id: str) -> List[str]:
        async with self._session_factory() as db:
            return await crud.get_user_team_ids(db, user_id)

    async def room_codes_for_teams(self, team_ids: List[str]) -> List[str]:
        if len(team_ids) > IN_QUERY_LIMIT:
            raise ValueError(f"At most {IN_QUERY_LIMIT} team ids per lookup, got {len(team_ids)}")
        async with self._session_factory() as db:
            return await crud.get_room_codes_for_teams(db, team_ids)

    async def room_messages(self, room_code: str, sent_after: Optional[datetime] = None) -> List[ChatMessage]:
        async with self._session_factory() as db:
            return await crud.get_room_messages(db, room_code, sent_after)

    async def read_states(self, user_id: str) -> Dict[str, Optional[datetime]]:
        async with self._session_factory() as db:
            return await crud.get_read_states(db, user_id)
