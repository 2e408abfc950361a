"""
Unread message aggregation across every room a user can see.

A user sees the rooms they host, the rooms they joined as a player, and the
rooms opened for any team they belong to. For each visible room the unread
count is the number of chat messages sent after the user's last-read marker
(or every message when the room was never marked read), excluding messages the
user sent themselves.

Every store lookup is isolated: a failing lookup contributes nothing and is
logged, so one broken room or missing index never zeroes the whole badge.
"""
import asyncio
from datetime import datetime
from typing import Awaitable, Dict, Iterable, Iterator, List, Optional, Set, TypeVar

from app.notifications.directory import RoomDirectory, IN_QUERY_LIMIT
from app.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def chunked(items: List[T], size: int) -> Iterator[List[T]]:
    """Yield consecutive slices of at most `size` items."""
    for start in range(0, len(items), size):
        yield items[start:start + size]


class UnreadAggregator:
    def __init__(self, directory: RoomDirectory, chunk_size: int = IN_QUERY_LIMIT):
        self.directory = directory
        self.chunk_size = min(chunk_size, IN_QUERY_LIMIT)

    async def _safe(self, awaitable: Awaitable[T], default: T, what: str) -> T:
        try:
            return await awaitable
        except Exception as e:
            logger.warning(f"Unread aggregation lookup failed ({what}): {e}")
            return default

    async def _team_room_codes(self, user_id: str) -> List[str]:
        team_ids = await self._safe(self.directory.team_ids(user_id), [], f"team memberships of {user_id}")
        if not team_ids:
            return []

        unique_ids = list(dict.fromkeys(team_ids))
        chunks = await asyncio.gather(*[
            self._safe(self.directory.room_codes_for_teams(chunk), [], f"team rooms chunk of {len(chunk)}")
            for chunk in chunked(unique_ids, self.chunk_size)
        ])
        return [code for chunk in chunks for code in chunk]

    async def visible_rooms(self, user_id: str) -> Set[str]:
        """Codes of every room the user hosts, plays in, or can see through a team."""
        hosted, joined, team_rooms = await asyncio.gather(
            self._safe(self.directory.hosted_room_codes(user_id), [], f"hosted rooms of {user_id}"),
            self._safe(self.directory.joined_room_codes(user_id), [], f"joined rooms of {user_id}"),
            self._team_room_codes(user_id),
        )
        return set(hosted) | set(joined) | set(team_rooms)

    async def _room_unread(self, user_id: str, room_code: str, last_read_at: Optional[datetime]) -> int:
        messages = await self._safe(
            self.directory.room_messages(room_code, sent_after=last_read_at),
            [],
            f"messages of room {room_code}",
        )
        return sum(1 for message in messages if message.sender_id != user_id)

    async def unread_by_room(self, user_id: str, room_codes: Optional[Iterable[str]] = None) -> Dict[str, int]:
        """Per-room unread counts for the user's visible rooms (or the given subset)."""
        if room_codes is None:
            rooms = await self.visible_rooms(user_id)
        else:
            rooms = set(room_codes)
        if not rooms:
            return {}

        # Without read markers every message would look unread; report nothing instead
        read_states = await self._safe(self.directory.read_states(user_id), None, f"read states of {user_id}")
        if read_states is None:
            return {code: 0 for code in rooms}

        ordered = sorted(rooms)
        counts = await asyncio.gather(*[
            self._room_unread(user_id, code, read_states.get(code)) for code in ordered
        ])
        return dict(zip(ordered, counts))

    async def compute_unread(self, user_id: str) -> int:
        """
        Total unread messages for a user across all visible rooms.

        Best-effort snapshot; never raises and never returns a negative number.
        """
        try:
            per_room = await self.unread_by_room(user_id)
        except Exception as e:
            logger.error(f"Unread aggregation failed for user {user_id}: {e}")
            return 0
        total = max(0, sum(per_room.values()))
        logger.debug(f"Unread for user {user_id}: {total} across {len(per_room)} room(s)")
        return total
