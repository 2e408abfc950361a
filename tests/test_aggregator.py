from datetime import timedelta

import pytest

from app.notifications.aggregator import UnreadAggregator, chunked
from app.notifications.directory import IN_QUERY_LIMIT, RoomDirectory
from conftest import BASE_TIME


class RecordingDirectory(RoomDirectory):
    """RoomDirectory that records team chunk widths and can fail chosen lookups."""

    def __init__(self, session_factory, failing_rooms=(), fail_read_states=False, fail_teams=False):
        super().__init__(session_factory)
        self.team_chunks = []
        self.failing_rooms = set(failing_rooms)
        self.fail_read_states = fail_read_states
        self.fail_teams = fail_teams

    async def room_codes_for_teams(self, team_ids):
        self.team_chunks.append(len(team_ids))
        if self.fail_teams:
            raise RuntimeError("index not ready")
        return await super().room_codes_for_teams(team_ids)

    async def room_messages(self, room_code, sent_after=None):
        if room_code in self.failing_rooms:
            raise RuntimeError(f"room {room_code} unavailable")
        return await super().room_messages(room_code, sent_after)

    async def read_states(self, user_id):
        if self.fail_read_states:
            raise RuntimeError("read states unavailable")
        return await super().read_states(user_id)


@pytest.fixture
def aggregator(session_factory):
    return UnreadAggregator(RoomDirectory(session_factory))


def test_chunked_splits_into_bounded_slices():
    assert list(chunked(list(range(7)), 3)) == [[0, 1, 2], [3, 4, 5], [6]]
    assert list(chunked([], 3)) == []


async def test_no_rooms_means_zero(seed, aggregator):
    await seed.user("U")
    assert await aggregator.compute_unread("U") == 0


async def test_unread_across_rooms_with_and_without_read_marker(seed, aggregator):
    await seed.user("U")
    await seed.room("R1", host_id="U")
    await seed.room("R2", host_id="H")
    await seed.player("R2", "U")

    # R1 never marked read: 2 from others, 1 from U
    await seed.message("R1", "A")
    await seed.message("R1", "B")
    await seed.message("R1", "U")

    t = BASE_TIME + timedelta(minutes=10)
    await seed.message("R2", "H", sent_at=t - timedelta(minutes=1))
    await seed.read_state("U", "R2", t)
    await seed.message("R2", "H", sent_at=t + timedelta(minutes=1))

    assert await aggregator.unread_by_room("U") == {"R1": 2, "R2": 1}
    assert await aggregator.compute_unread("U") == 3


async def test_message_at_exact_read_marker_is_read(seed, aggregator):
    await seed.user("U")
    await seed.room("R1", host_id="U")
    t = BASE_TIME + timedelta(minutes=5)
    await seed.message("R1", "A", sent_at=t)
    await seed.read_state("U", "R1", t)

    assert await aggregator.compute_unread("U") == 0


async def test_host_own_messages_are_never_unread(seed, aggregator):
    await seed.user("H")
    await seed.room("ABCD", host_id="H")
    await seed.player("ABCD", "P1")
    await seed.message("ABCD", "H")
    await seed.message("ABCD", "H")
    await seed.message("ABCD", "P1")

    assert await aggregator.compute_unread("H") == 1
    assert await aggregator.compute_unread("P1") == 2


async def test_room_seen_through_several_paths_counts_once(seed, aggregator):
    await seed.user("U")
    await seed.room("R1", host_id="U", team_id="team-1")
    await seed.player("R1", "U")
    await seed.team_member("team-1", "U")
    await seed.message("R1", "A")

    assert await aggregator.visible_rooms("U") == {"R1"}
    assert await aggregator.compute_unread("U") == 1


async def test_team_rooms_are_looked_up_in_bounded_chunks(seed, session_factory):
    await seed.user("U")
    team_count = 2 * IN_QUERY_LIMIT + 5
    for i in range(team_count):
        await seed.team_member(f"team-{i:03d}", "U")
    for i in (0, 40, team_count - 1):
        await seed.room(f"T{i}", host_id="H", team_id=f"team-{i:03d}")
        await seed.message(f"T{i}", "H")

    directory = RecordingDirectory(session_factory)
    aggregator = UnreadAggregator(directory)

    assert await aggregator.compute_unread("U") == 3
    assert sorted(directory.team_chunks) == [5, IN_QUERY_LIMIT, IN_QUERY_LIMIT]


async def test_directory_rejects_oversized_team_lookup(session_factory):
    directory = RoomDirectory(session_factory)
    with pytest.raises(ValueError):
        await directory.room_codes_for_teams([f"t{i}" for i in range(IN_QUERY_LIMIT + 1)])


async def test_failing_room_lookup_contributes_zero(seed, session_factory):
    await seed.user("U")
    await seed.room("OK", host_id="U")
    await seed.room("BROKEN", host_id="U")
    await seed.message("OK", "A")
    await seed.message("BROKEN", "A")
    await seed.message("BROKEN", "B")

    aggregator = UnreadAggregator(RecordingDirectory(session_factory, failing_rooms={"BROKEN"}))

    assert await aggregator.unread_by_room("U") == {"OK": 1, "BROKEN": 0}
    assert await aggregator.compute_unread("U") == 1


async def test_failing_team_lookup_keeps_direct_rooms(seed, session_factory):
    await seed.user("U")
    await seed.team_member("team-1", "U")
    await seed.room("TEAM", host_id="H", team_id="team-1")
    await seed.room("MINE", host_id="U")
    await seed.message("TEAM", "H")
    await seed.message("MINE", "A")

    aggregator = UnreadAggregator(RecordingDirectory(session_factory, fail_teams=True))

    assert await aggregator.compute_unread("U") == 1


async def test_failing_read_states_reports_nothing_unread(seed, session_factory):
    await seed.user("U")
    await seed.room("R1", host_id="U")
    await seed.message("R1", "A")

    aggregator = UnreadAggregator(RecordingDirectory(session_factory, fail_read_states=True))

    assert await aggregator.compute_unread("U") == 0


async def test_unread_by_room_for_explicit_subset(seed, aggregator):
    await seed.user("U")
    await seed.room("R1", host_id="U")
    await seed.room("R2", host_id="U")
    await seed.message("R1", "A")
    await seed.message("R2", "A")

    assert await aggregator.unread_by_room("U", room_codes=["R2"]) == {"R2": 1}
