import pytest

from app.notifications.events import AppBackgrounded, NewChatMessage, ReadStateChanged
from app.notifications.payloads import AndroidPayload, IosPayload


@pytest.fixture
async def quiz_room(seed):
    """Room ABCD hosted by H with players P1 and P2, one device each."""
    for user_id in ("H", "P1", "P2"):
        await seed.user(user_id)
    await seed.room("ABCD", host_id="H")
    await seed.player("ABCD", "P1", name="Player One")
    await seed.player("ABCD", "P2", name="Player Two")
    await seed.device("H", "tok-h", "android")
    await seed.device("P1", "tok-p1", "ios")
    await seed.device("P2", "tok-p2", "ios")
    return "ABCD"


async def test_player_message_goes_to_everyone_but_the_sender(seed, quiz_room, event_router, transport):
    message = await seed.message(quiz_room, "P1", text="Is it a river?", sender_name="Player One")

    outcomes = await event_router.handle(NewChatMessage(room_code=quiz_room, message_id=message.id))

    assert len(outcomes) == 2
    assert sorted(transport.tokens) == ["tok-h", "tok-p2"]

    host_payload = transport.payload_for("tok-h")
    assert isinstance(host_payload, AndroidPayload)
    assert host_payload.tag == "qoomy_unread_H"
    assert host_payload.body == "Player One: Is it a river?"

    p2_payload = transport.payload_for("tok-p2")
    assert isinstance(p2_payload, IosPayload)
    assert p2_payload.badge == 1


async def test_host_message_goes_to_players_only(seed, quiz_room, event_router, transport):
    message = await seed.message(quiz_room, "H")

    await event_router.handle(NewChatMessage(room_code=quiz_room, message_id=message.id))

    assert sorted(transport.tokens) == ["tok-p1", "tok-p2"]


async def test_recipients_for_message(quiz_room, event_router):
    assert await event_router.recipients_for_message(quiz_room, "P1") == ["H", "P2"]
    assert await event_router.recipients_for_message("NOPE", "P1") == []


async def test_missing_message_is_skipped(quiz_room, event_router, transport):
    assert await event_router.handle(NewChatMessage(room_code=quiz_room, message_id="missing")) == []
    assert transport.sent == []


async def test_lonely_host_notifies_nobody(seed, event_router, transport):
    await seed.user("H")
    await seed.device("H", "tok-h")
    await seed.room("SOLO", host_id="H")
    message = await seed.message("SOLO", "H")

    assert await event_router.handle(NewChatMessage(room_code="SOLO", message_id=message.id)) == []
    assert transport.sent == []


async def test_badge_reflects_unread_across_rooms(seed, quiz_room, event_router, transport):
    await seed.room("OTHER", host_id="X")
    await seed.player("OTHER", "P2")
    await seed.message("OTHER", "X")
    await seed.message("OTHER", "X")
    message = await seed.message(quiz_room, "P1")

    await event_router.handle(NewChatMessage(room_code=quiz_room, message_id=message.id))

    assert transport.payload_for("tok-p2").badge == 3


async def test_dead_recipient_token_is_pruned(seed, quiz_room, event_router, transport):
    await seed.device("P2", "tok-p2-tablet", "android")
    transport.dead.add("tok-p2")
    message = await seed.message(quiz_room, "P1")

    await event_router.handle(NewChatMessage(room_code=quiz_room, message_id=message.id))

    remaining = [device.token for device in await event_router.registry.list_tokens("P2")]
    assert remaining == ["tok-p2-tablet"]
    assert "tok-p2-tablet" in transport.tokens


async def test_read_state_change_syncs_every_device(seed, quiz_room, event_router, transport):
    await seed.device("P2", "tok-p2-tablet", "android")
    await seed.message(quiz_room, "H")

    await event_router.handle(ReadStateChanged(user_id="P2", room_code=quiz_room))

    assert sorted(transport.tokens) == ["tok-p2", "tok-p2-tablet"]
    ios = transport.payload_for("tok-p2")
    android = transport.payload_for("tok-p2-tablet")
    assert ios.is_silent and ios.badge == 1
    assert android.data_only and android.notification_count == 1


async def test_app_backgrounded_with_nothing_unread(quiz_room, event_router, transport):
    result = await event_router.handle(AppBackgrounded(user_id="P1"))

    assert result.to_response() == {"success": True, "unreadCount": 0}
    assert transport.sent == []


async def test_app_backgrounded_summary_goes_to_android_only(seed, quiz_room, event_router, transport):
    await seed.device("P1", "tok-p1-android", "android")
    await seed.message(quiz_room, "H")
    await seed.message(quiz_room, "P2")

    result = await event_router.handle(AppBackgrounded(user_id="P1"))

    assert result.to_response() == {"success": True, "unreadCount": 2}
    assert transport.tokens == ["tok-p1-android"]
    assert transport.payload_for("tok-p1-android").body == "2 unread messages"


async def test_app_backgrounded_reports_failure_when_tokens_unavailable(seed, quiz_room, event_router, monkeypatch):
    await seed.message(quiz_room, "H")

    async def broken(user_id):
        raise RuntimeError("store offline")

    monkeypatch.setattr(event_router.registry, "list_tokens", broken)
    result = await event_router.handle(AppBackgrounded(user_id="P1"))

    assert result.success is False
    assert result.unread_count == 1


async def test_unknown_event_type_is_rejected(event_router):
    with pytest.raises(TypeError):
        await event_router.handle(object())
