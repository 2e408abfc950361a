from app.crud.user import (
    get_user,
    get_or_create_user,
)
from app.crud.room import (
    get_room,
    get_room_players,
    get_player,
    get_hosted_room_codes,
    get_joined_room_codes,
    get_user_team_ids,
    get_room_codes_for_teams,
    get_room_messages,
    is_room_member,
)
from app.crud.message import (
    get_message,
    get_message_by_id,
    create_message,
)
from app.crud.read_state import (
    get_read_states,
    upsert_read_state,
)
from app.crud.device import (
    register_or_update_device,
    list_user_devices,
    get_legacy_token,
    delete_user_token,
    delete_token_everywhere,
)
from app.crud.evaluation import (
    record_evaluation,
    credit_player,
)
from app.crud.cleanup import delete_finished_rooms

__all__ = [
    # User operations
    "get_user",
    "get_or_create_user",

    # Room operations
    "get_room",
    "get_room_players",
    "get_player",
    "get_hosted_room_codes",
    "get_joined_room_codes",
    "get_user_team_ids",
    "get_room_codes_for_teams",
    "get_room_messages",
    "is_room_member",

    # Message operations
    "get_message",
    "get_message_by_id",
    "create_message",

    # Read state operations
    "get_read_states",
    "upsert_read_state",

    # Device token operations
    "register_or_update_device",
    "list_user_devices",
    "get_legacy_token",
    "delete_user_token",
    "delete_token_everywhere",

    # Answer evaluation operations
    "record_evaluation",
    "credit_player",

    # Maintenance
    "delete_finished_rooms",
]
