from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, schemas
from app.auth import get_current_user
from app.database import get_db
from app.dependencies import get_evaluation_service, get_event_router
from app.middleware.rate_limit import rate_limit_messages
from app.notifications import EventRouter, NewChatMessage
from app.services.evaluation_service import AnswerEvaluationService
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/rooms",
    tags=["rooms"],
    responses={404: {"description": "Not found"}}
)


@router.post("/{code}/messages", response_model=schemas.Message, status_code=status.HTTP_201_CREATED)
@rate_limit_messages
async def post_message(
    request: Request,
    code: str,
    body: schemas.MessageCreate,
    background_tasks: BackgroundTasks,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    event_router: EventRouter = Depends(get_event_router),
    evaluation_service: AnswerEvaluationService = Depends(get_evaluation_service),
):
    """
    Post a chat message or an answer to a room.

    Notifies the other participants in the background and, for answers in
    AI-evaluated rooms, grades the answer in the background too.
    """
    room = await crud.get_room(db, code)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")

    player = await crud.get_player(db, code, current_user.id)
    if room.host_id != current_user.id and player is None:
        raise HTTPException(status_code=403, detail="Not a member of this room")

    sender_name = body.player_name or (player.name if player else None) or current_user.display_name
    message = await crud.create_message(
        db,
        room_code=code,
        sender_id=current_user.id,
        text=body.text,
        message_type=body.type,
        sender_name=sender_name,
    )
    logger.info(f"Message {message.id} ({message.type}) posted to room {code} by {current_user.id}")

    background_tasks.add_task(event_router.handle, NewChatMessage(room_code=code, message_id=message.id))
    if message.type == "answer" and room.evaluation_mode == "ai":
        background_tasks.add_task(evaluation_service.auto_evaluate, code, message.id)

    return message
