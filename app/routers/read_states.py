from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, schemas
from app.auth import get_current_user
from app.database import get_db
from app.dependencies import get_event_router
from app.notifications import EventRouter, ReadStateChanged
from app.utils.clock import to_naive_utc, utcnow

router = APIRouter(prefix="/users/me", tags=["read-states"])


@router.put("/read-states/{room_code}", response_model=schemas.ReadState)
async def mark_room_read(
    room_code: str,
    background_tasks: BackgroundTasks,
    body: Optional[schemas.ReadStateUpdate] = None,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    event_router: EventRouter = Depends(get_event_router),
):
    """Move the caller's last-read marker for a room and resync their badge on every device."""
    room = await crud.get_room(db, room_code)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    if not await crud.is_room_member(db, room, current_user.id):
        raise HTTPException(status_code=403, detail="Not a member of this room")

    last_read_at = to_naive_utc(body.last_read_at) if body and body.last_read_at else utcnow()

    state = await crud.upsert_read_state(db, current_user.id, room_code, last_read_at)
    background_tasks.add_task(event_router.handle, ReadStateChanged(user_id=current_user.id, room_code=room_code))
    return state
