"""
Shared fixtures: a file-backed SQLite database per test, a seeding helper,
a recording push transport and an HTTP client over the ASGI app.
"""
import itertools
from datetime import datetime, timedelta
from types import SimpleNamespace
from typing import Dict, List, Optional, Set, Tuple
from unittest.mock import AsyncMock

import pytest
from fastapi import HTTPException, Request
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.database import Base
from app.models import (
    ChatMessage,
    Device,
    Player,
    Room,
    RoomReadState,
    TeamMember,
    User,
)
from app.notifications.payloads import PlatformPayload
from app.notifications.transport import PermanentDeliveryError, TransientDeliveryError

BASE_TIME = datetime(2024, 3, 1, 12, 0, 0)


class FakeTransport:
    """Records every send; tokens listed in dead/flaky fail permanently/transiently."""

    def __init__(self):
        self.sent: List[Tuple[str, PlatformPayload]] = []
        self.dead: Set[str] = set()
        self.flaky: Set[str] = set()
        self._ids = itertools.count(1)

    async def send(self, token: str, payload: PlatformPayload) -> str:
        if token in self.dead:
            raise PermanentDeliveryError("Requested entity was not found.", code="NOT_FOUND")
        if token in self.flaky:
            raise TransientDeliveryError("Service unavailable", code="UNAVAILABLE")
        self.sent.append((token, payload))
        return f"projects/qoomy/messages/{next(self._ids)}"

    @property
    def tokens(self) -> List[str]:
        return [token for token, _ in self.sent]

    def payload_for(self, token: str) -> PlatformPayload:
        return next(payload for sent_token, payload in self.sent if sent_token == token)


class Seeder:
    """Writes fixture rows, one committed session per call."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        self._clock = itertools.count(1)

    async def _add(self, obj):
        async with self.session_factory() as db:
            db.add(obj)
            await db.commit()
            await db.refresh(obj)
        return obj

    async def user(self, user_id: str, display_name: Optional[str] = None,
                   fcm_token: Optional[str] = None, fcm_platform: Optional[str] = None) -> User:
        return await self._add(User(
            id=user_id,
            email=f"{user_id.lower()}@example.com",
            display_name=display_name or user_id,
            fcm_token=fcm_token,
            fcm_platform=fcm_platform,
        ))

    async def room(self, code: str, host_id: str, team_id: Optional[str] = None,
                   evaluation_mode: str = "manual", status: str = "playing",
                   question: Optional[str] = None, answer: Optional[str] = None,
                   created_at: Optional[datetime] = None) -> Room:
        room = Room(
            code=code,
            host_id=host_id,
            team_id=team_id,
            evaluation_mode=evaluation_mode,
            status=status,
            question=question,
            answer=answer,
        )
        if created_at is not None:
            room.created_at = created_at
        return await self._add(room)

    async def player(self, room_code: str, user_id: str, name: Optional[str] = None, score: float = 0.0) -> Player:
        return await self._add(Player(room_code=room_code, user_id=user_id, name=name or user_id, score=score))

    async def message(self, room_code: str, sender_id: str, text: str = "hello",
                      type: str = "chat", sent_at: Optional[datetime] = None,
                      sender_name: Optional[str] = None) -> ChatMessage:
        if sent_at is None:
            sent_at = BASE_TIME + timedelta(seconds=next(self._clock))
        return await self._add(ChatMessage(
            room_code=room_code,
            sender_id=sender_id,
            sender_name=sender_name or sender_id,
            text=text,
            type=type,
            sent_at=sent_at,
        ))

    async def read_state(self, user_id: str, room_code: str, last_read_at: Optional[datetime]) -> RoomReadState:
        return await self._add(RoomReadState(user_id=user_id, room_code=room_code, last_read_at=last_read_at))

    async def team_member(self, team_id: str, user_id: str) -> TeamMember:
        return await self._add(TeamMember(team_id=team_id, user_id=user_id))

    async def device(self, user_id: str, token: str, platform: str = "android") -> Device:
        return await self._add(Device(user_id=user_id, fcm_token=token, platform=platform))


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def seed(session_factory):
    return Seeder(session_factory)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def event_router(session_factory, transport):
    from app.dependencies import build_event_router
    return build_event_router(session_factory, transport)


@pytest.fixture
def mock_evaluator():
    """AnswerEvaluator stand-in; set .evaluate.return_value per test."""
    return SimpleNamespace(evaluate=AsyncMock())


@pytest.fixture
async def app(session_factory, event_router, mock_evaluator):
    from app.auth import get_current_user
    from app.database import get_db
    from app.main import app as fastapi_app
    from app.middleware.rate_limit import limiter
    from app.schemas import CurrentUser
    from app.services.evaluation_service import AnswerEvaluationService

    async def _get_db():
        async with session_factory() as db:
            yield db

    async def _current_user(request: Request) -> CurrentUser:
        user_id = request.headers.get("X-Test-User")
        if not user_id:
            raise HTTPException(status_code=401, detail="User must be authenticated")
        request.state.user_id = user_id
        return CurrentUser(id=user_id, email=f"{user_id.lower()}@example.com", display_name=user_id)

    fastapi_app.dependency_overrides[get_db] = _get_db
    fastapi_app.dependency_overrides[get_current_user] = _current_user
    fastapi_app.state.event_router = event_router
    fastapi_app.state.evaluation_service = AnswerEvaluationService(session_factory, mock_evaluator)
    limiter.enabled = False
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()
    limiter.enabled = True
    del fastapi_app.state.event_router
    del fastapi_app.state.evaluation_service


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def as_user(user_id: str) -> Dict[str, str]:
    return {"X-Test-User": user_id}
