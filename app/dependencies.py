from fastapi import Request

from app.database import get_session_factory
from app.llm.client import AnswerEvaluator
from app.notifications import (
    EventRouter,
    FcmTransport,
    NotificationBuilder,
    NotificationDispatcher,
    RoomDirectory,
    TokenRegistry,
    UnreadAggregator,
)
from app.services.evaluation_service import AnswerEvaluationService


def build_event_router(session_factory=None, transport=None) -> EventRouter:
    """
    Wire the notification engine around one session factory and push transport.

    Both default to the application's database and FCM.
    """
    session_factory = session_factory or get_session_factory()
    directory = RoomDirectory(session_factory)
    registry = TokenRegistry(session_factory)
    return EventRouter(
        directory=directory,
        registry=registry,
        aggregator=UnreadAggregator(directory),
        builder=NotificationBuilder(),
        dispatcher=NotificationDispatcher(transport or FcmTransport(), registry),
    )


def get_event_router(request: Request) -> EventRouter:
    """
    FastAPI dependency returning the EventRouter built at startup.

    Usage:
        @router.post("/example")
        async def example(event_router: EventRouter = Depends(get_event_router)):
            ...
    """
    event_router = getattr(request.app.state, "event_router", None)
    if event_router is None:
        event_router = build_event_router()
        request.app.state.event_router = event_router
    return event_router


def get_evaluation_service(request: Request) -> AnswerEvaluationService:
    service = getattr(request.app.state, "evaluation_service", None)
    if service is None:
        service = AnswerEvaluationService(get_session_factory(), AnswerEvaluator())
        request.app.state.evaluation_service = service
    return service


