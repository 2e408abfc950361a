from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select

from app.llm.schemas import AnswerEvaluation as Verdict, Parsed, Unparseable
from app.models import AnswerEvaluation, Player
from app.services.evaluation_service import MANUAL_REVIEW_NOTE, AnswerEvaluationService


@pytest.fixture
async def ai_room(seed):
    await seed.room("QUIZ", host_id="H", evaluation_mode="ai", question="Capital of France?", answer="Paris")
    await seed.player("QUIZ", "P1")
    return "QUIZ"


@pytest.fixture
def evaluator():
    return AsyncMock()


@pytest.fixture
def service(session_factory, evaluator):
    return AnswerEvaluationService(session_factory, evaluator)


async def load(session_factory, model, **filters):
    async with session_factory() as db:
        result = await db.execute(select(model).filter_by(**filters))
        return result.scalar_one_or_none()


async def test_correct_answer_is_recorded_and_credited(seed, ai_room, service, evaluator, session_factory):
    evaluator.evaluate.return_value = Parsed(Verdict(is_correct=True, confidence=0.95, explanation="Exact match"))
    message = await seed.message(ai_room, "P1", text="paris", type="answer")

    evaluation = await service.auto_evaluate(ai_room, message.id)

    evaluator.evaluate.assert_awaited_once_with("Capital of France?", "Paris", "paris")
    assert evaluation.is_correct is True
    player = await load(session_factory, Player, room_code=ai_room, user_id="P1")
    assert player.score == 1.0


async def test_wrong_answer_is_recorded_without_credit(seed, ai_room, service, evaluator, session_factory):
    evaluator.evaluate.return_value = Parsed(Verdict(is_correct=False, confidence=0.8, explanation="Different city"))
    message = await seed.message(ai_room, "P1", text="Lyon", type="answer")

    await service.auto_evaluate(ai_room, message.id)

    stored = await load(session_factory, AnswerEvaluation, message_id=message.id)
    assert stored.is_correct is False
    assert stored.reasoning == "Different city"
    player = await load(session_factory, Player, room_code=ai_room, user_id="P1")
    assert player.score == 0.0


async def test_unparseable_result_needs_manual_review(seed, ai_room, service, evaluator, session_factory):
    evaluator.evaluate.return_value = Unparseable("Could not parse AI response")
    message = await seed.message(ai_room, "P1", text="paris", type="answer")

    await service.auto_evaluate(ai_room, message.id)

    stored = await load(session_factory, AnswerEvaluation, message_id=message.id)
    assert stored.is_correct is None
    assert stored.reasoning == MANUAL_REVIEW_NOTE


async def test_chat_messages_and_manual_rooms_are_ignored(seed, ai_room, service, evaluator):
    chat = await seed.message(ai_room, "P1", text="hmm", type="chat")
    await seed.room("MANUAL", host_id="H")
    answer = await seed.message("MANUAL", "P1", text="paris", type="answer")

    assert await service.auto_evaluate(ai_room, chat.id) is None
    assert await service.auto_evaluate("MANUAL", answer.id) is None
    evaluator.evaluate.assert_not_awaited()


async def test_evaluator_crash_does_not_escape(seed, ai_room, service, evaluator):
    evaluator.evaluate.side_effect = RuntimeError("boom")
    message = await seed.message(ai_room, "P1", text="paris", type="answer")

    assert await service.auto_evaluate(ai_room, message.id) is None
