"""Automatic grading of answers posted in AI-evaluated rooms."""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app import crud
from app.llm.client import AnswerEvaluator
from app.llm.schemas import Parsed
from app.models import AnswerEvaluation
from app.utils.logger import get_logger

logger = get_logger(__name__)

CORRECT_ANSWER_POINTS = 1.0
MANUAL_REVIEW_NOTE = "AI evaluation failed - needs manual review"


class AnswerEvaluationService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], evaluator: AnswerEvaluator):
        self.session_factory = session_factory
        self.evaluator = evaluator

    async def auto_evaluate(self, room_code: str, message_id: str) -> Optional[AnswerEvaluation]:
        """
        Grade an answer message against its room's question and expected answer.

        Records the verdict beside the message and credits the player on a
        correct answer. Returns the stored evaluation, or None when the answer
        is not eligible. Never raises.
        """
        try:
            async with self.session_factory() as db:
                room = await crud.get_room(db, room_code)
                message = await crud.get_message(db, room_code, message_id)

            if room is None or message is None:
                logger.info(f"Skipping evaluation of {message_id}: room or message not found")
                return None
            if room.evaluation_mode != "ai" or message.type != "answer":
                return None
            if not room.question or not room.answer:
                logger.warning(f"Room {room_code} is AI-evaluated but has no question or answer set")
                return None

            result = await self.evaluator.evaluate(room.question, room.answer, message.text)

            async with self.session_factory() as db:
                if not isinstance(result, Parsed):
                    logger.warning(f"Answer {message_id} in room {room_code} needs manual review: {result.reason}")
                    return await crud.record_evaluation(db, message_id, None, 0.0, MANUAL_REVIEW_NOTE)

                verdict = result.value
                evaluation = await crud.record_evaluation(
                    db, message_id, verdict.is_correct, verdict.confidence, verdict.explanation
                )
                if verdict.is_correct:
                    credited = await crud.credit_player(db, room_code, message.sender_id, CORRECT_ANSWER_POINTS)
                    if not credited:
                        logger.warning(f"Correct answer from {message.sender_id} but no player row in {room_code}")
                logger.info(
                    f"Answer {message_id} in room {room_code} evaluated: "
                    f"correct={verdict.is_correct} confidence={verdict.confidence:.2f}"
                )
                return evaluation
        except Exception as e:
            logger.exception(f"Auto-evaluation failed for answer {message_id} in room {room_code}: {e}")
            return None
