from typing import Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import AnswerEvaluation, Player


async def record_evaluation(
    db: AsyncSession,
    message_id: str,
    is_correct: Optional[bool],
    confidence: float,
    reasoning: Optional[str],
) -> AnswerEvaluation:
    """Store (or overwrite) the AI verdict for an answer message."""
    evaluation = await db.get(AnswerEvaluation, message_id)
    if evaluation:
        evaluation.is_correct = is_correct
        evaluation.confidence = confidence
        evaluation.reasoning = reasoning
    else:
        evaluation = AnswerEvaluation(
            message_id=message_id,
            is_correct=is_correct,
            confidence=confidence,
            reasoning=reasoning,
        )
        db.add(evaluation)
    await db.commit()
    await db.refresh(evaluation)
    return evaluation


async def credit_player(db: AsyncSession, room_code: str, user_id: str, points: float) -> bool:
    """Add points to a player's score in a single UPDATE. Returns False if no such player."""
    result = await db.execute(
        update(Player)
        .where(Player.room_code == room_code, Player.user_id == user_id)
        .values(score=Player.score + points)
    )
    await db.commit()
    return bool(result.rowcount)
