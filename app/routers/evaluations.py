from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, schemas
from app.auth import get_current_user
from app.database import get_db
from app.dependencies import get_evaluation_service
from app.llm.schemas import Parsed
from app.middleware.rate_limit import rate_limit_evaluations
from app.services.evaluation_service import AnswerEvaluationService
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/evaluations", tags=["evaluations"])


@router.post("", response_model=schemas.EvaluationResponse)
@rate_limit_evaluations
async def evaluate_answer(
    request: Request,
    body: schemas.EvaluationRequest,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    evaluation_service: AnswerEvaluationService = Depends(get_evaluation_service),
):
    """
    Grade one answer with the AI evaluator.

    When message_id is given and the model returned a verdict, the verdict is
    stored against that answer message. No score is changed here.
    """
    if not body.question or not body.expected_answer or not body.player_answer:
        raise HTTPException(
            status_code=400,
            detail="invalid-argument: question, expected_answer and player_answer are required",
        )

    result = await evaluation_service.evaluator.evaluate(body.question, body.expected_answer, body.player_answer)
    if not isinstance(result, Parsed):
        logger.error(f"Evaluation for user {current_user.id} failed: {result.reason}")
        raise HTTPException(status_code=502, detail=result.reason)

    verdict = result.value
    if body.message_id:
        if await crud.get_message_by_id(db, body.message_id) is None:
            raise HTTPException(status_code=404, detail="Message not found")
        await crud.record_evaluation(db, body.message_id, verdict.is_correct, verdict.confidence, verdict.explanation)

    return {"isCorrect": verdict.is_correct, "confidence": verdict.confidence, "explanation": verdict.explanation}
