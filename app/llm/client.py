from typing import Optional

import openai

from app.config import settings
from app.llm.prompts import EVALUATOR_SYSTEM_PROMPT, get_answer_evaluation_prompt
from app.llm.schemas import AnswerEvaluation, EvaluationResult, Parsed, Unparseable
from app.utils.logger import get_logger

logger = get_logger(__name__)


class AnswerEvaluator:
    """Grades free-text quiz answers with an OpenAI structured-output call."""

    def __init__(self, client: Optional[openai.AsyncOpenAI] = None, model: Optional[str] = None):
        if client is None and settings.OPENAI_API_KEY:
            client = openai.AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
        self.client = client
        self.model = model or settings.EVALUATION_MODEL

    async def evaluate(self, question: str, expected_answer: str, player_answer: str) -> EvaluationResult:
        """
        Evaluate one answer.

        Returns Parsed with the verdict, or Unparseable when the model is not
        configured, refuses, returns nothing parseable, or the call fails.
        """
        if self.client is None:
            logger.warning("AI evaluation requested but OPENAI_API_KEY is not configured")
            return Unparseable("AI evaluation not configured")

        prompt = get_answer_evaluation_prompt(question, expected_answer, player_answer)
        try:
            completion = await self.client.chat.completions.parse(
                model=self.model,
                messages=[
                    {"role": "system", "content": EVALUATOR_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                response_format=AnswerEvaluation,
                temperature=0,
                max_tokens=200,
            )
        except openai.OpenAIError as e:
            logger.error(f"AI evaluation request failed: {e}")
            return Unparseable("AI evaluation failed")
        except Exception as e:
            # pydantic validation of a malformed structured response lands here
            logger.error(f"AI evaluation response could not be parsed: {e}")
            return Unparseable("Could not parse AI response")

        message = completion.choices[0].message
        if message.refusal:
            logger.warning(f"Model refused to evaluate answer: {message.refusal}")
            return Unparseable(f"Model refused: {message.refusal}")
        if message.parsed is None:
            return Unparseable("Could not parse AI response")

        verdict = message.parsed
        return Parsed(verdict.model_copy(update={"confidence": min(1.0, max(0.0, verdict.confidence))}))
