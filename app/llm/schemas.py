from dataclasses import dataclass
from typing import Union

from pydantic import BaseModel, Field


class AnswerEvaluation(BaseModel):
    """Schema for the model's verdict on a quiz answer."""
    is_correct: bool = Field(..., description="Whether the player's answer should be accepted")
    confidence: float = Field(..., description="Confidence in the verdict from 0.0 to 1.0")
    explanation: str = Field(..., description="Brief explanation in the same language as the question")


@dataclass(frozen=True)
class Parsed:
    value: AnswerEvaluation


@dataclass(frozen=True)
class Unparseable:
    reason: str


EvaluationResult = Union[Parsed, Unparseable]
