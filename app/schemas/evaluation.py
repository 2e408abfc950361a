from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class EvaluationRequest(BaseModel):
    # Empty strings are rejected by the endpoint with invalid-argument, not by validation
    question: Optional[str] = None
    expected_answer: Optional[str] = None
    player_answer: Optional[str] = None
    message_id: Optional[str] = None

class EvaluationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_correct: bool = Field(..., alias="isCorrect")
    confidence: float = Field(..., ge=0, le=1)
    explanation: str
