from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from app.config import settings
from app.llm.client import AnswerEvaluator
from app.llm.prompts import get_answer_evaluation_prompt
from app.llm.schemas import AnswerEvaluation, Parsed, Unparseable


def completion(parsed=None, refusal=None):
    message = SimpleNamespace(parsed=parsed, refusal=refusal)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def mock_client(**parse_kwargs):
    client = MagicMock()
    client.chat.completions.parse = AsyncMock(**parse_kwargs)
    return client


async def test_parsed_verdict():
    verdict = AnswerEvaluation(is_correct=True, confidence=0.9, explanation="Same river")
    client = mock_client(return_value=completion(parsed=verdict))

    result = await AnswerEvaluator(client=client, model="gpt-4o-mini").evaluate("Longest river?", "Nile", "the nile")

    assert result == Parsed(verdict)
    kwargs = client.chat.completions.parse.await_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["response_format"] is AnswerEvaluation
    assert "Player's Answer: the nile" in kwargs["messages"][1]["content"]


async def test_confidence_is_clamped():
    verdict = AnswerEvaluation(is_correct=False, confidence=1.7, explanation="Partial answer")
    client = mock_client(return_value=completion(parsed=verdict))

    result = await AnswerEvaluator(client=client).evaluate("Q", "Suicide Squad", "Suicide")

    assert isinstance(result, Parsed)
    assert result.value.confidence == 1.0


async def test_refusal_is_unparseable():
    client = mock_client(return_value=completion(refusal="I can't help with that"))

    result = await AnswerEvaluator(client=client).evaluate("Q", "A", "B")

    assert isinstance(result, Unparseable)
    assert "refused" in result.reason


async def test_missing_parse_is_unparseable():
    client = mock_client(return_value=completion())
    result = await AnswerEvaluator(client=client).evaluate("Q", "A", "B")
    assert result == Unparseable("Could not parse AI response")


async def test_api_error_is_unparseable():
    error = openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))
    client = mock_client(side_effect=error)

    result = await AnswerEvaluator(client=client).evaluate("Q", "A", "B")

    assert result == Unparseable("AI evaluation failed")


async def test_not_configured_without_api_key(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "")

    result = await AnswerEvaluator().evaluate("Q", "A", "B")

    assert result == Unparseable("AI evaluation not configured")


def test_prompt_carries_all_three_fields():
    prompt = get_answer_evaluation_prompt("Who wrote Tom Sawyer?", "Mark Twain", "Samuel Clemens")

    assert "Question: Who wrote Tom Sawyer?" in prompt
    assert "Correct Answer: Mark Twain" in prompt
    assert "Player's Answer: Samuel Clemens" in prompt
