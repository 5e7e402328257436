"""
Test fixtures for trivia plugin tests.
"""

import json
from typing import List, Union

import pytest
from unittest.mock import AsyncMock, MagicMock

from plugins.trivia.errors import ErrorKind, TriviaError
from plugins.trivia.game import GameConfig
from plugins.trivia.providers.base import QuestionSource
from plugins.trivia.question import Question


class FakeQuestionSource(QuestionSource):
    """Question source returning queued questions or raising queued errors."""

    def __init__(self, outcomes: List[Union[Question, Exception]] = None):
        self.outcomes = list(outcomes or [])
        self.directives: List[str] = []
        self.closed = False

    def queue(self, *outcomes: Union[Question, Exception]) -> None:
        self.outcomes.extend(outcomes)

    async def fetch_question(self, directive: str) -> Question:
        self.directives.append(directive)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def sample_question():
    """Newport question with answer B."""
    return Question(
        prompt=(
            "Which Newport mansion was built for Cornelius Vanderbilt II?\n"
            "A) Marble House\nB) The Breakers\nC) Rosecliff\nD) The Elms"
        ),
        correct_answer="B",
    )


@pytest.fixture
def second_question():
    """Follow-up question with answer D."""
    return Question(
        prompt=(
            "What year was Newport founded?\n"
            "A) 1620\nB) 1776\nC) 1701\nD) 1639"
        ),
        correct_answer="D",
    )


@pytest.fixture
def transport_error():
    """Transport failure as raised by a provider."""
    return TriviaError(
        "API request failed with status 503",
        ErrorKind.TRANSPORT_FAILURE,
        status_code=503,
    )


@pytest.fixture
def fake_source():
    """Empty fake question source; queue outcomes in the test."""
    return FakeQuestionSource()


@pytest.fixture
def game_config():
    """Default game configuration."""
    return GameConfig()


@pytest.fixture
def mock_nats():
    """Mock NATS client."""
    nats = AsyncMock()
    nats.subscribe = AsyncMock(return_value=MagicMock(unsubscribe=AsyncMock()))
    nats.publish = AsyncMock()
    return nats


@pytest.fixture
def mock_msg():
    """Factory for mock NATS command messages."""
    def _make_message(data: dict, reply: str = "reply.subject"):
        msg = MagicMock()
        msg.data = json.dumps(data).encode()
        msg.reply = reply
        msg.respond = AsyncMock()
        return msg
    return _make_message


@pytest.fixture
def plugin_config():
    """Plugin configuration for tests."""
    return {
        "api_key": "test-key",
        "app_id": "test-app",
        "directives": {"first": "All things Newport", "next": "next"},
        "emit_events": True,
    }
