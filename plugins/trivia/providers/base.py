"""
Base Question Source Interface

Abstract base class for trivia question sources.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from ..errors import ErrorKind, TriviaError, error_message
from ..question import Question

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """
    Outcome of a question request.

    Exactly one of ``question`` or ``error_kind`` is set.

    Attributes:
        question: The fetched question on success
        error_kind: Failure tag on failure
        message: Log-level description of the failure
        status_code: HTTP status code, when the failure had one
        details: Extra failure context
    """

    question: Optional[Question] = None
    error_kind: Optional[ErrorKind] = None
    message: str = ""
    status_code: Optional[int] = None
    details: Any = None

    @property
    def ok(self) -> bool:
        return self.question is not None

    @property
    def user_message(self) -> str:
        return error_message(self.error_kind)

    @classmethod
    def success(cls, question: Question) -> "FetchResult":
        return cls(question=question)

    @classmethod
    def failure(cls, error: TriviaError) -> "FetchResult":
        return cls(
            error_kind=error.kind,
            message=str(error),
            status_code=error.status_code,
            details=error.details,
        )


class QuestionSource(ABC):
    """
    Base class for question sources.

    Sources produce one question per request for a directive
    ("first question" or "next question"). Subclasses implement
    fetch_question() and raise TriviaError on failure; callers use
    request_question(), which never raises TriviaError.
    """

    @abstractmethod
    async def fetch_question(self, directive: str) -> Question:
        """
        Fetch a single question.

        Args:
            directive: Instruction selecting first/next question behavior

        Returns:
            Parsed Question

        Raises:
            TriviaError: On any classified failure
        """
        ...

    async def request_question(self, directive: str) -> FetchResult:
        """
        Request a question, returning failures as a result.

        Empty directives fail with INVALID_INPUT before fetch_question()
        is called. No retries are made.
        """
        if not directive or not directive.strip():
            return FetchResult.failure(
                TriviaError("Input is required", ErrorKind.INVALID_INPUT)
            )

        try:
            question = await self.fetch_question(directive)
        except TriviaError as e:
            logger.warning(f"Question request failed ({e.kind.name}): {e}")
            return FetchResult.failure(e)

        return FetchResult.success(question)

    async def close(self) -> None:
        """
        Close any resources used by the source.

        Override this in subclasses that need cleanup.
        """
        pass
