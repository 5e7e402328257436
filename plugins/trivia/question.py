"""
Trivia Question Models

Question data model and parsing of the question service payload.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Optional

from .errors import ErrorKind, TriviaError


ANSWER_LETTERS = ("A", "B", "C", "D")

# Separator between question prose and the answer in free text payloads
ANSWER_SEPARATOR = "\n\nCorrect Answer: "

# Decorated template: "Question: ...\n\n<body>\n\nPlease ..."
_QUESTION_BODY = re.compile(r"Question:.*?\n\n(.*?)\n\nPlease", re.DOTALL)
_ANSWER_LETTER = re.compile(rf"^([{''.join(ANSWER_LETTERS)}])(?![A-Z])")


@dataclass(frozen=True)
class Question:
    """
    A multiple choice trivia question.

    Attributes:
        prompt: Question text with the choices embedded
        correct_answer: Letter of the correct choice (A-D, uppercase)
    """

    prompt: str
    correct_answer: str

    def check_answer(self, letter: str) -> bool:
        """Check a letter answer, case insensitive."""
        return letter.strip().upper() == self.correct_answer.upper()


def normalize_answer(answer: str) -> Optional[str]:
    """
    Canonicalize an answer token to a single uppercase letter.

    Accepts bare letters ("b") and decorated ones ("B) Fort Adams",
    "c. 1639"). Returns None if no leading A-D letter is found.
    """
    match = _ANSWER_LETTER.match(answer.strip().upper())
    if match:
        return match.group(1)
    return None


def extract_question_text(text: str) -> str:
    """
    Pull the readable question body out of a decorated template.

    Falls back to the text before the answer separator, then to the
    whole text. Never raises.
    """
    match = _QUESTION_BODY.search(text)
    if match and match.group(1).strip():
        return match.group(1).strip()

    before_answer = text.split(ANSWER_SEPARATOR.rstrip())[0].strip()
    if before_answer:
        return before_answer

    return text.strip()


def _build_question(prompt: Any, answer: Any, raw: Any) -> Question:
    """Validate raw prompt/answer values and build a Question."""
    prompt_text = extract_question_text(str(prompt))
    letter = normalize_answer(str(answer))

    if not prompt_text or letter is None:
        raise TriviaError(
            "Failed to parse trivia response",
            ErrorKind.UNPARSABLE_CONTENT,
            details={"result": raw},
        )

    return Question(prompt=prompt_text, correct_answer=letter)


def parse_trivia_result(result: Any) -> Question:
    """
    Parse the service result payload into a Question.

    Two shapes are supported, tried in order:
    1. A mapping with ``question`` and ``answer`` fields
    2. Free text with the question and answer split by
       ``"\\n\\nCorrect Answer: "``

    Args:
        result: The ``result`` field of the service envelope

    Returns:
        Parsed Question

    Raises:
        TriviaError: UNPARSABLE_CONTENT if neither shape matches
    """
    if isinstance(result, dict) and result.get("question") and result.get("answer"):
        return _build_question(result["question"], result["answer"], result)

    text = result if isinstance(result, str) else json.dumps(result)
    parts = text.split(ANSWER_SEPARATOR)
    if len(parts) == 2:
        return _build_question(parts[0].strip(), parts[1].strip(), result)

    raise TriviaError(
        "Invalid response format",
        ErrorKind.UNPARSABLE_CONTENT,
        details={"result": result},
    )
