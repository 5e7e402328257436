"""
Trivia Input Classifier

Turns raw chat text into an answer letter, a control command,
or unrecognized input.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class InputKind(Enum):
    """Classification of a chat message."""

    ANSWER = "answer"
    COMMAND = "command"
    UNRECOGNIZED = "unrecognized"


class Command(Enum):
    """Control commands understood by the game."""

    START = "start"
    NEXT = "next"
    STOP = "stop"


_LETTER = re.compile(r"^[abcd]$", re.IGNORECASE)
_COMMANDS = {command.value: command for command in Command}


@dataclass(frozen=True)
class ClassifiedInput:
    """
    Result of classifying user text.

    Attributes:
        kind: What the text was recognized as
        text: Normalized text (uppercase letter, lowercase command,
            or the trimmed original)
    """

    kind: InputKind
    text: str

    @property
    def letter(self) -> str:
        """Answer letter (only meaningful for ANSWER)."""
        return self.text if self.kind == InputKind.ANSWER else ""

    @property
    def command(self) -> Optional[Command]:
        """Command (only for COMMAND)."""
        if self.kind != InputKind.COMMAND:
            return None
        return _COMMANDS[self.text]

    def is_command(self, command: Command) -> bool:
        return self.command is command


def classify(raw: str) -> ClassifiedInput:
    """
    Classify raw user input. Never fails.

    Examples:
        " b " -> ANSWER("B")
        "NEXT" -> COMMAND("next")
        "A is my answer" -> UNRECOGNIZED("A is my answer")
    """
    trimmed = (raw or "").strip()

    if _LETTER.match(trimmed):
        return ClassifiedInput(InputKind.ANSWER, trimmed.upper())

    lowered = trimmed.lower()
    if lowered in _COMMANDS:
        return ClassifiedInput(InputKind.COMMAND, lowered)

    return ClassifiedInput(InputKind.UNRECOGNIZED, trimmed)
