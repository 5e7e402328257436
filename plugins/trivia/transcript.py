"""
Trivia Conversation Transcript

Append-only log of chat turns exchanged during a session.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .errors import ErrorKind


class Author(Enum):
    """Who wrote a turn."""

    USER = "user"
    SYSTEM = "system"


@dataclass(frozen=True)
class TurnEntry:
    """
    One turn of the conversation.

    Attributes:
        text: Question prose, feedback, or the user's input
        author: USER or SYSTEM
        is_error: Whether this turn reports a failure
        error_kind: Failure tag, set iff is_error
    """

    text: str
    author: Author
    is_error: bool = False
    error_kind: Optional[ErrorKind] = None

    def __post_init__(self) -> None:
        if self.is_error != (self.error_kind is not None):
            raise ValueError("error_kind must be set exactly when is_error is true")

    @classmethod
    def user(cls, text: str) -> "TurnEntry":
        return cls(text=text, author=Author.USER)

    @classmethod
    def system(cls, text: str) -> "TurnEntry":
        return cls(text=text, author=Author.SYSTEM)

    @classmethod
    def error(cls, text: str, kind: ErrorKind) -> "TurnEntry":
        return cls(text=text, author=Author.SYSTEM, is_error=True, error_kind=kind)

    @property
    def is_user(self) -> bool:
        return self.author == Author.USER

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for NATS payloads."""
        return {
            "text": self.text,
            "author": self.author.value,
            "is_error": self.is_error,
            "error_kind": self.error_kind.value if self.error_kind else None,
        }


class ConversationLog:
    """
    Ordered, append-only chat history.

    Entries are never edited or removed one at a time; the only way
    to drop history is reset(), which seeds a fresh greeting.
    """

    def __init__(self, greeting: str):
        self._entries: List[TurnEntry] = [TurnEntry.system(greeting)]

    def append(self, entry: TurnEntry) -> None:
        self._entries.append(entry)

    def reset(self, greeting: str) -> None:
        """Clear history down to a single greeting turn."""
        self._entries = [TurnEntry.system(greeting)]

    @property
    def entries(self) -> Tuple[TurnEntry, ...]:
        """Snapshot of all turns in append order."""
        return tuple(self._entries)

    @property
    def last(self) -> TurnEntry:
        return self._entries[-1]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TurnEntry]:
        return iter(tuple(self._entries))
