"""
Trivia Errors

Failure taxonomy for question fetching and the user-facing
messages shown for each kind.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Category of a failed question request."""

    INVALID_INPUT = "INVALID_INPUT"
    TRANSPORT_FAILURE = "API_ERROR"
    BAD_SERVICE_RESPONSE = "INVALID_RESPONSE"
    UNPARSABLE_CONTENT = "PARSE_ERROR"
    UNKNOWN = "UNKNOWN_ERROR"


UNKNOWN_ERROR_MESSAGE = "An unexpected error occurred. Please try again."

ERROR_MESSAGES = {
    ErrorKind.INVALID_INPUT: "Please provide a valid input.",
    ErrorKind.TRANSPORT_FAILURE: "Unable to connect to the trivia service. Please try again.",
    ErrorKind.BAD_SERVICE_RESPONSE: "Received an invalid response from the server.",
    ErrorKind.UNPARSABLE_CONTENT: "Unable to process the trivia question. Please try again.",
}


def error_message(kind: Optional[ErrorKind]) -> str:
    """
    Look up the chat message for an error kind.

    Unmapped kinds (including None) get the generic message.
    """
    return ERROR_MESSAGES.get(kind, UNKNOWN_ERROR_MESSAGE)


class TriviaError(Exception):
    """Error raised while fetching or parsing a trivia question."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        status_code: Optional[int] = None,
        details: Any = None,
    ):
        """
        Initialize trivia error.

        Args:
            message: Error message for logs
            kind: Taxonomy tag
            status_code: HTTP status code if applicable
            details: Extra context (raw payload, underlying error)
        """
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code
        self.details = details

    @property
    def user_message(self) -> str:
        """Message suitable for the chat transcript."""
        return error_message(self.kind)
