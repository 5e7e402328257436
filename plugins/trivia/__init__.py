"""
Trivia Plugin Package

Conversational Newport trivia. A remote workflow generates one
multiple choice question at a time; the player answers A-D and
types next/stop/start to move through the game.

Commands:
    !trivia <text> - Answer (A-D) or type next/stop/start
    !trivia reset - Clear the conversation and start over
    !trivia close - Dismiss the session
"""

from .classifier import ClassifiedInput, Command, InputKind, classify
from .errors import ERROR_MESSAGES, ErrorKind, TriviaError, error_message
from .game import GameConfig, Phase, SessionState, Transition, TriviaGame
from .question import Question, extract_question_text, parse_trivia_result
from .transcript import Author, ConversationLog, TurnEntry
from .providers.base import FetchResult, QuestionSource
from .providers.mindstudio import MindStudioProvider
from .session import TriviaSession

__all__ = [
    # Input
    "ClassifiedInput",
    "Command",
    "InputKind",
    "classify",
    # Errors
    "ERROR_MESSAGES",
    "ErrorKind",
    "TriviaError",
    "error_message",
    # Game module
    "GameConfig",
    "Phase",
    "SessionState",
    "Transition",
    "TriviaGame",
    # Question module
    "Question",
    "extract_question_text",
    "parse_trivia_result",
    # Transcript
    "Author",
    "ConversationLog",
    "TurnEntry",
    # Providers
    "FetchResult",
    "QuestionSource",
    "MindStudioProvider",
    # Session
    "TriviaSession",
]
