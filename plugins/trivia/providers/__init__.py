"""Trivia question sources package."""

from .base import FetchResult, QuestionSource
from .mindstudio import MindStudioProvider

__all__ = ["FetchResult", "QuestionSource", "MindStudioProvider"]
