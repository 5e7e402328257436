"""
Trivia Display Sanitizing

System turns may carry light HTML formatting from the question
service; they are cleaned before being rendered as rich text.
User turns are always rendered as escaped plain text.
"""

import html
from typing import Any, Dict

import nh3

from .transcript import TurnEntry


ALLOWED_TAGS = {"b", "strong", "i", "em", "u", "br", "p", "ul", "ol", "li", "code"}


def sanitize_html(text: str) -> str:
    """Strip executable content, keeping benign formatting tags."""
    return nh3.clean(text, tags=ALLOWED_TAGS, attributes={})


def render_turn(entry: TurnEntry) -> Dict[str, Any]:
    """
    Prepare a turn for display.

    Returns:
        Dict with the turn fields plus an ``html`` key safe to
        insert into a page
    """
    rendered = entry.to_dict()
    if entry.is_user:
        rendered["html"] = html.escape(entry.text)
    else:
        rendered["html"] = sanitize_html(entry.text)
    return rendered
