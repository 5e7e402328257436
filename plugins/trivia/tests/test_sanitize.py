"""
Tests for display sanitizing.
"""

from plugins.trivia.errors import ErrorKind
from plugins.trivia.sanitize import render_turn, sanitize_html
from plugins.trivia.transcript import TurnEntry


class TestSanitizeHtml:
    """Test HTML cleaning of system text."""

    def test_keeps_formatting(self):
        assert sanitize_html("<b>Bold</b> and <em>soft</em>") == "<b>Bold</b> and <em>soft</em>"

    def test_removes_scripts(self):
        assert sanitize_html("Hi<script>alert(1)</script>") == "Hi"

    def test_strips_attributes(self):
        cleaned = sanitize_html('<b onclick="steal()">Click</b>')
        assert cleaned == "<b>Click</b>"

    def test_drops_unknown_tags(self):
        cleaned = sanitize_html('<a href="javascript:alert(1)">link</a>')
        assert "href" not in cleaned
        assert "link" in cleaned

    def test_plain_text_unchanged(self):
        text = "Which mansion?\nA) Marble House\nB) The Breakers"
        assert sanitize_html(text) == text


class TestRenderTurn:
    """Test turn rendering."""

    def test_user_turn_escaped(self):
        rendered = render_turn(TurnEntry.user("<i>A</i>"))
        assert rendered["html"] == "&lt;i&gt;A&lt;/i&gt;"
        assert rendered["text"] == "<i>A</i>"

    def test_error_turn(self):
        rendered = render_turn(TurnEntry.error("Service down", ErrorKind.TRANSPORT_FAILURE))
        assert rendered["html"] == "Service down"
        assert rendered["is_error"] is True
        assert rendered["error_kind"] == "API_ERROR"
