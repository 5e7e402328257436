"""
Tests for trivia question models and payload parsing.
"""

import pytest

from plugins.trivia.errors import ErrorKind, TriviaError
from plugins.trivia.question import (
    ANSWER_LETTERS,
    ANSWER_SEPARATOR,
    Question,
    extract_question_text,
    normalize_answer,
    parse_trivia_result,
)


DECORATED = (
    "Question: Newport Trivia #3\n\n"
    "Which bridge connects Newport to Jamestown?\n"
    "A) Mount Hope Bridge\nB) Claiborne Pell Bridge\n"
    "C) Sakonnet River Bridge\nD) Jamestown Verrazzano Bridge\n\n"
    "Please answer with A, B, C, or D."
)


class TestQuestion:
    """Test Question dataclass."""

    def test_creation(self, sample_question):
        """Test basic question creation."""
        assert "Vanderbilt" in sample_question.prompt
        assert sample_question.correct_answer == "B"

    def test_check_answer_case_insensitive(self, sample_question):
        """Test letter answers ignore case."""
        assert sample_question.check_answer("B") is True
        assert sample_question.check_answer("b") is True
        assert sample_question.check_answer("C") is False

    def test_frozen(self, sample_question):
        """Test questions cannot be modified."""
        with pytest.raises(AttributeError):
            sample_question.correct_answer = "A"


class TestNormalizeAnswer:
    """Test answer canonicalization."""

    @pytest.mark.parametrize("raw,expected", [
        ("B", "B"),
        ("b", "B"),
        ("  c  ", "C"),
        ("B) The Breakers", "B"),
        ("d. 1639", "D"),
        ("A: Marble House", "A"),
    ])
    def test_letters(self, raw, expected):
        assert normalize_answer(raw) == expected

    @pytest.mark.parametrize("letter", ANSWER_LETTERS)
    def test_every_choice_letter(self, letter):
        assert normalize_answer(letter.lower() + ") choice") == letter

    @pytest.mark.parametrize("raw", ["", "E", "Breakers", "Answer B"])
    def test_rejects_non_letters(self, raw):
        assert normalize_answer(raw) is None


class TestExtractQuestionText:
    """Test question body extraction."""

    def test_decorated_template(self):
        """Test body between Question: and Please lines is isolated."""
        text = extract_question_text(DECORATED)

        assert text.startswith("Which bridge connects Newport to Jamestown?")
        assert text.endswith("D) Jamestown Verrazzano Bridge")
        assert "Question:" not in text
        assert "Please" not in text

    def test_plain_text_fallback(self):
        """Test undecorated text is returned trimmed."""
        assert extract_question_text("  What is 2+2?\nA) 3\nB) 4  ") == "What is 2+2?\nA) 3\nB) 4"

    def test_strips_answer_section(self):
        """Test fallback drops anything after the answer separator."""
        raw = "What is 2+2?\nA) 3\nB) 4\n\nCorrect Answer: B"
        assert extract_question_text(raw) == "What is 2+2?\nA) 3\nB) 4"

    def test_missing_please_line_falls_back(self):
        """Test half a template does not raise."""
        raw = "Question: #1\n\nWhat is the state bird?\nA) Hen"
        assert extract_question_text(raw) == raw

    def test_never_raises_on_odd_input(self):
        """Test degenerate inputs degrade instead of failing."""
        assert extract_question_text("Question:\n\n\n\nPlease") == "Question:\n\n\n\nPlease"
        assert extract_question_text("") == ""


class TestParseTriviaResult:
    """Test the two supported payload shapes."""

    def test_structured_object(self):
        """Test an object with question and answer is used as-is."""
        question = parse_trivia_result({
            "question": "Who founded Newport?\nA) William Coddington\nB) Roger Williams",
            "answer": "a",
        })

        assert isinstance(question, Question)
        assert question.prompt.startswith("Who founded Newport?")
        assert question.correct_answer == "A"

    def test_structured_object_with_template(self):
        """Test structured prompts still get the body extracted."""
        question = parse_trivia_result({"question": DECORATED, "answer": "B"})
        assert question.prompt.startswith("Which bridge")

    def test_free_text(self):
        """Test free text split on the answer separator."""
        raw = DECORATED + ANSWER_SEPARATOR + "B) Claiborne Pell Bridge\n"
        question = parse_trivia_result(raw)

        assert question.prompt.startswith("Which bridge")
        assert question.correct_answer == "B"

    def test_structured_object_takes_priority(self):
        """Test shape 1 wins even if the fields contain the separator."""
        question = parse_trivia_result({
            "question": "Q?" + ANSWER_SEPARATOR + "A",
            "answer": "C",
            "extra": "ignored",
        })
        assert question.correct_answer == "C"

    def test_object_without_fields_falls_through(self):
        """Test incomplete objects are tried as text and rejected."""
        with pytest.raises(TriviaError) as exc_info:
            parse_trivia_result({"question": "Only a question"})

        assert exc_info.value.kind == ErrorKind.UNPARSABLE_CONTENT

    def test_text_without_separator(self):
        """Test text with no answer section is unparsable."""
        with pytest.raises(TriviaError) as exc_info:
            parse_trivia_result("Just some chatter from the model")

        assert exc_info.value.kind == ErrorKind.UNPARSABLE_CONTENT

    def test_text_with_two_separators(self):
        """Test ambiguous text is unparsable."""
        raw = "Q1" + ANSWER_SEPARATOR + "A" + ANSWER_SEPARATOR + "B"
        with pytest.raises(TriviaError) as exc_info:
            parse_trivia_result(raw)

        assert exc_info.value.kind == ErrorKind.UNPARSABLE_CONTENT

    def test_answer_without_letter(self):
        """Test an answer that is not a choice letter is unparsable."""
        with pytest.raises(TriviaError) as exc_info:
            parse_trivia_result("Q?" + ANSWER_SEPARATOR + "The Breakers")

        assert exc_info.value.kind == ErrorKind.UNPARSABLE_CONTENT

    def test_empty_prompt(self):
        """Test an empty prompt is unparsable."""
        with pytest.raises(TriviaError):
            parse_trivia_result("   " + ANSWER_SEPARATOR + "A")
