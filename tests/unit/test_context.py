"""Unit tests for context assembly."""

import pytest_check as check

from docchat.agent.context import (
    approximate_word_count,
    assemble_context,
    document_excerpt,
    document_turns,
)
from docchat.agent.prompts import DOCUMENT_CONTEXT_ACK, TRUNCATION_MARKER
from docchat.models.schemas import ConversationTurn, DocumentContext, Role


def _history(count: int) -> list[ConversationTurn]:
    return [
        ConversationTurn(role=Role.USER if i % 2 == 0 else Role.MODEL, text=f"turn {i}")
        for i in range(count)
    ]


class TestAssembleWithoutDocument:
    """Tests for history windowing and the new user turn."""

    def test_single_turn_for_empty_history(self) -> None:
        """No history and no document yields only the new user turn."""
        turns = assemble_context([], None, "What is 2+2?")

        assert turns == [ConversationTurn(role=Role.USER, text="What is 2+2?")]

    def test_short_history_kept_in_order(self) -> None:
        """History within the window is passed through unchanged."""
        history = _history(5)

        turns = assemble_context(history, None, "next")

        check.equal(turns[:-1], history)
        check.equal(turns[-1].text, "next")

    def test_long_history_keeps_last_twenty(self) -> None:
        """Only the 20 most recent prior turns survive, in original order."""
        for length in (21, 25, 40, 101):
            history = _history(length)

            turns = assemble_context(history, None, "now")

            check.equal(len(turns), 21)
            check.equal(turns[:-1], history[-20:])

    def test_custom_window(self) -> None:
        history = _history(10)

        turns = assemble_context(history, None, "now", window=4)

        assert turns[:-1] == history[-4:]

    def test_zero_window_drops_history(self) -> None:
        turns = assemble_context(_history(6), None, "now", window=0)

        assert [t.text for t in turns] == ["now"]

    def test_is_deterministic(self) -> None:
        """Identical inputs produce identical output."""
        history = _history(30)
        document = DocumentContext(full_text="x" * 9000, is_new_upload=False)

        first = assemble_context(history, document, "q")
        second = assemble_context(history, document, "q")

        assert first == second


class TestAssembleWithDocument:
    """Tests for document announcement turns."""

    def test_new_upload_adds_announcement_and_ack(self) -> None:
        """A new upload becomes a user/model pair before the new turn."""
        text = "Chapter one. " * 40
        document = DocumentContext(full_text=text, is_new_upload=True)

        turns = assemble_context([], document, "Summarize")

        check.equal(len(turns), 3)
        check.equal([t.role for t in turns], [Role.USER, Role.MODEL, Role.USER])
        check.is_in(text, turns[0].text)
        check.is_in(f"{approximate_word_count(text)} words", turns[1].text)
        check.equal(turns[2].text, "Summarize")

    def test_document_turns_precede_history(self) -> None:
        history = _history(4)
        document = DocumentContext(full_text="report", is_new_upload=False)

        turns = assemble_context(history, document, "q")

        check.equal(turns[0].role, Role.USER)
        check.equal(turns[1].role, Role.MODEL)
        check.equal(turns[2:-1], history)

    def test_known_document_sent_in_full_when_short(self) -> None:
        """Text up to the excerpt limit is resent without a marker."""
        text = "a" * 8000
        document = DocumentContext(full_text=text, is_new_upload=False)

        turns = assemble_context([], document, "q")

        check.is_in(text, turns[0].text)
        check.is_not_in(TRUNCATION_MARKER, turns[0].text)
        check.equal(turns[1].text, DOCUMENT_CONTEXT_ACK)

    def test_known_document_truncated_when_long(self) -> None:
        """Longer text is cut to the first 8000 characters plus marker."""
        text = "a" * 8000 + "b" * 500
        document = DocumentContext(full_text=text, is_new_upload=False)

        turns = assemble_context([], document, "q")

        check.is_true(turns[0].text.endswith("a" * 8000 + TRUNCATION_MARKER))
        check.is_not_in("b", turns[0].text.split("\n", 1)[1])

    def test_empty_document_adds_nothing(self) -> None:
        document = DocumentContext(full_text="", is_new_upload=True)

        assert document_turns(document) == []


class TestHelpers:
    def test_word_count_rounds_length_over_five(self) -> None:
        check.equal(approximate_word_count(""), 0)
        check.equal(approximate_word_count("abcde"), 1)
        check.equal(approximate_word_count("a" * 13), 3)
        check.equal(approximate_word_count("a" * 14), 3)

    def test_excerpt_boundary(self) -> None:
        check.equal(document_excerpt("abc", limit=3), "abc")
        check.equal(document_excerpt("abcd", limit=3), "abc" + TRUNCATION_MARKER)
