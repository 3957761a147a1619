"""Unit tests for sentence-aware excerpt truncation."""

from __future__ import annotations

from editorial_reviews.utils.truncation import (
    ELLIPSIS,
    MAX_EXCERPT_CHARS,
    prepare_excerpt,
    truncate_excerpt,
    truncate_paragraphs,
)


class TestTruncateExcerpt:
    def test_short_text_unchanged(self) -> None:
        assert truncate_excerpt("Short. Text.") == "Short. Text."

    def test_exact_limit_unchanged(self) -> None:
        text = "a" * MAX_EXCERPT_CHARS
        assert truncate_excerpt(text) == text

    def test_cuts_after_last_sentence_in_window(self) -> None:
        text = "a" * 1850 + ". " + "b" * 248
        assert len(text) == 2100
        result = truncate_excerpt(text)
        assert len(result) == 1851
        assert result.endswith(".")

    def test_hard_cut_with_ellipsis(self) -> None:
        text = "a" * 2100
        result = truncate_excerpt(text)
        assert result == "a" * 2000 + ELLIPSIS

    def test_sentence_break_after_window_is_ignored(self) -> None:
        text = "a" * 2050 + ". " + "b" * 48
        assert truncate_excerpt(text) == "a" * 2000 + ELLIPSIS

    def test_custom_limit(self) -> None:
        assert truncate_excerpt("One. Two. Three.", limit=10) == "One. Two."


class TestPrepareExcerpt:
    def test_none(self) -> None:
        assert prepare_excerpt(None) is None

    def test_blank_is_none(self) -> None:
        assert prepare_excerpt("   \n ") is None

    def test_trims(self) -> None:
        assert prepare_excerpt("  text  ") == "text"


class TestTruncateParagraphs:
    def test_normalizes_and_rejoins(self) -> None:
        text = "  First   para\n line.\n\n\n\n  Second  para. \n\n"
        assert truncate_paragraphs(text) == "First para line.\n\nSecond para."

    def test_no_paragraphs_is_none(self) -> None:
        assert truncate_paragraphs(" \n\n \n\n") is None

    def test_truncates_joined_text(self) -> None:
        text = ("Sentence one. " * 100) + "\n\n" + ("x" * 1000)
        result = truncate_paragraphs(text)
        assert result is not None
        assert len(result) <= MAX_EXCERPT_CHARS
        assert result.endswith(".")
