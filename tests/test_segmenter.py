"""Tests for sentence segmentation."""

from __future__ import annotations

from sublyze.core.segmenter import LineBoundary, SentenceBoundary, segment_text


class TestSentenceSegmentation:

    def test_splits_on_terminal_punctuation(self):
        assert segment_text("Hi there. How are you? Great!") == [
            "Hi there.",
            "How are you?",
            "Great!",
        ]

    def test_blank_input_yields_no_segments(self):
        assert segment_text("") == []
        assert segment_text("   \n\t ") == []

    def test_text_without_boundary_is_one_segment(self):
        assert segment_text("  no punctuation here  ") == ["no punctuation here"]

    def test_trailing_text_after_last_boundary_is_kept(self):
        assert segment_text("First one. and then some") == ["First one.", "and then some"]

    def test_run_of_terminators_is_a_single_boundary(self):
        assert segment_text("Wait... What?! Okay.") == ["Wait...", "What?!", "Okay."]

    def test_decimal_point_is_not_a_boundary(self):
        assert segment_text("It costs 3.5 dollars. Fine.") == ["It costs 3.5 dollars.", "Fine."]

    def test_segments_are_stripped(self):
        assert segment_text("One.\n\n   Two.  ") == ["One.", "Two."]

    def test_deterministic(self):
        text = "A. B? C! D"
        assert segment_text(text) == segment_text(text)

    def test_custom_terminators(self):
        boundary = SentenceBoundary(terminators=frozenset(";"))
        assert segment_text("a; b. c", boundary) == ["a;", "b. c"]


class TestLineSegmentation:

    def test_one_segment_per_non_blank_line(self):
        assert segment_text("first\n\nsecond\nthird", LineBoundary()) == [
            "first",
            "second",
            "third",
        ]
