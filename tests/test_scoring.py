"""Tests for scoring.py: keyword hits, phrase bonus and prefix similarity."""
from __future__ import annotations

import pytest

from pdf_chat.errors import SimilarityError
from pdf_chat.scoring import (
    PHRASE_BONUS,
    SIMILARITY_WEIGHT,
    compare_window,
    count_occurrences,
    normalize_query,
    query_terms,
    score_segment,
    similarity_term,
    strip_for_similarity,
    term_cosine_similarity,
)


# ---------------------------------------------------------------------------
# normalization helpers
# ---------------------------------------------------------------------------

class TestNormalization:
    def test_lowercases_and_collapses_whitespace(self):
        assert normalize_query("  What   Did\tThe CAT \n") == "what did the cat"

    def test_blank_normalizes_to_empty(self):
        assert normalize_query(" \t\n ") == ""

    def test_query_terms_drop_short_words(self):
        assert query_terms("what did the cat do") == ["what", "did", "the", "cat"]

    def test_query_terms_custom_minimum(self):
        assert query_terms("what did the cat do", 4) == ["what"]

    def test_strip_for_similarity_removes_punctuation(self):
        assert strip_for_similarity("the cat, sat!  on   mat.") == "the cat sat on mat"


# ---------------------------------------------------------------------------
# count_occurrences
# ---------------------------------------------------------------------------

class TestCountOccurrences:
    def test_counts_non_overlapping(self):
        assert count_occurrences("aaaa", "aa") == 2

    def test_counts_substrings_inside_words(self):
        assert count_occurrences("the theory of there", "the") == 3

    def test_no_match(self):
        assert count_occurrences("dogs bark", "cat") == 0

    def test_empty_word_counts_zero(self):
        assert count_occurrences("anything", "") == 0


# ---------------------------------------------------------------------------
# term_cosine_similarity / similarity_term
# ---------------------------------------------------------------------------

class TestSimilarity:
    def test_identical_texts_score_one(self):
        assert term_cosine_similarity("cat sat", "cat sat") == pytest.approx(1.0)

    def test_disjoint_texts_score_zero(self):
        assert term_cosine_similarity("cat", "dog") == pytest.approx(0.0)

    def test_is_symmetric(self):
        a, b = "cat sat on mat", "the cat and the hat"
        assert term_cosine_similarity(a, b) == pytest.approx(term_cosine_similarity(b, a))

    def test_empty_side_raises(self):
        with pytest.raises(SimilarityError):
            term_cosine_similarity("", "cat")

    def test_window_has_floor_of_100(self):
        assert compare_window(5) == 100
        assert compare_window(80) == 160

    def test_short_segment_skips_term(self):
        assert similarity_term("cat", "cat") == 0.0

    def test_degenerate_query_contributes_zero(self):
        assert similarity_term("???", "x" * 150) == 0.0

    def test_long_segment_gets_weighted_similarity(self):
        segment = "cat " * 30
        assert similarity_term("cat", segment) == pytest.approx(SIMILARITY_WEIGHT)


# ---------------------------------------------------------------------------
# score_segment
# ---------------------------------------------------------------------------

class TestScoreSegment:
    def test_keyword_hits_only_for_short_segment(self):
        # "the" twice and "cat" once; "what"/"did" absent; "do" too short
        assert score_segment("what did the cat do", "The cat sat on the mat.") == pytest.approx(3.0)

    def test_unrelated_segment_scores_zero(self):
        assert score_segment("what did the cat do", "Dogs bark loudly at night.") == 0.0

    def test_phrase_bonus_applied_per_qualifying_word(self):
        score = score_segment("Black Cat", "A black cat sleeps")
        assert score == pytest.approx(2 + 2 * PHRASE_BONUS)

    def test_no_phrase_bonus_when_words_are_apart(self):
        assert score_segment("black cat", "A black dog and a cat") == pytest.approx(2.0)

    def test_short_words_never_earn_phrase_bonus(self):
        assert score_segment("is a", "this is a test") == 0.0

    def test_all_three_terms_combine(self):
        segment = "cat " * 30
        expected = 30 + PHRASE_BONUS + SIMILARITY_WEIGHT
        assert score_segment("cat", segment) == pytest.approx(expected)

    def test_similarity_can_score_without_keywords(self):
        segment = ("zebra ox " * 20) + "on"
        assert len(segment) >= 100
        assert score_segment("ox on", segment) > 0.0

    def test_punctuation_only_query_scores_zero(self):
        assert score_segment("???", "x" * 150) == 0.0

    def test_is_deterministic(self):
        segment = "The committee reviewed the budget and approved the budget plan. " * 3
        first = score_segment("budget plan", segment)
        assert all(score_segment("budget plan", segment) == first for _ in range(5))

    def test_scores_are_non_negative(self, cat_segments):
        for query in ["cat", "quantum entanglement", "the the the", "!!"]:
            for segment in cat_segments:
                assert score_segment(query, segment.text) >= 0.0
