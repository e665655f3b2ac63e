"""Hybrid keyword and character-level relevance scoring.

A segment's score is the sum of three terms:

- keyword hits: non-overlapping occurrences of each query word longer than two
  characters;
- phrase bonus: `PHRASE_BONUS` for every such word when the whole normalized
  query appears verbatim in the segment;
- similarity: `SIMILARITY_WEIGHT` times the cosine similarity between the
  term-frequency vectors of the query and a prefix of the segment, computed
  only when the segment is at least as long as the comparison window.
"""
from __future__ import annotations

import re
from collections import Counter

import numpy as np

from .errors import SimilarityError

PHRASE_BONUS = 5.0
SIMILARITY_WEIGHT = 2.0
MIN_QUERY_WORD_LENGTH = 3
MIN_COMPARE_LENGTH = 100

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


def normalize_query(text: str) -> str:
    """Lower-case and collapse whitespace."""
    return " ".join(text.lower().split())


def query_terms(normalized_query: str, min_length: int = MIN_QUERY_WORD_LENGTH) -> list[str]:
    return [word for word in normalized_query.split() if len(word) >= min_length]


def count_occurrences(text: str, word: str) -> int:
    """Count non-overlapping occurrences of `word`, scanning left to right."""
    if not word:
        return 0
    return text.count(word)


def strip_for_similarity(text: str) -> str:
    return " ".join(_NON_ALNUM.sub("", text).split())


def compare_window(query_length: int) -> int:
    return max(query_length * 2, MIN_COMPARE_LENGTH)


def term_cosine_similarity(left: str, right: str) -> float:
    """Cosine similarity of word-frequency vectors.

    Raises:
        SimilarityError: If either text has no terms.
    """
    left_counts = Counter(left.split())
    right_counts = Counter(right.split())
    if not left_counts or not right_counts:
        raise SimilarityError("cannot compare empty term vectors")

    vocabulary = sorted(left_counts.keys() | right_counts.keys())
    left_vector = np.array([left_counts[term] for term in vocabulary], dtype=np.float64)
    right_vector = np.array([right_counts[term] for term in vocabulary], dtype=np.float64)
    denominator = np.linalg.norm(left_vector) * np.linalg.norm(right_vector)
    return float(left_vector @ right_vector / denominator)


def similarity_term(normalized_query: str, segment_lower: str) -> float:
    """Weighted prefix similarity, or 0.0 when it is skipped or undefined."""
    window = compare_window(len(normalized_query))
    if len(segment_lower) < window:
        return 0.0
    try:
        similarity = term_cosine_similarity(
            strip_for_similarity(normalized_query),
            strip_for_similarity(segment_lower[:window]),
        )
    except SimilarityError:
        return 0.0
    return similarity * SIMILARITY_WEIGHT


def score_segment(query: str, segment_text: str) -> float:
    """Score one segment against a query.

    Args:
        query: Raw or normalized query text.
        segment_text: Segment text as stored.

    Returns:
        Non-negative relevance score.
    """
    normalized_query = normalize_query(query)
    segment_lower = segment_text.lower()
    phrase_match = bool(normalized_query) and normalized_query in segment_lower

    score = 0.0
    for word in query_terms(normalized_query):
        score += count_occurrences(segment_lower, word)
        # Bonus is applied per qualifying word, not once per segment.
        if phrase_match:
            score += PHRASE_BONUS

    score += similarity_term(normalized_query, segment_lower)
    return score
