"""
Edit-Distance Similarity Utilities for Content Deduplication

Implements a normalized Levenshtein similarity between two strings and a
small calculator that adds memoization and distribution statistics on top.
"""

import time
import logging
from typing import List, Dict, Any, Tuple

import numpy as np


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character edits turning ``a`` into ``b``.

    Runs in O(len(a) * len(b)) time keeping one row sized to the shorter
    string.
    """
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    row = list(range(len(b) + 1))
    for i, char_a in enumerate(a, 1):
        diagonal = row[0]
        row[0] = i
        for j, char_b in enumerate(b, 1):
            above = row[j]
            row[j] = min(
                above + 1,                       # deletion
                row[j - 1] + 1,                  # insertion
                diagonal + (char_a != char_b)    # substitution
            )
            diagonal = above
    return row[-1]


def normalize_text(text: str) -> str:
    return text.lower().strip()


def string_similarity(a: str, b: str) -> float:
    """Case- and whitespace-insensitive similarity score in [0, 1].

    Equal normalized strings score 1 (including two empty strings), a single
    empty string scores 0, everything else scores
    ``(len(longer) - distance) / len(longer)``. On equal lengths the second
    argument is taken as the longer string.

    Args:
        a: First string
        b: Second string

    Returns:
        Similarity score (0-1)
    """
    s1 = normalize_text(a)
    s2 = normalize_text(b)

    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0

    if len(s1) > len(s2):
        longer, shorter = s1, s2
    else:
        longer, shorter = s2, s1

    distance = levenshtein_distance(longer, shorter)
    return (len(longer) - distance) / len(longer)


class SimilarityCalculator:
    """Memoizing string similarity calculator with distribution statistics."""

    def __init__(self, similarity_threshold: float = 0.7, use_cache: bool = True):
        """Initialize similarity calculator.

        Args:
            similarity_threshold: Score at or above which two strings count as potential duplicates
            use_cache: Whether to memoize scores by normalized string pair
        """
        self.similarity_threshold = similarity_threshold
        self.use_cache = use_cache
        self.calculation_cache: Dict[Tuple[str, str], float] = {}

    def calculate_similarity(self, text1: str, text2: str) -> float:
        """Calculate the similarity of two strings, consulting the cache first."""
        if not self.use_cache:
            return string_similarity(text1, text2)

        key = (normalize_text(text1), normalize_text(text2))
        cached = self.calculation_cache.get(key)
        if cached is not None:
            return cached

        score = string_similarity(text1, text2)
        self.calculation_cache[key] = score
        return score

    def clear_cache(self) -> None:
        self.calculation_cache.clear()

    def get_similarity_stats(self, texts: List[str]) -> Dict[str, Any]:
        """Get statistics about the pairwise similarity distribution.

        Args:
            texts: Strings to compare pairwise

        Returns:
            Dictionary with similarity statistics
        """
        if len(texts) < 2:
            return {
                'total_texts': len(texts),
                'similarity_pairs': 0,
                'mean_similarity': 0.0,
                'max_similarity': 0.0,
                'potential_duplicates': 0
            }

        start_time = time.time()
        similarities = []
        for i in range(len(texts)):
            for j in range(i + 1, len(texts)):
                similarities.append(self.calculate_similarity(texts[i], texts[j]))

        scores = np.array(similarities)
        duplicate_count = int(np.count_nonzero(scores >= self.similarity_threshold))

        logging.debug(f"Similarity stats over {len(texts)} texts computed in {time.time() - start_time:.3f}s")

        return {
            'total_texts': len(texts),
            'similarity_pairs': len(similarities),
            'mean_similarity': float(np.mean(scores)),
            'max_similarity': float(np.max(scores)),
            'min_similarity': float(np.min(scores)),
            'std_similarity': float(np.std(scores)),
            'potential_duplicates': duplicate_count,
            'duplication_rate': duplicate_count / len(similarities)
        }
