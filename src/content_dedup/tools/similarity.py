"""
Similarity Tools for the Content Dedup Server
"""

from typing import List

from ..deduplication.similarity import SimilarityCalculator, levenshtein_distance, normalize_text


def compare_text_tool(calculator: SimilarityCalculator, text_a: str, text_b: str) -> dict:
    """Compare two strings with the normalized edit-distance similarity."""
    if not isinstance(text_a, str) or not isinstance(text_b, str):
        return {
            "success": False,
            "message": "Both 'text_a' and 'text_b' must be strings"
        }

    similarity = calculator.calculate_similarity(text_a, text_b)
    return {
        "success": True,
        "message": f"Texts are {round(similarity * 100)}% similar",
        "similarity": similarity,
        "edit_distance": levenshtein_distance(normalize_text(text_a), normalize_text(text_b)),
        "is_potential_duplicate": similarity >= calculator.similarity_threshold
    }


def get_similarity_stats_tool(calculator: SimilarityCalculator, texts: List[str]) -> dict:
    """Summarize the pairwise similarity distribution of a list of strings."""
    if not isinstance(texts, list) or not all(isinstance(text, str) for text in texts):
        return {
            "success": False,
            "message": "'texts' must be a list of strings"
        }

    return {
        "success": True,
        "message": f"Similarity statistics computed for {len(texts)} texts",
        "stats": calculator.get_similarity_stats(texts)
    }
