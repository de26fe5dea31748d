"""
Content Dedup - Deduplication Module

Finds near-duplicate content records with edit-distance similarity over
titles and content prefixes plus category and tag overlap, and proposes
merged records for confirmed pairs.

Components:
- similarity.py: Levenshtein distance and normalized string similarity
- detector.py: Weighted pairwise duplicate detection
- merger.py: Merge policy and merged record proposals
- deduplicator.py: Configured service with previews and statistics
"""

from .similarity import SimilarityCalculator, levenshtein_distance, string_similarity
from .detector import DuplicateDetector, DuplicateCandidate, detect_duplicates
from .merger import ContentMerger, MergePolicy, MergeResult, merge_content_items
from .deduplicator import ContentDeduplicator

__all__ = [
    'SimilarityCalculator', 'levenshtein_distance', 'string_similarity',
    'DuplicateDetector', 'DuplicateCandidate', 'detect_duplicates',
    'ContentMerger', 'MergePolicy', 'MergeResult', 'merge_content_items',
    'ContentDeduplicator'
]
