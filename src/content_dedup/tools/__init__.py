# --- Deduplication Tools ---
from .deduplication import (
    detect_duplicates_tool, preview_duplicates_tool,
    merge_content_items_tool, merge_duplicate_pair_tool,
    deduplicate_records_tool, get_deduplication_stats_tool
)

# --- Similarity Tools ---
from .similarity import compare_text_tool, get_similarity_stats_tool

__all__ = [
    'detect_duplicates_tool', 'preview_duplicates_tool',
    'merge_content_items_tool', 'merge_duplicate_pair_tool',
    'deduplicate_records_tool', 'get_deduplication_stats_tool',
    'compare_text_tool', 'get_similarity_stats_tool'
]
