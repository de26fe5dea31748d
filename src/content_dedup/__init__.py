from .config import Config
from .content import ContentRecord, ContentType, ContentStatus
from .deduplication import (
    ContentDeduplicator, DuplicateCandidate, MergePolicy, MergeResult,
    detect_duplicates, merge_content_items, string_similarity
)
from .server import create_app, setup_json_rpc_handler, get_tool_definitions

__version__ = "1.0.0"

__all__ = [
    'Config',
    'ContentRecord', 'ContentType', 'ContentStatus',
    'ContentDeduplicator', 'DuplicateCandidate', 'MergePolicy', 'MergeResult',
    'detect_duplicates', 'merge_content_items', 'string_similarity',
    'create_app', 'setup_json_rpc_handler', 'get_tool_definitions'
]
