import logging
from functools import partial
from typing import Optional

from fastapi import FastAPI

from content_dedup.config import Config
from content_dedup.deduplication import ContentDeduplicator, SimilarityCalculator
from content_dedup.server import create_app, setup_json_rpc_handler, get_tool_definitions
from content_dedup.tools import (
    detect_duplicates_tool, preview_duplicates_tool,
    merge_content_items_tool, merge_duplicate_pair_tool,
    deduplicate_records_tool, get_deduplication_stats_tool,
    compare_text_tool, get_similarity_stats_tool
)


def build_tool_registry(deduplicator: ContentDeduplicator, calculator: SimilarityCalculator) -> dict:
    """Bind tool functions to their service instances."""
    return {
        "detect_duplicates": partial(detect_duplicates_tool, deduplicator),
        "preview_duplicates": partial(preview_duplicates_tool, deduplicator),
        "merge_content_items": partial(merge_content_items_tool, deduplicator),
        "merge_duplicate_pair": partial(merge_duplicate_pair_tool, deduplicator),
        "deduplicate_records": partial(deduplicate_records_tool, deduplicator),
        "get_deduplication_stats": partial(get_deduplication_stats_tool, deduplicator),
        "compare_text": partial(compare_text_tool, calculator),
        "get_similarity_stats": partial(get_similarity_stats_tool, calculator),
    }


def main(config: Optional[Config] = None) -> FastAPI:
    """Initialize configuration, services and the FastAPI app."""
    if config is None:
        config = Config()

    deduplication_config = config.get_deduplication_config()
    deduplicator = ContentDeduplicator(deduplication_config)
    calculator = SimilarityCalculator(deduplicator.similarity_threshold)

    tool_registry = build_tool_registry(deduplicator, calculator)
    tool_definitions = get_tool_definitions()

    server_config = config.get_server_config()
    app = create_app(server_config)
    setup_json_rpc_handler(app, tool_registry, tool_definitions, server_config)

    logging.info(f"Content Dedup Server initialized with {len(tool_registry)} tools")
    return app


_global_app = None


def get_app() -> FastAPI:
    """Get or create the FastAPI app instance."""
    global _global_app
    if _global_app is None:
        _global_app = main()
    return _global_app


if __name__ == "__main__":
    import uvicorn

    config = Config()
    server_config = config.get_server_config()

    uvicorn.run(
        main(config),
        host=server_config.get('host', '127.0.0.1'),
        port=server_config.get('port', 8080)
    )
