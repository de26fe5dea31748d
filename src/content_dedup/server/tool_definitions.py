from typing import List, Dict, Any


CONTENT_TYPES = ["text", "code", "image", "video", "file", "link", "prompt", "script", "book"]

_RECORD_SCHEMA = {
    "type": "object",
    "description": "A content record with 'id', 'title', 'type' and optional 'content', 'category', 'tags', 'is_public', 'status'.",
    "properties": {
        "id": {"type": "string"},
        "title": {"type": "string"},
        "type": {"type": "string", "enum": CONTENT_TYPES},
        "content": {"type": ["string", "null"]},
        "category": {"type": ["string", "null"]},
        "tags": {"type": "array", "items": {"type": "string"}},
        "is_public": {"type": "boolean"},
        "status": {"type": ["string", "null"], "enum": ["active", "pending", "completed", None]}
    },
    "required": ["id", "title", "type"]
}

_RECORDS_SCHEMA = {
    "type": "array",
    "description": "The full set of content records to compare.",
    "items": _RECORD_SCHEMA
}

_THRESHOLD_SCHEMA = {
    "type": "number",
    "description": "Minimum aggregate similarity (0-1) for a pair to be reported. Defaults to the configured threshold (0.7).",
    "minimum": 0,
    "maximum": 1
}

_POLICY_SCHEMA = {
    "type": "object",
    "description": "Merge policy. 'keep_primary_title' (default true), 'combine_content' (default false), 'merge_tags' (default true), 'merge_categories' (accepted, currently no effect).",
    "properties": {
        "keep_primary_title": {"type": "boolean"},
        "combine_content": {"type": "boolean"},
        "merge_tags": {"type": "boolean"},
        "merge_categories": {"type": "boolean"}
    },
    "default": {}
}


def get_tool_definitions() -> List[Dict[str, Any]]:
    """Get MCP tool definitions for the server.

    Returns:
        List of tool definition dictionaries
    """
    return [
        {
            "name": "detect_duplicates",
            "description": "Finds candidate duplicate pairs among same-type content records using title and content similarity, shared category and shared tags. Results are ranked by similarity with a reason per matching signal.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "records": _RECORDS_SCHEMA,
                    "threshold": _THRESHOLD_SCHEMA,
                    "limit": {
                        "type": "integer",
                        "description": "Maximum number of pairs to return. Default: all."
                    }
                },
                "required": ["records"]
            }
        },
        {
            "name": "preview_duplicates",
            "description": "Previews duplicate pairs together with the merged record each pair would produce, without recording any merge.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "records": _RECORDS_SCHEMA,
                    "threshold": _THRESHOLD_SCHEMA,
                    "limit": {
                        "type": "integer",
                        "description": "Maximum number of duplicate pairs to show.",
                        "default": 10
                    },
                    "policy": _POLICY_SCHEMA
                },
                "required": ["records"]
            }
        },
        {
            "name": "merge_content_items",
            "description": "Merges a duplicate record into a primary record and returns the proposed merged fields (title, content, tags, category, type, is_public, status).",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "primary": _RECORD_SCHEMA,
                    "duplicate": _RECORD_SCHEMA,
                    "policy": _POLICY_SCHEMA
                },
                "required": ["primary", "duplicate"]
            }
        },
        {
            "name": "merge_duplicate_pair",
            "description": "Proposes merging one record of a set into another by id. Returns the update for the primary record and the ids to delete.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "records": _RECORDS_SCHEMA,
                    "primary_id": {
                        "type": "string",
                        "description": "Id of the record to keep."
                    },
                    "duplicate_id": {
                        "type": "string",
                        "description": "Id of the record to fold in and delete."
                    },
                    "policy": _POLICY_SCHEMA
                },
                "required": ["records", "primary_id", "duplicate_id"]
            }
        },
        {
            "name": "deduplicate_records",
            "description": "Detects duplicates and proposes non-overlapping merges for the whole record set, best pairs first.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "records": _RECORDS_SCHEMA,
                    "threshold": _THRESHOLD_SCHEMA,
                    "dry_run": {
                        "type": "boolean",
                        "description": "If true, only report duplicate pairs without proposing merges.",
                        "default": False
                    },
                    "policy": _POLICY_SCHEMA
                },
                "required": ["records"]
            }
        },
        {
            "name": "compare_text",
            "description": "Scores the similarity (0-1) of two strings with case- and whitespace-insensitive edit distance.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "text_a": {"type": "string"},
                    "text_b": {"type": "string"}
                },
                "required": ["text_a", "text_b"]
            }
        },
        {
            "name": "get_similarity_stats",
            "description": "Summarizes the pairwise similarity distribution (mean, max, min, std, potential duplicates) of a list of strings.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "texts": {
                        "type": "array",
                        "items": {"type": "string"}
                    }
                },
                "required": ["texts"]
            }
        },
        {
            "name": "get_deduplication_stats",
            "description": "Retrieves deduplication statistics: runs, records scanned, duplicates found and merges proposed.",
            "inputSchema": {
                "type": "object",
                "properties": {}
            }
        }
    ]
