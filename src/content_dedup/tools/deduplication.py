"""
Deduplication Tools for the Content Dedup Server

Tool functions exposed over JSON-RPC. Each takes plain JSON arguments,
validates them into content records and delegates to the deduplication
service.
"""

import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from ..content.models import ContentRecord, parse_records
from ..deduplication import ContentDeduplicator, merge_content_items
from ..exceptions import ContentDedupError, RecordValidationError


def _parse_records(records: Any) -> List[ContentRecord]:
    if not isinstance(records, list):
        raise RecordValidationError("'records' must be a list of content records")
    try:
        return parse_records(records)
    except ValidationError as e:
        raise RecordValidationError(f"Invalid content record: {e.error_count()} validation errors",
                                    e.errors(include_url=False, include_context=False)) from e


def _parse_record(record: Any, field: str) -> ContentRecord:
    try:
        return ContentRecord.model_validate(record)
    except ValidationError as e:
        raise RecordValidationError(f"Invalid '{field}' record: {e.error_count()} validation errors",
                                    e.errors(include_url=False, include_context=False)) from e


def _error_result(action: str, error: ContentDedupError) -> dict:
    logging.warning(f"{action} failed: {error.message}")
    return {
        "success": False,
        "message": f"{action} failed: {error.message}",
        "error": error.message,
        "error_type": type(error).__name__,
        "details": error.details
    }


def detect_duplicates_tool(deduplicator: ContentDeduplicator, records: list,
                           threshold: Optional[float] = None, limit: Optional[int] = None) -> dict:
    """Find candidate duplicate pairs in the supplied records.

    Args:
        deduplicator: Instance of ContentDeduplicator
        records: List of content record objects
        threshold: Minimum aggregate similarity, configured default if omitted
        limit: Maximum number of pairs to return

    Returns:
        Dictionary with ranked candidate pairs and their reasons
    """
    try:
        parsed = _parse_records(records)
        candidates = deduplicator.find_duplicates(parsed, threshold)
    except ContentDedupError as e:
        return _error_result("Duplicate detection", e)

    shown = candidates[:limit] if limit else candidates
    return {
        "success": True,
        "message": f"Found {len(candidates)} potential duplicate pairs in {len(parsed)} records",
        "total_duplicates_found": len(candidates),
        "duplicates": [candidate.to_summary() for candidate in shown]
    }


def preview_duplicates_tool(deduplicator: ContentDeduplicator, records: list,
                            threshold: Optional[float] = None, limit: int = 10,
                            policy: Optional[dict] = None) -> dict:
    """Preview duplicate pairs together with the merged record each would yield.

    Args:
        deduplicator: Instance of ContentDeduplicator
        records: List of content record objects
        threshold: Minimum aggregate similarity, configured default if omitted
        limit: Maximum number of duplicate pairs to show
        policy: Merge policy options for the proposed merges

    Returns:
        Dictionary with duplicate preview results
    """
    try:
        result = deduplicator.preview_duplicates(_parse_records(records), threshold, policy)
    except ContentDedupError as e:
        return _error_result("Duplicate preview", e)

    duplicate_pairs = result.get("duplicate_pairs", [])
    duplicates = []
    for i, pair in enumerate(duplicate_pairs[:limit]):
        duplicates.append({
            "pair_id": i + 1,
            "similarity_score": round(pair["similarity"], 4),
            "reasons": pair["reasons"],
            "record_1": {"id": pair["item1_id"], "title": pair["item1_title"]},
            "record_2": {"id": pair["item2_id"], "title": pair["item2_title"]},
            "proposed_merge": pair["proposed_merge"]
        })

    return {
        "success": True,
        "message": f"Found {len(duplicate_pairs)} potential duplicates",
        "total_duplicates_found": len(duplicate_pairs),
        "duplicates_shown": len(duplicates),
        "duplicates": duplicates,
        "processing_time": result.get("processing_time", 0.0),
        "recommendation": (
            "Run deduplicate_records with dry_run=false to get merge proposals"
            if duplicates else
            "No duplicates found - library is clean"
        )
    }


def merge_content_items_tool(deduplicator: ContentDeduplicator, primary: dict, duplicate: dict,
                             policy: Optional[dict] = None) -> dict:
    """Merge two records into a proposed record without recording an audit entry.

    Args:
        deduplicator: Instance of ContentDeduplicator (supplies the default policy)
        primary: Record to keep
        duplicate: Record to fold in
        policy: Merge policy options

    Returns:
        Dictionary with the merged record fields
    """
    try:
        primary_record = _parse_record(primary, "primary")
        duplicate_record = _parse_record(duplicate, "duplicate")
        merge_policy = deduplicator.merger.resolve_policy(policy)
    except ContentDedupError as e:
        return _error_result("Merge", e)

    merged = merge_content_items(primary_record, duplicate_record, merge_policy)
    return {
        "success": True,
        "message": f"Merged '{duplicate_record.id}' into '{primary_record.id}'",
        "merged": merged.to_update()
    }


def merge_duplicate_pair_tool(deduplicator: ContentDeduplicator, records: list, primary_id: str,
                              duplicate_id: str, policy: Optional[dict] = None) -> dict:
    """Propose merging one record of the set into another, by id.

    Returns:
        Dictionary with the merge proposal (update for the primary, ids to delete)
    """
    try:
        proposal = deduplicator.merge_pair_by_id(_parse_records(records), primary_id, duplicate_id, policy)
    except ContentDedupError as e:
        return _error_result("Merge", e)

    return {
        "success": True,
        "message": f"Proposed merge of '{duplicate_id}' into '{primary_id}'",
        "proposal": proposal
    }


def deduplicate_records_tool(deduplicator: ContentDeduplicator, records: list,
                             threshold: Optional[float] = None, dry_run: bool = False,
                             policy: Optional[dict] = None) -> dict:
    """Detect duplicates and propose non-overlapping merges for the record set.

    Args:
        deduplicator: Instance of ContentDeduplicator
        records: List of content record objects
        threshold: Minimum aggregate similarity, configured default if omitted
        dry_run: If True, only analyze without proposing merges
        policy: Merge policy options

    Returns:
        Dictionary with deduplication results
    """
    try:
        result = deduplicator.deduplicate(_parse_records(records), threshold, dry_run, policy)
    except ContentDedupError as e:
        return _error_result("Deduplication", e)

    result["success"] = True
    return result


def get_deduplication_stats_tool(deduplicator: ContentDeduplicator) -> dict:
    """Get deduplication statistics.

    Args:
        deduplicator: Instance of ContentDeduplicator

    Returns:
        Dictionary with deduplication statistics
    """
    stats = deduplicator.get_deduplication_stats()
    return {
        "success": True,
        "message": "Deduplication statistics retrieved successfully",
        "stats": stats
    }
