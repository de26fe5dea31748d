"""
Main Deduplication Service for Content Records

Wraps the detector and merger with configuration, dry-run previews, batch
merge planning and running statistics. Records are always supplied by the
caller; nothing is loaded or persisted here.
"""

import time
import logging
from typing import List, Dict, Any, Optional, Sequence

from pydantic import ValidationError

from ..content.models import ContentRecord
from ..exceptions import ConfigurationError, DeduplicationError, RecordNotFoundError
from .detector import DuplicateDetector, DuplicateCandidate, DEFAULT_THRESHOLD
from .merger import ContentMerger, MergePolicy, merge_content_items


class ContentDeduplicator:
    """Deduplication service for an in-memory content library."""

    def __init__(self, deduplication_config: Optional[dict] = None, id_factory=None):
        """Initialize deduplication service.

        Args:
            deduplication_config: Configuration dict for deduplication settings
            id_factory: Optional callable producing merge record identifiers
        """
        self.config = deduplication_config or {}
        self.enabled = self.config.get('enabled', True)
        self.similarity_threshold = float(self.config.get('similarity_threshold', DEFAULT_THRESHOLD))
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ConfigurationError(
                f"similarity_threshold must be in [0.0, 1.0], got {self.similarity_threshold}")

        self.detector = DuplicateDetector.from_config(self.config.get('signals'))
        try:
            default_policy = MergePolicy.model_validate(self.config.get('merge_policy') or {})
        except ValidationError as e:
            raise ConfigurationError(f"Invalid merge_policy configuration: {e.error_count()} errors",
                                     {'merge_policy': self.config.get('merge_policy')}) from e
        self.merger = ContentMerger(default_policy, id_factory=id_factory)

        self.stats = {
            'total_runs': 0,
            'total_records_scanned': 0,
            'total_duplicates_found': 0,
            'total_merges_proposed': 0,
            'last_deduplication': None,
            'processing_time_total': 0.0
        }

        logging.info(f"ContentDeduplicator initialized with threshold {self.similarity_threshold}")

    def _threshold(self, threshold: Optional[float]) -> float:
        return self.similarity_threshold if threshold is None else threshold

    def find_duplicates(self, records: Sequence[ContentRecord],
                        threshold: Optional[float] = None) -> List[DuplicateCandidate]:
        """Detect duplicate candidates using the configured detector."""
        if not self.enabled:
            logging.debug("Deduplication disabled, skipping detection")
            return []
        return self.detector.detect_duplicates(records, self._threshold(threshold))

    def preview_duplicates(self, records: Sequence[ContentRecord], threshold: Optional[float] = None,
                           policy: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Report candidate pairs and the merge each would produce, without recording anything.

        Args:
            records: Records to scan
            threshold: Optional override of the configured threshold
            policy: Policy options overriding the configured defaults

        Returns:
            Dictionary with the duplicate analysis
        """
        start_time = time.time()
        merge_policy = self.merger.resolve_policy(policy)
        candidates = self.find_duplicates(records, threshold)

        duplicate_pairs = []
        for candidate in candidates:
            summary = candidate.to_summary()
            summary['proposed_merge'] = merge_content_items(
                candidate.item1, candidate.item2, merge_policy
            ).to_update()
            duplicate_pairs.append(summary)

        return {
            'dry_run': True,
            'threshold': self._threshold(threshold),
            'documents_processed': len(records),
            'duplicates_found': len(candidates),
            'duplicate_pairs': duplicate_pairs,
            'processing_time': time.time() - start_time,
            'message': f'DRY RUN: Found {len(candidates)} duplicate pairs'
        }

    def merge_records(self, primary: ContentRecord, duplicate: ContentRecord,
                      policy: Optional[Dict[str, Any]] = None,
                      similarity: Optional[float] = None) -> Dict[str, Any]:
        """Propose merging ``duplicate`` into ``primary``.

        Args:
            primary: Record to keep
            duplicate: Record to fold in and delete
            policy: Policy options overriding the configured defaults
            similarity: Score of the pair, if known, for the audit trail

        Returns:
            Merge proposal dictionary
        """
        proposal = self.merger.merge(primary, duplicate, similarity, self.merger.resolve_policy(policy))
        self.stats['total_merges_proposed'] += 1
        return proposal

    def merge_pair_by_id(self, records: Sequence[ContentRecord], primary_id: str,
                         duplicate_id: str, policy: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Look up two records by id and propose merging them."""
        if primary_id == duplicate_id:
            raise DeduplicationError(f"Cannot merge record '{primary_id}' into itself",
                                     {'record_id': primary_id})

        by_id = {record.id: record for record in records}
        for record_id in (primary_id, duplicate_id):
            if record_id not in by_id:
                raise RecordNotFoundError(record_id, list(by_id.keys()))

        primary = by_id[primary_id]
        duplicate = by_id[duplicate_id]
        similarity, _ = self.detector.score_pair(primary, duplicate)
        return self.merge_records(primary, duplicate, policy, similarity)

    def deduplicate(self, records: Sequence[ContentRecord], threshold: Optional[float] = None,
                    dry_run: bool = False, policy: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Detect duplicates and plan non-overlapping merges.

        Args:
            records: Records to deduplicate
            threshold: Optional override of the configured threshold
            dry_run: If True, only analyze without proposing merges
            policy: Policy options overriding the configured defaults

        Returns:
            Dictionary with deduplication results and statistics
        """
        if not self.enabled:
            return {'message': 'Deduplication disabled', 'duplicates_found': 0}

        if dry_run:
            return self.preview_duplicates(records, threshold, policy)

        start_time = time.time()

        if len(records) < 2:
            return {
                'message': 'Not enough records for deduplication',
                'duplicates_found': 0,
                'documents_processed': len(records)
            }

        candidates = self.find_duplicates(records, threshold)
        proposals = self.merger.plan_batch_merges(candidates, self.merger.resolve_policy(policy))
        processing_time = time.time() - start_time

        self._update_stats(len(records), len(candidates), len(proposals), processing_time)

        if not candidates:
            message = 'No duplicates found'
        else:
            message = f'Proposed {len(proposals)} merges from {len(candidates)} duplicate pairs'

        return {
            'dry_run': False,
            'duplicates_found': len(candidates),
            'documents_processed': len(records),
            'merge_proposals': proposals,
            'delete_ids': [record_id for proposal in proposals for record_id in proposal['delete_ids']],
            'processing_time': processing_time,
            'message': message
        }

    def _update_stats(self, records_scanned: int, duplicates_found: int,
                      merges_proposed: int, processing_time: float) -> None:
        self.stats['total_runs'] += 1
        self.stats['total_records_scanned'] += records_scanned
        self.stats['total_duplicates_found'] += duplicates_found
        self.stats['total_merges_proposed'] += merges_proposed
        self.stats['last_deduplication'] = time.time()
        self.stats['processing_time_total'] += processing_time

    def get_deduplication_stats(self) -> Dict[str, Any]:
        """Get deduplication statistics and current settings."""
        current_stats = self.stats.copy()
        current_stats.update({
            'enabled': self.enabled,
            'similarity_threshold': self.similarity_threshold,
            'merge_policy': self.merger.default_policy.model_dump(),
            'merger_stats': self.merger.get_merge_statistics(),
            'last_check': time.time()
        })
        return current_stats
