"""
Content Merger for Deduplication

Builds a merged record proposal from a primary record and its duplicate
according to a merge policy, and keeps an audit trail of proposed merges.
The merger never writes anything back; callers apply the proposal.
"""

import time
import json
import uuid
import logging
from typing import Dict, Any, List, Optional, Callable, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..content.models import ContentRecord, ContentType, ContentStatus
from ..exceptions import PolicyValidationError


CONTENT_SEPARATOR = "\n\n---\n\n"


class MergePolicy(BaseModel):
    """Controls which fields are combined when merging two records.

    ``merge_categories`` is accepted for compatibility but does not change
    the outcome: the primary category is kept, else the duplicate's.
    """
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    keep_primary_title: bool = Field(True, alias='keepPrimaryTitle')
    combine_content: bool = Field(False, alias='combineContent')
    merge_tags: bool = Field(True, alias='mergeTags')
    merge_categories: bool = Field(True, alias='mergeCategories')


class MergeResult(BaseModel):
    """Partial record holding only the fields decided by a merge."""
    title: str
    content: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    category: Optional[str] = None
    type: ContentType
    is_public: bool = False
    status: Optional[ContentStatus] = None

    def to_update(self) -> Dict[str, Any]:
        """Plain dict suitable for a record update call."""
        return self.model_dump(mode='json')


def merge_content_items(primary: ContentRecord, duplicate: ContentRecord,
                        policy: Optional[MergePolicy] = None) -> MergeResult:
    """Merge two records into a single proposed record.

    Args:
        primary: Record whose identity and passthrough fields are kept
        duplicate: Record being folded into the primary
        policy: Merge options, defaults when omitted

    Returns:
        MergeResult with title, content, tags, category, type, is_public, status
    """
    if policy is None:
        policy = MergePolicy()

    title = primary.title if policy.keep_primary_title else duplicate.title

    if policy.combine_content and primary.content and duplicate.content:
        content = f"{primary.content}{CONTENT_SEPARATOR}{duplicate.content}"
    else:
        content = primary.content or duplicate.content or None

    if policy.merge_tags and primary.tags is not None and duplicate.tags is not None:
        tags = list(dict.fromkeys(primary.tags + duplicate.tags))
    else:
        tags = list(primary.tags or duplicate.tags or [])

    return MergeResult(
        title=title,
        content=content,
        tags=tags,
        category=primary.category or duplicate.category or None,
        type=primary.type,
        is_public=primary.is_public,
        status=primary.status
    )


def _default_merge_id() -> str:
    return uuid.uuid4().hex


class ContentMerger:
    """Produces merge proposals and records an audit trail of them."""

    def __init__(self, default_policy: Optional[MergePolicy] = None,
                 id_factory: Optional[Callable[[], str]] = None) -> None:
        """Initialize content merger.

        Args:
            default_policy: Policy used when a merge call does not pass one
            id_factory: Callable producing identifiers for merge records
        """
        self.default_policy = default_policy or MergePolicy()
        self.id_factory = id_factory or _default_merge_id
        self.merge_history: List[Dict[str, Any]] = []

    def resolve_policy(self, overrides: Optional[Dict[str, Any]] = None) -> MergePolicy:
        """Overlay policy options on top of the default policy.

        Raises:
            PolicyValidationError: If the overrides are not a valid policy
        """
        if not overrides:
            return self.default_policy
        try:
            requested = MergePolicy.model_validate(overrides)
        except ValidationError as e:
            raise PolicyValidationError(
                f"Invalid merge policy: {e.error_count()} validation errors",
                e.errors(include_url=False, include_context=False)
            ) from e
        base = self.default_policy.model_dump()
        base.update(requested.model_dump(exclude_unset=True))
        return MergePolicy(**base)

    def merge(self, primary: ContentRecord, duplicate: ContentRecord,
              similarity: Optional[float] = None,
              policy: Optional[MergePolicy] = None) -> Dict[str, Any]:
        """Create a merge proposal for one pair and record it.

        Returns:
            Proposal with the update for the primary record and the ids to delete
        """
        result = merge_content_items(primary, duplicate, policy or self.default_policy)

        merge_record = {
            'merge_id': self.id_factory(),
            'timestamp': time.time(),
            'primary_id': primary.id,
            'duplicate_id': duplicate.id,
            'similarity_score': similarity
        }
        self.merge_history.append(merge_record)

        logging.info(f"Proposed merge of '{duplicate.id}' into '{primary.id}'")

        return {
            'merge_id': merge_record['merge_id'],
            'primary_id': primary.id,
            'duplicate_id': duplicate.id,
            'similarity': similarity,
            'update': result.to_update(),
            'delete_ids': [duplicate.id]
        }

    def plan_batch_merges(self, candidates: Sequence[Any],
                          policy: Optional[MergePolicy] = None) -> List[Dict[str, Any]]:
        """Propose merges for ranked candidates without reusing a record.

        The first record of each candidate is the primary. A candidate is
        skipped when either record already appears in an earlier proposal.

        Args:
            candidates: DuplicateCandidate objects, best first

        Returns:
            List of merge proposals
        """
        if not candidates:
            return []

        proposals = []
        processed_ids = set()

        for candidate in candidates:
            primary, duplicate = candidate.item1, candidate.item2
            if primary.id in processed_ids or duplicate.id in processed_ids:
                continue

            proposals.append(self.merge(primary, duplicate, candidate.similarity, policy))
            processed_ids.add(primary.id)
            processed_ids.add(duplicate.id)

        logging.info(f"Batch merge planning completed: {len(proposals)} proposals "
                     f"from {len(candidates)} candidate pairs")
        return proposals

    def get_merge_statistics(self) -> Dict[str, Any]:
        """Get statistics about merges proposed so far."""
        similarities = [record['similarity_score'] for record in self.merge_history
                        if record['similarity_score'] is not None]
        if not self.merge_history:
            return {
                'total_merges': 0,
                'average_similarity': 0.0,
                'recent_merges': 0
            }

        recent_cutoff = time.time() - 86400
        recent_merges = [r for r in self.merge_history if r['timestamp'] > recent_cutoff]

        return {
            'total_merges': len(self.merge_history),
            'average_similarity': sum(similarities) / len(similarities) if similarities else 0.0,
            'max_similarity': max(similarities) if similarities else 0.0,
            'min_similarity': min(similarities) if similarities else 0.0,
            'recent_merges': len(recent_merges),
            'first_merge': self.merge_history[0]['timestamp'],
            'last_merge': self.merge_history[-1]['timestamp']
        }

    def export_merge_history(self, filepath: str) -> None:
        """Export merge history to a JSON file for audit purposes.

        Args:
            filepath: Path to save merge history
        """
        with open(filepath, 'w') as f:
            json.dump({
                'merge_history': self.merge_history,
                'statistics': self.get_merge_statistics(),
                'exported_at': time.time()
            }, f, indent=2)
        logging.info(f"Merge history exported to {filepath}")
