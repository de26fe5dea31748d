"""
Duplicate Detection for Content Records

Compares every same-type pair of records and scores them with up to four
weighted signals: title similarity, content prefix similarity, shared
category and shared tags. Only signals that fire take part in the weighted
average, so a missing signal never drags the score down.
"""

import math
import time
import logging
from typing import List, Dict, Any, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from ..content.models import ContentRecord
from ..exceptions import ConfigurationError
from .similarity import string_similarity


DEFAULT_THRESHOLD = 0.7

# (weighted score, weight, reason)
Contribution = Tuple[float, float, str]


class DuplicateCandidate(BaseModel):
    """A pair of records flagged as possible duplicates."""
    item1: ContentRecord
    item2: ContentRecord
    similarity: float
    reasons: List[str] = Field(default_factory=list)

    def to_summary(self) -> Dict[str, Any]:
        return {
            'item1_id': self.item1.id,
            'item2_id': self.item2.id,
            'item1_title': self.item1.title,
            'item2_title': self.item2.title,
            'similarity': self.similarity,
            'reasons': list(self.reasons)
        }


def _percent(score: float) -> int:
    # Half-up rounding; round() would send 0.705 -> 70
    return int(math.floor(score * 100 + 0.5))


class DuplicateDetector:
    """Pairwise duplicate detector with configurable signal weights."""

    def __init__(self,
                 title_threshold: float = 0.7,
                 content_threshold: float = 0.65,
                 content_prefix_length: int = 200,
                 title_weight: float = 0.5,
                 content_weight: float = 0.5,
                 category_weight: float = 0.1,
                 tag_weight: float = 0.1):
        for name, value in (('title_threshold', title_threshold),
                            ('content_threshold', content_threshold)):
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be in [0.0, 1.0], got {value}")
        for name, value in (('title_weight', title_weight),
                            ('content_weight', content_weight),
                            ('category_weight', category_weight),
                            ('tag_weight', tag_weight)):
            if value <= 0:
                raise ConfigurationError(f"{name} must be positive, got {value}")
        if content_prefix_length < 1:
            raise ConfigurationError(
                f"content_prefix_length must be >= 1, got {content_prefix_length}")

        self.title_threshold = title_threshold
        self.content_threshold = content_threshold
        self.content_prefix_length = content_prefix_length
        self.title_weight = title_weight
        self.content_weight = content_weight
        self.category_weight = category_weight
        self.tag_weight = tag_weight

    @classmethod
    def from_config(cls, signal_config: Optional[dict]) -> 'DuplicateDetector':
        """Build a detector from the ``deduplication.signals`` config section."""
        signal_config = signal_config or {}
        try:
            return cls(
                title_threshold=float(signal_config.get('title_threshold', 0.7)),
                content_threshold=float(signal_config.get('content_threshold', 0.65)),
                content_prefix_length=int(signal_config.get('content_prefix_length', 200)),
                title_weight=float(signal_config.get('title_weight', 0.5)),
                content_weight=float(signal_config.get('content_weight', 0.5)),
                category_weight=float(signal_config.get('category_weight', 0.1)),
                tag_weight=float(signal_config.get('tag_weight', 0.1)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid signal configuration: {e}", signal_config)

    def _title_signal(self, item1: ContentRecord, item2: ContentRecord) -> Optional[Contribution]:
        similarity = string_similarity(item1.title, item2.title)
        if similarity > self.title_threshold:
            return (similarity * self.title_weight, self.title_weight,
                    f"Titles are {_percent(similarity)}% similar")
        return None

    def _content_signal(self, item1: ContentRecord, item2: ContentRecord) -> Optional[Contribution]:
        if not (item1.has_content() and item2.has_content()):
            return None
        prefix1 = item1.content[:self.content_prefix_length].lower()
        prefix2 = item2.content[:self.content_prefix_length].lower()
        similarity = string_similarity(prefix1, prefix2)
        if similarity > self.content_threshold:
            return (similarity * self.content_weight, self.content_weight,
                    f"Content is {_percent(similarity)}% similar")
        return None

    def _category_signal(self, item1: ContentRecord, item2: ContentRecord) -> Optional[Contribution]:
        if item1.has_category() and item1.category == item2.category:
            return (self.category_weight, self.category_weight, "Same category")
        return None

    def _tag_signal(self, item1: ContentRecord, item2: ContentRecord) -> Optional[Contribution]:
        common = set(item1.tags) & set(item2.tags)
        if not common:
            return None
        count = len(common)
        suffix = "s" if count > 1 else ""
        return (self.tag_weight, self.tag_weight, f"{count} common tag{suffix}")

    def score_pair(self, item1: ContentRecord, item2: ContentRecord) -> Tuple[float, List[str]]:
        """Score a single pair of records.

        Cross-type pairs are not filtered here; see ``detect_duplicates``.

        Returns:
            Tuple of (aggregate score clamped to 1, reasons in signal order)
        """
        contributions: List[Contribution] = []
        for signal in (self._title_signal, self._content_signal,
                       self._category_signal, self._tag_signal):
            contribution = signal(item1, item2)
            if contribution is not None:
                contributions.append(contribution)

        total_weight = sum(weight for _, weight, _ in contributions)
        if total_weight == 0:
            return 0.0, []

        score = sum(weighted for weighted, _, _ in contributions) / total_weight
        return min(score, 1.0), [reason for _, _, reason in contributions]

    def detect_duplicates(self, records: Sequence[ContentRecord],
                          threshold: float = DEFAULT_THRESHOLD) -> List[DuplicateCandidate]:
        """Find candidate duplicate pairs, highest similarity first.

        Args:
            records: Records to compare; ``id`` is the identity key
            threshold: Minimum aggregate score for a pair to be reported

        Returns:
            Candidates sorted by descending similarity, ties in pair order
        """
        start_time = time.time()
        candidates = []
        pairs_compared = 0

        for i in range(len(records)):
            for j in range(i + 1, len(records)):
                item1 = records[i]
                item2 = records[j]
                if item1.type != item2.type:
                    continue

                pairs_compared += 1
                score, reasons = self.score_pair(item1, item2)
                if reasons and score >= threshold:
                    candidates.append(DuplicateCandidate(
                        item1=item1,
                        item2=item2,
                        similarity=score,
                        reasons=reasons
                    ))

        candidates.sort(key=lambda candidate: candidate.similarity, reverse=True)

        logging.info(f"Duplicate detection completed: {len(candidates)} candidates from "
                     f"{pairs_compared} same-type pairs over {len(records)} records "
                     f"in {time.time() - start_time:.3f}s")
        return candidates


_default_detector = DuplicateDetector()


def detect_duplicates(records: Sequence[ContentRecord],
                      threshold: float = DEFAULT_THRESHOLD) -> List[DuplicateCandidate]:
    """Detect duplicates with the default signal weights and thresholds."""
    return _default_detector.detect_duplicates(records, threshold)
