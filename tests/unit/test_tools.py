import pytest

from content_dedup.deduplication import ContentDeduplicator, SimilarityCalculator
from content_dedup.tools import (
    detect_duplicates_tool, preview_duplicates_tool,
    merge_content_items_tool, merge_duplicate_pair_tool,
    deduplicate_records_tool, get_deduplication_stats_tool,
    compare_text_tool, get_similarity_stats_tool
)


@pytest.fixture
def deduplicator(sequential_ids):
    return ContentDeduplicator({'similarity_threshold': 0.7}, id_factory=sequential_ids)


@pytest.fixture
def calculator():
    return SimilarityCalculator(similarity_threshold=0.7)


class TestDetectDuplicatesTool:

    def test_success(self, deduplicator, sample_library):
        result = detect_duplicates_tool(deduplicator, sample_library)

        assert result['success'] is True
        assert result['total_duplicates_found'] == 1
        assert result['duplicates'][0]['item1_id'] == 'n1'
        assert result['duplicates'][0]['item2_id'] == 'n2'

    def test_limit(self, deduplicator):
        records = [{"id": str(i), "title": "Same title", "type": "text"} for i in range(3)]

        result = detect_duplicates_tool(deduplicator, records, limit=1)

        assert result['total_duplicates_found'] == 3
        assert len(result['duplicates']) == 1

    def test_records_must_be_a_list(self, deduplicator):
        result = detect_duplicates_tool(deduplicator, {"id": "a"})

        assert result['success'] is False
        assert result['error_type'] == 'RecordValidationError'

    def test_invalid_record(self, deduplicator):
        result = detect_duplicates_tool(deduplicator, [{"id": "a", "title": "", "type": "text"}])

        assert result['success'] is False
        assert result['error_type'] == 'RecordValidationError'
        assert result['details']['errors'][0]['loc'] == ('title',)

    def test_unknown_type_rejected(self, deduplicator):
        result = detect_duplicates_tool(deduplicator, [{"id": "a", "title": "A", "type": "hologram"}])
        assert result['success'] is False

    def test_unknown_fields_ignored(self, deduplicator):
        records = [
            {"id": "a", "title": "Same", "type": "text", "favorite": True},
            {"id": "b", "title": "Same", "type": "text", "favorite": False},
        ]
        assert detect_duplicates_tool(deduplicator, records)['total_duplicates_found'] == 1


class TestPreviewDuplicatesTool:

    def test_preview(self, deduplicator, sample_library):
        result = preview_duplicates_tool(deduplicator, sample_library)

        assert result['success'] is True
        assert result['duplicates_shown'] == 1
        pair = result['duplicates'][0]
        assert pair['pair_id'] == 1
        assert pair['record_1'] == {'id': 'n1', 'title': 'Project Plan'}
        assert pair['record_2'] == {'id': 'n2', 'title': 'Project Plann'}
        assert pair['proposed_merge']['category'] == 'work'
        assert 'dry_run=false' in result['recommendation']

    def test_clean_library(self, deduplicator, sample_library):
        result = preview_duplicates_tool(deduplicator, sample_library, threshold=0.99)
        assert result['duplicates'] == []
        assert result['recommendation'] == "No duplicates found - library is clean"

    def test_invalid_policy(self, deduplicator, sample_library):
        result = preview_duplicates_tool(deduplicator, sample_library, policy={'merge_tags': 'often'})
        assert result['success'] is False
        assert result['error_type'] == 'PolicyValidationError'


class TestMergeTools:

    def test_merge_content_items(self, deduplicator, sample_library):
        result = merge_content_items_tool(deduplicator, sample_library[0], sample_library[1],
                                          policy={'combineContent': True})

        assert result['success'] is True
        assert result['merged']['title'] == 'Project Plan'
        assert '\n\n---\n\n' in result['merged']['content']
        assert deduplicator.merger.merge_history == []

    def test_merge_content_items_invalid_record(self, deduplicator, sample_library):
        result = merge_content_items_tool(deduplicator, sample_library[0], {"id": "x"})
        assert result['success'] is False
        assert "'duplicate'" in result['error']

    def test_merge_duplicate_pair(self, deduplicator, sample_library):
        result = merge_duplicate_pair_tool(deduplicator, sample_library, 'n1', 'n2')

        assert result['success'] is True
        assert result['proposal']['merge_id'] == 'merge-1'
        assert result['proposal']['delete_ids'] == ['n2']

    def test_merge_duplicate_pair_missing_record(self, deduplicator, sample_library):
        result = merge_duplicate_pair_tool(deduplicator, sample_library, 'n1', 'zzz')

        assert result['success'] is False
        assert result['error_type'] == 'RecordNotFoundError'
        assert result['details']['record_id'] == 'zzz'


class TestDeduplicateRecordsTool:

    def test_deduplicate(self, deduplicator, sample_library):
        result = deduplicate_records_tool(deduplicator, sample_library)

        assert result['success'] is True
        assert result['delete_ids'] == ['n2']

    def test_dry_run(self, deduplicator, sample_library):
        result = deduplicate_records_tool(deduplicator, sample_library, dry_run=True)
        assert result['success'] is True
        assert result['dry_run'] is True
        assert 'merge_proposals' not in result

    def test_stats_tool(self, deduplicator, sample_library):
        deduplicate_records_tool(deduplicator, sample_library)

        result = get_deduplication_stats_tool(deduplicator)

        assert result['success'] is True
        assert result['stats']['total_runs'] == 1


class TestSimilarityTools:

    def test_compare_text(self, calculator):
        result = compare_text_tool(calculator, "Project Plan", "project plann")

        assert result['success'] is True
        assert result['similarity'] == pytest.approx(12 / 13)
        assert result['edit_distance'] == 1
        assert result['is_potential_duplicate'] is True

    def test_compare_text_rejects_non_strings(self, calculator):
        assert compare_text_tool(calculator, "a", 3)['success'] is False

    def test_similarity_stats(self, calculator):
        result = get_similarity_stats_tool(calculator, ["Project Plan", "Project Plann", "Grocery list"])

        assert result['success'] is True
        assert result['stats']['total_texts'] == 3
        assert result['stats']['similarity_pairs'] == 3
        assert result['stats']['potential_duplicates'] == 1

    def test_similarity_stats_rejects_bad_input(self, calculator):
        assert get_similarity_stats_tool(calculator, ["a", None])['success'] is False
