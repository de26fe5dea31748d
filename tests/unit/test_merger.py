import json

import pytest

from content_dedup.deduplication import (
    ContentMerger, MergePolicy, detect_duplicates, merge_content_items
)
from content_dedup.deduplication.merger import CONTENT_SEPARATOR
from content_dedup.exceptions import PolicyValidationError


@pytest.fixture
def primary(make_record):
    return make_record("p", "Project Plan", content="Spring milestones", category="work",
                       tags=["planning", "q2"], is_public=True, status="active")


@pytest.fixture
def duplicate(make_record):
    return make_record("d", "Project Plann", content="Spring milestones, draft", category="archive",
                       tags=["q2", "draft"], is_public=False, status="pending")


class TestMergeContentItems:

    def test_default_policy(self, primary, duplicate):
        merged = merge_content_items(primary, duplicate)

        assert merged.title == "Project Plan"
        assert merged.content == "Spring milestones"
        assert merged.tags == ["planning", "q2", "draft"]
        assert merged.category == "work"
        assert merged.type.value == "text"
        assert merged.is_public is True
        assert merged.status.value == "active"

    def test_duplicate_title(self, primary, duplicate):
        merged = merge_content_items(primary, duplicate, MergePolicy(keep_primary_title=False))
        assert merged.title == "Project Plann"

    def test_combine_content(self, primary, duplicate):
        merged = merge_content_items(primary, duplicate, MergePolicy(combine_content=True))
        assert merged.content == "Spring milestones" + CONTENT_SEPARATOR + "Spring milestones, draft"
        assert CONTENT_SEPARATOR == "\n\n---\n\n"

    def test_combine_content_with_empty_primary(self, make_record, duplicate):
        primary = make_record("p", "Project Plan", content="")
        merged = merge_content_items(primary, duplicate, MergePolicy(combine_content=True))
        assert merged.content == "Spring milestones, draft"

    def test_content_falls_back_to_duplicate(self, make_record, duplicate):
        primary = make_record("p", "Project Plan")
        assert merge_content_items(primary, duplicate).content == "Spring milestones, draft"

    def test_content_absent_on_both(self, make_record):
        merged = merge_content_items(make_record("p", "A"), make_record("d", "B", content=""))
        assert merged.content is None

    def test_tags_without_merging(self, primary, duplicate):
        merged = merge_content_items(primary, duplicate, MergePolicy(merge_tags=False))
        assert merged.tags == ["planning", "q2"]

    def test_tags_without_merging_fall_back_to_duplicate(self, make_record, duplicate):
        primary = make_record("p", "Project Plan", tags=[])
        merged = merge_content_items(primary, duplicate, MergePolicy(merge_tags=False))
        assert merged.tags == ["q2", "draft"]

    def test_tag_union_removes_repeats(self, make_record):
        merged = merge_content_items(
            make_record("p", "A", tags=["x", "y", "x"]),
            make_record("d", "B", tags=["y", "z"])
        )
        assert merged.tags == ["x", "y", "z"]

    def test_category_falls_back_to_duplicate(self, make_record, duplicate):
        merged = merge_content_items(make_record("p", "Project Plan"), duplicate)
        assert merged.category == "archive"

    def test_merge_categories_flag_has_no_effect(self, primary, duplicate):
        with_flag = merge_content_items(primary, duplicate, MergePolicy(merge_categories=True))
        without_flag = merge_content_items(primary, duplicate, MergePolicy(merge_categories=False))
        assert with_flag == without_flag

    def test_inputs_unchanged(self, primary, duplicate):
        merge_content_items(primary, duplicate, MergePolicy(combine_content=True))
        assert primary.tags == ["planning", "q2"]
        assert duplicate.content == "Spring milestones, draft"

    def test_to_update_is_plain_json(self, primary, duplicate):
        update = merge_content_items(primary, duplicate).to_update()
        assert update == {
            'title': 'Project Plan',
            'content': 'Spring milestones',
            'tags': ['planning', 'q2', 'draft'],
            'category': 'work',
            'type': 'text',
            'is_public': True,
            'status': 'active'
        }


class TestMergePolicy:

    def test_defaults(self):
        policy = MergePolicy()
        assert policy.keep_primary_title is True
        assert policy.combine_content is False
        assert policy.merge_tags is True
        assert policy.merge_categories is True

    def test_camel_case_aliases(self):
        policy = MergePolicy.model_validate({'keepPrimaryTitle': False, 'combineContent': True})
        assert policy.keep_primary_title is False
        assert policy.combine_content is True


class TestContentMerger:

    def test_resolve_policy_overlays_defaults(self):
        merger = ContentMerger(MergePolicy(combine_content=True))

        policy = merger.resolve_policy({'merge_tags': False})

        assert policy.combine_content is True
        assert policy.merge_tags is False

    def test_resolve_policy_without_overrides(self):
        default = MergePolicy(keep_primary_title=False)
        assert ContentMerger(default).resolve_policy(None) is default

    def test_resolve_policy_rejects_invalid_options(self):
        with pytest.raises(PolicyValidationError) as exc_info:
            ContentMerger().resolve_policy({'merge_tags': 'sometimes'})
        assert exc_info.value.errors

    def test_merge_proposal(self, primary, duplicate, sequential_ids):
        merger = ContentMerger(id_factory=sequential_ids)

        proposal = merger.merge(primary, duplicate, similarity=0.9)

        assert proposal['merge_id'] == 'merge-1'
        assert proposal['primary_id'] == 'p'
        assert proposal['duplicate_id'] == 'd'
        assert proposal['similarity'] == 0.9
        assert proposal['delete_ids'] == ['d']
        assert proposal['update']['tags'] == ['planning', 'q2', 'draft']
        assert len(merger.merge_history) == 1

    def test_merge_ids_are_unique(self, primary, duplicate):
        merger = ContentMerger()
        first = merger.merge(primary, duplicate)
        second = merger.merge(primary, duplicate)
        assert first['merge_id'] != second['merge_id']

    def test_plan_batch_merges_never_reuses_a_record(self, make_record, sequential_ids):
        records = [make_record(record_id, "Project Plan") for record_id in ("a", "b", "c")]
        candidates = detect_duplicates(records)
        merger = ContentMerger(id_factory=sequential_ids)

        proposals = merger.plan_batch_merges(candidates)

        assert len(candidates) == 3
        assert len(proposals) == 1
        assert proposals[0]['primary_id'] == 'a'
        assert proposals[0]['delete_ids'] == ['b']

    def test_plan_batch_merges_empty(self):
        assert ContentMerger().plan_batch_merges([]) == []

    def test_merge_statistics(self, primary, duplicate):
        merger = ContentMerger()
        assert merger.get_merge_statistics()['total_merges'] == 0

        merger.merge(primary, duplicate, similarity=0.8)
        merger.merge(primary, duplicate, similarity=1.0)
        merger.merge(primary, duplicate)
        stats = merger.get_merge_statistics()

        assert stats['total_merges'] == 3
        assert stats['average_similarity'] == pytest.approx(0.9)
        assert stats['max_similarity'] == 1.0
        assert stats['min_similarity'] == 0.8
        assert stats['recent_merges'] == 3

    def test_export_merge_history(self, primary, duplicate, sequential_ids, tmp_path):
        merger = ContentMerger(id_factory=sequential_ids)
        merger.merge(primary, duplicate, similarity=0.75)
        export_path = tmp_path / "history.json"

        merger.export_merge_history(str(export_path))

        exported = json.loads(export_path.read_text())
        assert exported['merge_history'][0]['merge_id'] == 'merge-1'
        assert exported['statistics']['total_merges'] == 1
