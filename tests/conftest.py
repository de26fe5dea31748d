import itertools

import pytest

from content_dedup.content import ContentRecord


@pytest.fixture
def make_record():
    """Factory for content records with sensible defaults."""
    def _make(record_id: str, title: str, type: str = "text", **fields) -> ContentRecord:
        return ContentRecord(id=record_id, title=title, type=type, **fields)
    return _make


@pytest.fixture
def sequential_ids():
    """Deterministic merge id factory: merge-1, merge-2, ..."""
    counter = itertools.count(1)
    return lambda: f"merge-{next(counter)}"


@pytest.fixture
def sample_library():
    """A small library with one obvious duplicate pair and some near misses."""
    return [
        {"id": "n1", "title": "Project Plan", "type": "text",
         "content": "Milestones for the spring release", "category": "work", "tags": ["planning", "q2"]},
        {"id": "n2", "title": "Project Plann", "type": "text",
         "content": "Milestones for the spring release!", "category": "work", "tags": ["planning"]},
        {"id": "c1", "title": "Project Plan", "type": "code",
         "content": "def plan(): pass", "tags": ["python"]},
        {"id": "n3", "title": "Grocery list", "type": "text",
         "content": "eggs, milk, bread", "category": "home", "tags": []},
    ]
