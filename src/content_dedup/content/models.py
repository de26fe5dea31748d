"""
Content record model shared by the detector, the merger and the tool layer.

Records are owned by the caller's persistence layer; this package only reads
them. Optional text fields count as absent when they are None or empty.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentType(str, Enum):
    """Closed set of content kinds a record can have."""
    TEXT = "text"
    CODE = "code"
    IMAGE = "image"
    VIDEO = "video"
    FILE = "file"
    LINK = "link"
    PROMPT = "prompt"
    SCRIPT = "script"
    BOOK = "book"


class ContentStatus(str, Enum):
    """Workflow status carried through merges untouched."""
    ACTIVE = "active"
    PENDING = "pending"
    COMPLETED = "completed"


class ContentRecord(BaseModel):
    """A single item of the content library."""
    model_config = ConfigDict(extra='ignore')

    id: str
    title: str = Field(min_length=1)
    type: ContentType
    content: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_public: bool = False
    status: Optional[ContentStatus] = None

    # Passthrough fields owned by the persistence layer
    user_id: Optional[str] = None
    file_url: Optional[str] = None
    file_size: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    word_count: Optional[int] = None
    uploader_name: Optional[str] = None
    auto_delete_at: Optional[str] = None
    auto_delete_enabled: Optional[bool] = None

    @field_validator('tags', mode='before')
    @classmethod
    def _none_tags_to_empty(cls, value):
        return [] if value is None else value

    def has_content(self) -> bool:
        return bool(self.content)

    def has_category(self) -> bool:
        return bool(self.category)


def parse_records(raw_records: List[dict]) -> List[ContentRecord]:
    """Validate a list of plain dictionaries into ContentRecord objects."""
    return [ContentRecord.model_validate(raw) for raw in raw_records]
