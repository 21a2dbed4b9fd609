from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Literal, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CategoryInfo(NamedTuple):
    glyph: str
    color: str
    description: str


class Category(str, Enum):
    PROJECTS = "PROJECTS"
    CAREER = "CAREER"
    HEALTH = "HEALTH"
    RELATIONSHIPS = "RELATIONSHIPS"
    FINANCES = "FINANCES"
    LEARNING = "LEARNING"
    RECREATION = "RECREATION"
    ENVIRONMENT = "ENVIRONMENT"
    RESOURCES = "RESOURCES"
    ARCHIVE = "ARCHIVE"

    @property
    def info(self) -> CategoryInfo:
        return CATEGORY_INFO[self]

    @property
    def glyph(self) -> str:
        return self.info.glyph

    @property
    def color(self) -> str:
        return self.info.color

    @property
    def description(self) -> str:
        return self.info.description

    @classmethod
    def parse(cls, text: str) -> Optional["Category"]:
        """Exact, case-insensitive label match after trimming. None if unknown."""
        label = (text or "").strip().upper()
        return cls.__members__.get(label)


CATEGORY_INFO: Dict[Category, CategoryInfo] = {
    Category.PROJECTS: CategoryInfo("📋", "#ff6b6b", "Active work with deadlines"),
    Category.CAREER: CategoryInfo("💼", "#4ecdc4", "Professional growth & work"),
    Category.HEALTH: CategoryInfo("🏃‍♂️", "#45b7d1", "Physical & mental wellness"),
    Category.RELATIONSHIPS: CategoryInfo("❤️", "#f9ca24", "Family, friends, romance"),
    Category.FINANCES: CategoryInfo("💰", "#6c5ce7", "Money, investing, budgeting"),
    Category.LEARNING: CategoryInfo("📚", "#a29bfe", "Education, skills, growth"),
    Category.RECREATION: CategoryInfo("🎉", "#fd79a8", "Hobbies, fun, entertainment"),
    Category.ENVIRONMENT: CategoryInfo("🏠", "#00b894", "Home, workspace, surroundings"),
    Category.RESOURCES: CategoryInfo("🗄️", "#636e72", "Reference materials"),
    Category.ARCHIVE: CategoryInfo("📁", "#b2bec3", "Completed or inactive"),
}

FALLBACK_CATEGORY = Category.RESOURCES


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Record(BaseModel):
    # snapshots use camelCase keys, attributes stay snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Chunk(_Record):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    filename: str
    chunk_index: int = Field(ge=0)
    content: str

    @staticmethod
    def make_id(filename: str, chunk_index: int) -> str:
        return f"{filename}-chunk-{chunk_index}"


class RankedChunk(Chunk):
    relevance_score: int


class Document(_Record):
    filename: str
    size_bytes: int = Field(ge=0)
    chunks: List[Chunk] = Field(default_factory=list)
    category: Category = FALLBACK_CATEGORY
    uploaded_at: datetime = Field(default_factory=_utcnow)


class CommunicationStyle(_Record):
    directness_level: int = Field(ge=1, le=10)
    challenge_approach: int = Field(ge=1, le=10)
    support_style: str
    feedback_method: str


class CoachingSettings(_Record):
    alignment_principles: List[str] = Field(min_length=1)
    communication_style: CommunicationStyle
    response_personality: Dict[str, bool] = Field(default_factory=dict)

    @field_validator("alignment_principles")
    @classmethod
    def _principles_not_blank(cls, v: List[str]) -> List[str]:
        cleaned = [p.strip() for p in v]
        if any(not p for p in cleaned):
            raise ValueError("alignment principles must not be blank")
        return cleaned


def default_settings() -> CoachingSettings:
    return CoachingSettings(
        alignment_principles=[
            "Honesty over comfort: tell me what I need to hear.",
            "Long-term growth matters more than short-term ease.",
            "Health and relationships come before work.",
            "Small consistent actions beat big occasional efforts.",
        ],
        communication_style=CommunicationStyle(
            directness_level=7,
            challenge_approach=6,
            support_style="Encouraging but realistic",
            feedback_method="Specific, actionable next steps",
        ),
        response_personality={
            "emotionallyAware": True,
            "growthFocused": True,
            "practicalSolutions": True,
            "humorous": False,
            "philosophical": False,
        },
    )


class Message(_Record):
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=_utcnow)
    source_docs: Optional[List[str]] = None
    used_personalization: Optional[bool] = None


__all__ = [
    "CATEGORY_INFO",
    "FALLBACK_CATEGORY",
    "Category",
    "CategoryInfo",
    "Chunk",
    "CoachingSettings",
    "CommunicationStyle",
    "Document",
    "Message",
    "RankedChunk",
    "default_settings",
]
