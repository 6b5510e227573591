"""
Gated content schemas: interview questions, coding questions, system design
problems and projects.

Each response model lists its ``GATED_FIELDS``; those are nulled out when the
caller cannot see the item, while the listing metadata stays.
"""

from datetime import datetime
from typing import ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field

from .access import AccessInfo, StoredTier, TierName

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class GatedResponse(BaseModel):
    """Base for content responses carrying an access payload."""

    GATED_FIELDS: ClassVar[tuple[str, ...]] = ()

    access: Optional[AccessInfo] = None

    model_config = ConfigDict(from_attributes=True)


class ContentListResponse(BaseModel):
    """Paginated content list."""

    items: list
    total: int
    page: int
    page_size: int
    total_pages: int


# --- Interview questions ---


class QuestionCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1, max_length=100)
    level: str = Field(..., min_length=1, max_length=50)
    tier: TierName = None


class QuestionUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    content: Optional[str] = Field(None, min_length=1)
    answer: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = Field(None, min_length=1, max_length=100)
    level: Optional[str] = Field(None, min_length=1, max_length=50)
    tier: TierName = None


class QuestionResponse(GatedResponse):
    GATED_FIELDS: ClassVar[tuple[str, ...]] = ("content", "answer")

    id: str
    subcategory_id: Optional[str] = None
    title: str
    type: str
    level: str
    tier: StoredTier = None
    content: Optional[str] = None
    answer: Optional[str] = None
    created_at: datetime


class QuestionListResponse(ContentListResponse):
    items: list[QuestionResponse]


# --- Coding questions ---


class CodingQuestionCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    slug: Optional[str] = Field(None, max_length=500, pattern=SLUG_PATTERN)
    description: str = Field(..., min_length=1)
    difficulty: str = Field("Easy", max_length=50)
    category: Optional[str] = Field(None, max_length=255)
    tags: list[str] = Field(default_factory=list)
    tier: TierName = None
    solution: Optional[str] = None
    video_link: Optional[str] = Field(None, max_length=500)
    github_link: Optional[str] = Field(None, max_length=500)
    status: str = Field("Published", max_length=50)


class CodingQuestionUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    slug: Optional[str] = Field(None, max_length=500, pattern=SLUG_PATTERN)
    description: Optional[str] = Field(None, min_length=1)
    difficulty: Optional[str] = Field(None, max_length=50)
    category: Optional[str] = Field(None, max_length=255)
    tags: Optional[list[str]] = None
    tier: TierName = None
    solution: Optional[str] = None
    video_link: Optional[str] = Field(None, max_length=500)
    github_link: Optional[str] = Field(None, max_length=500)
    status: Optional[str] = Field(None, max_length=50)


class CodingQuestionResponse(GatedResponse):
    GATED_FIELDS: ClassVar[tuple[str, ...]] = (
        "description",
        "solution",
        "video_link",
        "github_link",
    )

    id: str
    title: str
    slug: str
    difficulty: str
    category: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    tier: StoredTier = None
    status: str
    description: Optional[str] = None
    solution: Optional[str] = None
    video_link: Optional[str] = None
    github_link: Optional[str] = None
    created_at: datetime


class CodingQuestionListResponse(ContentListResponse):
    items: list[CodingQuestionResponse]


# --- System design ---


class SystemDesignCreate(BaseModel):
    category_id: Optional[str] = None
    title: str = Field(..., min_length=1, max_length=500)
    slug: Optional[str] = Field(None, max_length=500, pattern=SLUG_PATTERN)
    description: str = Field(..., min_length=1)
    requirement_discussion: Optional[str] = None
    solution: Optional[str] = None
    design_image: Optional[str] = Field(None, max_length=500)
    video_link: Optional[str] = Field(None, max_length=500)
    github_link: Optional[str] = Field(None, max_length=500)
    tags: list[str] = Field(default_factory=list)
    difficulty: str = Field("Medium", max_length=50)
    tier: TierName = None
    status: str = Field("Published", max_length=50)


class SystemDesignUpdate(BaseModel):
    category_id: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    slug: Optional[str] = Field(None, max_length=500, pattern=SLUG_PATTERN)
    description: Optional[str] = Field(None, min_length=1)
    requirement_discussion: Optional[str] = None
    solution: Optional[str] = None
    design_image: Optional[str] = Field(None, max_length=500)
    video_link: Optional[str] = Field(None, max_length=500)
    github_link: Optional[str] = Field(None, max_length=500)
    tags: Optional[list[str]] = None
    difficulty: Optional[str] = Field(None, max_length=50)
    tier: TierName = None
    status: Optional[str] = Field(None, max_length=50)


class SystemDesignResponse(GatedResponse):
    GATED_FIELDS: ClassVar[tuple[str, ...]] = (
        "requirement_discussion",
        "solution",
        "design_image",
        "video_link",
        "github_link",
    )

    id: str
    category_id: Optional[str] = None
    title: str
    slug: str
    description: str
    tags: list[str] = Field(default_factory=list)
    difficulty: str
    tier: StoredTier = None
    status: str
    requirement_discussion: Optional[str] = None
    solution: Optional[str] = None
    design_image: Optional[str] = None
    video_link: Optional[str] = None
    github_link: Optional[str] = None
    created_at: datetime


class SystemDesignListResponse(ContentListResponse):
    items: list[SystemDesignResponse]


# --- Projects ---


class ProjectCreate(BaseModel):
    category_id: Optional[str] = None
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    type: str = Field(..., min_length=1, max_length=100)
    difficulty: str = Field("Beginner", max_length=50)
    duration: Optional[str] = Field(None, max_length=100)
    github_url: Optional[str] = Field(None, max_length=500)
    key_features: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)
    tier: TierName = None


class ProjectUpdate(BaseModel):
    category_id: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    type: Optional[str] = Field(None, min_length=1, max_length=100)
    difficulty: Optional[str] = Field(None, max_length=50)
    duration: Optional[str] = Field(None, max_length=100)
    github_url: Optional[str] = Field(None, max_length=500)
    key_features: Optional[list[str]] = None
    technologies: Optional[list[str]] = None
    tier: TierName = None


class ProjectResponse(GatedResponse):
    GATED_FIELDS: ClassVar[tuple[str, ...]] = ("description", "github_url", "key_features")

    id: str
    category_id: Optional[str] = None
    title: str
    type: str
    difficulty: str
    duration: Optional[str] = None
    technologies: list[str] = Field(default_factory=list)
    tier: StoredTier = None
    description: Optional[str] = None
    github_url: Optional[str] = None
    key_features: Optional[list[str]] = None
    created_at: datetime


class ProjectListResponse(ContentListResponse):
    items: list[ProjectResponse]
