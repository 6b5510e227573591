"""Content catalogue domain constants."""
import re
from enum import Enum


class Collection(str, Enum):
    """Typed record collections exposed by the store."""

    CATEGORIES = "categories"
    SUBCATEGORIES = "subcategories"
    QUESTIONS = "questions"
    CODING_QUESTIONS = "coding_questions"
    CODING_CATEGORIES = "coding_categories"
    SYSTEM_DESIGN_PROBLEMS = "system_design_problems"
    PROJECTS = "projects"
    PROFILES = "profiles"
    SUBSCRIPTIONS = "subscriptions"


class ContentType(str, Enum):
    """Gated content kinds, as named in admin requests."""

    QUESTION = "question"
    CODING_QUESTION = "coding_question"
    SYSTEM_DESIGN_PROBLEM = "system_design_problem"
    PROJECT = "project"

    @property
    def collection(self) -> Collection:
        return _CONTENT_COLLECTIONS[self]


_CONTENT_COLLECTIONS = {
    ContentType.QUESTION: Collection.QUESTIONS,
    ContentType.CODING_QUESTION: Collection.CODING_QUESTIONS,
    ContentType.SYSTEM_DESIGN_PROBLEM: Collection.SYSTEM_DESIGN_PROBLEMS,
    ContentType.PROJECT: Collection.PROJECTS,
}

# Question banks are imported as CSV with these columns at minimum
QUESTION_REQUIRED_FIELDS = ("title", "content", "answer", "type", "level")
QUESTION_OPTIONAL_FIELDS = ("tier",)

QUESTION_LEVELS = ("Basic", "Intermediate", "Advanced")

# Coding question CSV has no header; columns are positional
CODING_CSV_COLUMNS = (
    "Title",
    "Description",
    "Explanation",
    "Difficulty",
    "Tags",
    "GitHub Link",
    "Video Link",
    "Tier (optional)",
)
CODING_CSV_MIN_COLUMNS = 6
DEFAULT_CODING_DIFFICULTY = "Easy"

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """'Design Twitter!' -> 'design-twitter'."""
    return _SLUG_STRIP.sub("-", title.lower()).strip("-")
