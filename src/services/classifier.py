"""Keyword classifier for free-text complaints.

Maps a complaint's title and description to a category, its routing
department and a priority.  Scoring is a plain substring test per keyword:
each keyword contributes at most one point no matter how often it occurs.
There is no learned model; the same input always yields the same result
and every input, including empty text, yields a valid classification.
"""

from __future__ import annotations

import time
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Final

from src.models.complaint import Classification
from src.models.enums import CATEGORY_DEPARTMENTS, ComplaintCategory, Priority

# ---------------------------------------------------------------------------
# Keyword tables
#
# Iteration order of CATEGORY_KEYWORDS is significant: ties between
# positive scores go to the category listed first.
# ---------------------------------------------------------------------------

CATEGORY_KEYWORDS: Final[dict[ComplaintCategory, tuple[str, ...]]] = {
    ComplaintCategory.WATER_SANITATION: (
        "water", "toilet", "bathroom", "washroom", "drainage", "plumbing",
        "leak", "flush", "tap", "pipe", "sewage", "hygiene", "cleaning",
    ),
    ComplaintCategory.FOOD_CANTEEN: (
        "food", "canteen", "mess", "cafeteria", "meal", "lunch", "dinner",
        "breakfast", "quality", "taste", "hygiene", "cooking",
    ),
    ComplaintCategory.INFRASTRUCTURE: (
        "building", "classroom", "ceiling", "wall", "door", "window",
        "furniture", "chair", "table", "fan", "light", "electricity", "ac",
        "projector",
    ),
    ComplaintCategory.ACADEMIC: (
        "teacher", "professor", "class", "exam", "grade", "syllabus",
        "timetable", "assignment", "lecture", "course", "subject", "marks",
    ),
    ComplaintCategory.HOSTEL: (
        "hostel", "room", "bed", "roommate", "warden", "mess", "laundry",
        "wifi", "internet", "accommodation", "dormitory",
    ),
}

# Checked in order; the first tier with any hit decides the priority.
PRIORITY_TIERS: Final[tuple[tuple[Priority, tuple[str, ...]], ...]] = (
    (Priority.URGENT, ("urgent", "emergency", "broken", "not working", "immediate", "asap")),
    (Priority.HIGH, ("important", "serious", "problem", "issue", "complaint")),
    (Priority.MEDIUM, ("request", "improvement", "suggestion")),
)

DEFAULT_CATEGORY: Final[ComplaintCategory] = ComplaintCategory.INFRASTRUCTURE
DEFAULT_PRIORITY: Final[Priority] = Priority.LOW

_BASE36_DIGITS: Final[str] = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------


def _normalise(title: str, description: str) -> str:
    return f"{title or ''} {description or ''}".lower()


def _score(text: str, keywords: Sequence[str]) -> int:
    return sum(1 for keyword in keywords if keyword in text)


class KeywordClassifier:
    """Deterministic keyword-count classifier.

    Parameters
    ----------
    category_keywords:
        Ordered mapping of category to keywords.  Defaults to
        :data:`CATEGORY_KEYWORDS`.
    priority_tiers:
        Priority tiers in precedence order.  Defaults to
        :data:`PRIORITY_TIERS`.
    """

    __slots__ = ("_category_keywords", "_priority_tiers")

    def __init__(
        self,
        category_keywords: Mapping[ComplaintCategory, Sequence[str]] | None = None,
        priority_tiers: Sequence[tuple[Priority, Sequence[str]]] | None = None,
    ) -> None:
        self._category_keywords = dict(category_keywords or CATEGORY_KEYWORDS)
        self._priority_tiers = tuple(priority_tiers or PRIORITY_TIERS)

    def category_scores(self, title: str, description: str) -> dict[ComplaintCategory, int]:
        """Return the keyword score of every category, in scoring order."""
        text = _normalise(title, description)
        return {
            category: _score(text, keywords)
            for category, keywords in self._category_keywords.items()
        }

    def categorise(self, title: str, description: str) -> ComplaintCategory:
        best = DEFAULT_CATEGORY
        max_score = 0
        for category, score in self.category_scores(title, description).items():
            if score > max_score:
                max_score = score
                best = category
        return best

    def prioritise(self, title: str, description: str) -> Priority:
        text = _normalise(title, description)
        for priority, keywords in self._priority_tiers:
            if any(keyword in text for keyword in keywords):
                return priority
        return DEFAULT_PRIORITY

    def classify(self, title: str, description: str) -> Classification:
        category = self.categorise(title, description)
        return Classification(
            category=category,
            department=CATEGORY_DEPARTMENTS[category],
            priority=self.prioritise(title, description),
        )


_default_classifier = KeywordClassifier()


def classify(title: str, description: str) -> Classification:
    """Classify a complaint with the default keyword tables."""
    return _default_classifier.classify(title, description)


# ---------------------------------------------------------------------------
# Complaint ids
# ---------------------------------------------------------------------------


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def _epoch_millis(now: datetime | None) -> int:
    if now is None:
        return time.time_ns() // 1_000_000
    return int(now.timestamp() * 1000)


def generate_complaint_id(prefix: str = "CMP", now: datetime | None = None) -> str:
    """Return ``prefix`` followed by the base-36 epoch-millisecond timestamp.

    Uniqueness relies on human-paced submissions; the store is not checked.
    """
    return f"{prefix}{_to_base36(_epoch_millis(now))}"


class ComplaintIdGenerator:
    """Issues complaint ids whose timestamps strictly increase.

    Two submissions within the same millisecond get consecutive values
    instead of the same id.
    """

    __slots__ = ("_last", "prefix")

    def __init__(self, prefix: str = "CMP") -> None:
        self.prefix = prefix
        self._last = 0

    def __call__(self, now: datetime | None = None) -> str:
        millis = max(_epoch_millis(now), self._last + 1)
        self._last = millis
        return f"{self.prefix}{_to_base36(millis)}"
