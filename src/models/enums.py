from __future__ import annotations

from enum import StrEnum
from typing import Final


class ComplaintCategory(StrEnum):
    """Classifier topic labels, in the fixed order they are scored."""

    __slots__ = ()

    WATER_SANITATION = "water_sanitation"
    FOOD_CANTEEN = "food_canteen"
    INFRASTRUCTURE = "infrastructure"
    ACADEMIC = "academic"
    HOSTEL = "hostel"


class Department(StrEnum):
    __slots__ = ()

    WATER_SANITATION = "Water & Sanitation"
    FOOD_CANTEEN = "Food & Canteen Services"
    INFRASTRUCTURE = "Infrastructure & Maintenance"
    ACADEMIC = "Academic Affairs"
    HOSTEL = "Hostel Administration"


class Priority(StrEnum):
    __slots__ = ()

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ComplaintStatus(StrEnum):
    __slots__ = ()

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class UserRole(StrEnum):
    __slots__ = ()

    STUDENT = "student"
    ADMIN = "admin"


# One-to-one routing table; department is never set independently.
CATEGORY_DEPARTMENTS: Final[dict[ComplaintCategory, Department]] = {
    ComplaintCategory.WATER_SANITATION: Department.WATER_SANITATION,
    ComplaintCategory.FOOD_CANTEEN: Department.FOOD_CANTEEN,
    ComplaintCategory.INFRASTRUCTURE: Department.INFRASTRUCTURE,
    ComplaintCategory.ACADEMIC: Department.ACADEMIC,
    ComplaintCategory.HOSTEL: Department.HOSTEL,
}

PRIORITY_RANK: Final[dict[Priority, int]] = {
    Priority.URGENT: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}
