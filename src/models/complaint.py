"""Complaint records and the classifier's output.

Complaints are persisted with the camelCase keys of the original
browser-storage format (``submittedAt``, ``adminNotes`` ...); in Python
the snake_case attribute names are used throughout.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from src.models.enums import (
    CATEGORY_DEPARTMENTS,
    ComplaintCategory,
    ComplaintStatus,
    Department,
    Priority,
)


class Classification(BaseModel):
    """Category, routing department and priority derived from free text."""

    model_config = ConfigDict(frozen=True)

    category: ComplaintCategory
    department: Department
    priority: Priority


class Complaint(BaseModel):
    """A single submitted grievance tracked through its lifecycle.

    Submitter fields are copied from the account at submission time and
    are not a live reference to it.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    title: str
    description: str
    category: ComplaintCategory
    department: Department
    priority: Priority
    status: ComplaintStatus = ComplaintStatus.PENDING
    student_name: str
    student_email: str
    student_id: str = ""
    submitted_at: datetime
    resolved_at: datetime | None = None
    admin_notes: str | None = None
    assigned_to: str | None = None

    @model_validator(mode="after")
    def _department_matches_category(self) -> Complaint:
        expected = CATEGORY_DEPARTMENTS[self.category]
        if self.department != expected:
            raise ValueError(
                f"department {self.department!r} does not match category "
                f"{self.category!r} (expected {expected!r})"
            )
        return self

    def to_record(self) -> dict:
        """Serialise to the persisted JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class QueueStats(BaseModel):
    """Dashboard counters over a set of complaints."""

    total: int = 0
    pending: int = 0
    in_progress: int = 0
    resolved: int = 0
    urgent: int = Field(default=0, description="Complaints with urgent priority")
