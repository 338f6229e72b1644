"""Staff queue filter criteria."""

from __future__ import annotations

from typing import Final, Literal

from pydantic import BaseModel, ConfigDict

from src.models.enums import ComplaintStatus, Department, Priority

ALL: Final[str] = "all"


class QueueFilters(BaseModel):
    """Conjunctive filters for the staff triage queue.

    Each enum filter accepts ``"all"`` to disable it; an empty ``search``
    matches everything.
    """

    model_config = ConfigDict(frozen=True)

    status: ComplaintStatus | Literal["all"] = ALL
    priority: Priority | Literal["all"] = ALL
    department: Department | Literal["all"] = ALL
    search: str = ""
