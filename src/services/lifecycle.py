"""Complaint submission and status transitions.

Any status may move to any other status; ``resolved`` and ``rejected`` are
final only by convention.  Reaching ``resolved`` stamps ``resolved_at`` and
later transitions never clear it.  Updates against an unknown complaint id
change nothing and report nothing.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from src.models.complaint import Classification, Complaint
from src.models.enums import ComplaintStatus
from src.services.access import Capability, SessionManager
from src.services.classifier import ComplaintIdGenerator, KeywordClassifier

if TYPE_CHECKING:
    from src.models.account import Account
    from src.services.storage import RecordStorage

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ComplaintLifecycle:
    """Creates complaints and applies staff status updates.

    Parameters
    ----------
    storage:
        Record storage the complaint collection is read from and written to.
    sessions:
        Session manager used for capability checks.
    classifier:
        Keyword classifier; defaults to the built-in keyword tables.
    id_prefix:
        Prefix of generated complaint ids.
    clock:
        Returns the current time; injectable for tests.
    """

    __slots__ = ("_classifier", "_clock", "_next_id", "_sessions", "_storage")

    def __init__(
        self,
        storage: RecordStorage,
        sessions: SessionManager,
        *,
        classifier: KeywordClassifier | None = None,
        id_prefix: str = "CMP",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._storage = storage
        self._sessions = sessions
        self._classifier = classifier or KeywordClassifier()
        self._next_id = ComplaintIdGenerator(id_prefix)
        self._clock = clock

    def preview(self, title: str, description: str) -> Classification:
        """Classify without submitting anything."""
        return self._classifier.classify(title, description)

    async def submit(self, account: Account, title: str, description: str) -> Complaint:
        """Classify and persist a new complaint in the ``pending`` state."""
        self._sessions.require(account, Capability.SUBMIT_COMPLAINT)

        now = self._clock()
        result = self._classifier.classify(title, description)
        complaint = Complaint(
            id=self._next_id(now),
            title=title,
            description=description,
            category=result.category,
            department=result.department,
            priority=result.priority,
            status=ComplaintStatus.PENDING,
            student_name=account.name,
            student_email=account.email,
            student_id=account.student_id or "",
            submitted_at=now,
        )

        await self._storage.mutate_complaints(lambda complaints: [*complaints, complaint])

        logger.info(
            "lifecycle.complaint_submitted",
            complaint_id=complaint.id,
            category=complaint.category,
            priority=complaint.priority,
            student_email=complaint.student_email,
        )
        return complaint

    async def update_status(
        self,
        actor: Account,
        complaint_id: str,
        new_status: ComplaintStatus | str,
        notes: str | None = None,
    ) -> Complaint | None:
        """Move a complaint to *new_status* on behalf of a staff account.

        Non-empty *notes* replace the admin notes; otherwise the previous
        notes are kept.  ``assigned_to`` always becomes the actor's name.
        Returns the updated complaint, or *None* when no complaint has
        *complaint_id*.
        """
        self._sessions.require(actor, Capability.UPDATE_STATUS)
        status = ComplaintStatus(new_status)
        now = self._clock()
        updated: list[Complaint] = []

        def _apply(complaints: list[Complaint]) -> list[Complaint]:
            result: list[Complaint] = []
            for complaint in complaints:
                if complaint.id == complaint_id:
                    complaint = complaint.model_copy(
                        update={
                            "status": status,
                            "admin_notes": notes or complaint.admin_notes,
                            "resolved_at": now if status == ComplaintStatus.RESOLVED else complaint.resolved_at,
                            "assigned_to": actor.name,
                        }
                    )
                    updated.append(complaint)
                result.append(complaint)
            return result

        await self._storage.mutate_complaints(_apply)

        if not updated:
            logger.debug("lifecycle.update_unknown_complaint", complaint_id=complaint_id)
            return None

        logger.info(
            "lifecycle.status_updated",
            complaint_id=complaint_id,
            status=status,
            assigned_to=actor.name,
        )
        return updated[0]
