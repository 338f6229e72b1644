"""Queue projections over the complaint collection.

All functions are pure: they take the full collection plus criteria and
return a new list, leaving the input untouched.
"""

from __future__ import annotations

from collections.abc import Iterable

from src.models.account import Account
from src.models.complaint import Complaint, QueueStats
from src.models.enums import PRIORITY_RANK, ComplaintStatus, Priority
from src.models.queue import ALL, QueueFilters


def _matches_search(complaint: Complaint, needle: str) -> bool:
    return (
        needle in complaint.title.lower()
        or needle in complaint.description.lower()
        or needle in complaint.student_name.lower()
        or needle in complaint.id.lower()
    )


def _matches(complaint: Complaint, filters: QueueFilters, needle: str) -> bool:
    if filters.status != ALL and complaint.status != filters.status:
        return False
    if filters.priority != ALL and complaint.priority != filters.priority:
        return False
    if filters.department != ALL and complaint.department != filters.department:
        return False
    return not needle or _matches_search(complaint, needle)


def _queue_key(complaint: Complaint) -> tuple[int, float]:
    return PRIORITY_RANK[complaint.priority], complaint.submitted_at.timestamp()


def project(complaints: Iterable[Complaint], filters: QueueFilters | None = None) -> list[Complaint]:
    """Filter and order complaints for the staff queue.

    Every active filter must match.  The result is ordered by priority
    (urgent first) and then by submission time, newest first.  Complaints
    equal on both keys keep their store order.
    """
    filters = filters or QueueFilters()
    needle = filters.search.lower()
    selected = [c for c in complaints if _matches(c, filters, needle)]
    # sorted() with reverse=True is still stable for equal keys
    return sorted(selected, key=_queue_key, reverse=True)


def student_view(
    complaints: Iterable[Complaint],
    account: Account,
    status: ComplaintStatus | str = ALL,
) -> list[Complaint]:
    """Complaints submitted by *account*, in store order."""
    wanted = None if status == ALL else ComplaintStatus(status)
    return [
        c
        for c in complaints
        if c.student_email == account.email and (wanted is None or c.status == wanted)
    ]


def compute_stats(complaints: Iterable[Complaint]) -> QueueStats:
    """Dashboard counters: totals per status plus urgent complaints."""
    stats = QueueStats()
    for complaint in complaints:
        stats.total += 1
        if complaint.status == ComplaintStatus.PENDING:
            stats.pending += 1
        elif complaint.status == ComplaintStatus.IN_PROGRESS:
            stats.in_progress += 1
        elif complaint.status == ComplaintStatus.RESOLVED:
            stats.resolved += 1
        if complaint.priority == Priority.URGENT:
            stats.urgent += 1
    return stats
