from src.models.account import SUPER_ADMIN_ID, Account
from src.models.complaint import Classification, Complaint, QueueStats
from src.models.enums import (
    CATEGORY_DEPARTMENTS,
    PRIORITY_RANK,
    ComplaintCategory,
    ComplaintStatus,
    Department,
    Priority,
    UserRole,
)
from src.models.queue import ALL, QueueFilters

__all__ = [
    "ALL",
    "CATEGORY_DEPARTMENTS",
    "PRIORITY_RANK",
    "SUPER_ADMIN_ID",
    "Account",
    "Classification",
    "Complaint",
    "ComplaintCategory",
    "ComplaintStatus",
    "Department",
    "Priority",
    "QueueFilters",
    "QueueStats",
    "UserRole",
]
