from src.core.exceptions import (
    AccountNotFoundError,
    ComplaintBoxError,
    InvalidAdminCodeError,
    PermissionDeniedError,
    StorageError,
)

__all__ = [
    "AccountNotFoundError",
    "ComplaintBoxError",
    "InvalidAdminCodeError",
    "PermissionDeniedError",
    "StorageError",
]
