"""Typed access to the persisted complaint, account and session collections.

:class:`RecordStorage` wraps any :class:`~src.services.record_store.RecordStore`
and converts between stored JSON records and pydantic models.  Every
read-modify-write of a collection runs under a single :class:`asyncio.Lock`,
so no operation can observe a collection that another one is halfway
through rewriting.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from src.core.exceptions import StorageError
from src.models.account import SUPER_ADMIN_ID, Account
from src.models.complaint import Complaint
from src.models.enums import UserRole
from src.services.record_store import COMPLAINTS_KEY, CURRENT_USER_KEY, USERS_KEY

if TYPE_CHECKING:
    from config.settings import Settings
    from src.services.record_store import RecordStore

logger = structlog.get_logger(__name__)

_M = TypeVar("_M", bound=BaseModel)


def _parse_collection(raw: Any, model: type[_M], key: str) -> list[_M]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise StorageError(f"Collection '{key}' is not a list.", {"key": key})
    try:
        return [model.model_validate(item) for item in raw]
    except ValidationError as exc:
        logger.error("storage.invalid_record", key=key, errors=exc.error_count())
        raise StorageError(f"Collection '{key}' holds an invalid record.", {"key": key}) from exc


class RecordStorage:
    """Whole-collection reads and writes of complaints, accounts and session."""

    __slots__ = ("_lock", "_store")

    def __init__(self, store: RecordStore) -> None:
        self._store = store
        self._lock = asyncio.Lock()

    @property
    def store(self) -> RecordStore:
        return self._store

    # -- Complaints ------------------------------------------------------------

    async def get_complaints(self) -> list[Complaint]:
        raw = await self._store.get(COMPLAINTS_KEY)
        return _parse_collection(raw, Complaint, COMPLAINTS_KEY)

    async def save_complaints(self, complaints: list[Complaint]) -> None:
        await self._store.set(COMPLAINTS_KEY, [c.to_record() for c in complaints])

    async def mutate_complaints(
        self,
        transform: Callable[[list[Complaint]], list[Complaint]],
    ) -> list[Complaint]:
        """Load, transform and persist the complaint collection atomically.

        Returns the collection as written.
        """
        async with self._lock:
            complaints = transform(await self.get_complaints())
            await self.save_complaints(complaints)
        return complaints

    # -- Accounts --------------------------------------------------------------

    async def get_accounts(self) -> list[Account]:
        raw = await self._store.get(USERS_KEY)
        return _parse_collection(raw, Account, USERS_KEY)

    async def save_accounts(self, accounts: list[Account]) -> None:
        await self._store.set(USERS_KEY, [a.to_record() for a in accounts])

    async def add_account(self, account: Account) -> None:
        async with self._lock:
            accounts = await self.get_accounts()
            accounts.append(account)
            await self.save_accounts(accounts)

    async def find_account_by_email(self, email: str) -> Account | None:
        for account in await self.get_accounts():
            if account.email == email:
                return account
        return None

    # -- Session pointer ---------------------------------------------------------

    async def get_current_account(self) -> Account | None:
        raw = await self._store.get(CURRENT_USER_KEY)
        if raw is None:
            return None
        try:
            return Account.model_validate(raw)
        except ValidationError as exc:
            raise StorageError("Stored session is not a valid account.", {"key": CURRENT_USER_KEY}) from exc

    async def save_current_account(self, account: Account) -> None:
        await self._store.set(CURRENT_USER_KEY, account.to_record())

    async def clear_current_account(self) -> None:
        await self._store.delete(CURRENT_USER_KEY)

    # -- Bootstrap ---------------------------------------------------------------

    async def initialize_default_accounts(self, config: Settings) -> bool:
        """Seed the super-admin account on first run.

        Returns *True* when the account was created, *False* when accounts
        already existed.
        """
        async with self._lock:
            if await self.get_accounts():
                return False
            super_admin = Account(
                id=SUPER_ADMIN_ID,
                name=config.super_admin_name,
                email=config.super_admin_email,
                role=UserRole.ADMIN,
                department=config.super_admin_department,
            )
            await self.save_accounts([super_admin])
        logger.info("storage.super_admin_seeded", email=super_admin.email)
        return True
