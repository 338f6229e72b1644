"""Session handling and role-based capabilities.

Authentication is an email lookup: login succeeds when an account with the
given email exists.  There is no credential check.  What a logged-in
account may do is decided by an :class:`AccessPolicy`; the default
:class:`RoleAccessPolicy` grants students the submit/view-own capabilities
and admins the triage capabilities, with admin creation reserved for the
super-admin sentinel account.
"""

from __future__ import annotations

import hmac
import time
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import structlog

from src.core.exceptions import AccountNotFoundError, InvalidAdminCodeError, PermissionDeniedError
from src.models.account import Account
from src.models.enums import Department, UserRole

if TYPE_CHECKING:
    from src.services.storage import RecordStorage

logger = structlog.get_logger(__name__)


class Capability(StrEnum):
    __slots__ = ()

    SUBMIT_COMPLAINT = "submit_complaint"
    VIEW_OWN_COMPLAINTS = "view_own_complaints"
    VIEW_ALL_COMPLAINTS = "view_all_complaints"
    UPDATE_STATUS = "update_status"
    CREATE_ADMIN = "create_admin"


STUDENT_CAPABILITIES: frozenset[Capability] = frozenset(
    {Capability.SUBMIT_COMPLAINT, Capability.VIEW_OWN_COMPLAINTS}
)
STAFF_CAPABILITIES: frozenset[Capability] = frozenset(
    {Capability.VIEW_ALL_COMPLAINTS, Capability.UPDATE_STATUS}
)
SUPER_ADMIN_CAPABILITIES: frozenset[Capability] = STAFF_CAPABILITIES | {Capability.CREATE_ADMIN}


# ---------------------------------------------------------------------------
# Access policy
# ---------------------------------------------------------------------------


@runtime_checkable
class AccessPolicy(Protocol):
    """Maps an account to the capabilities it may exercise."""

    def capabilities_for(self, account: Account) -> frozenset[Capability]: ...


class RoleAccessPolicy:
    """Capabilities derived from the account role alone."""

    __slots__ = ()

    def capabilities_for(self, account: Account) -> frozenset[Capability]:
        if account.is_super_admin:
            return SUPER_ADMIN_CAPABILITIES
        if account.role == UserRole.ADMIN:
            return STAFF_CAPABILITIES
        return STUDENT_CAPABILITIES


def require(
    account: Account,
    capability: Capability,
    policy: AccessPolicy | None = None,
) -> None:
    """Raise :class:`PermissionDeniedError` unless *account* has *capability*."""
    granted = (policy or RoleAccessPolicy()).capabilities_for(account)
    if capability not in granted:
        logger.warning(
            "access.denied",
            account_id=account.id,
            role=account.role,
            capability=capability.value,
        )
        raise PermissionDeniedError(account.id, capability.value)


# ---------------------------------------------------------------------------
# Session manager
# ---------------------------------------------------------------------------


class SessionManager:
    """Login, registration, logout and admin creation over :class:`RecordStorage`.

    Parameters
    ----------
    storage:
        Typed record storage holding accounts and the session pointer.
    admin_access_code:
        Code required to self-register an admin account.
    policy:
        Capability policy; defaults to :class:`RoleAccessPolicy`.
    """

    __slots__ = ("_admin_access_code", "_last_account_millis", "_policy", "_storage")

    def __init__(
        self,
        storage: RecordStorage,
        *,
        admin_access_code: str,
        policy: AccessPolicy | None = None,
    ) -> None:
        self._storage = storage
        self._admin_access_code = admin_access_code
        self._policy: AccessPolicy = policy or RoleAccessPolicy()
        self._last_account_millis = 0

    def _new_account_id(self) -> str:
        # Epoch milliseconds, bumped so back-to-back registrations differ.
        millis = max(time.time_ns() // 1_000_000, self._last_account_millis + 1)
        self._last_account_millis = millis
        return str(millis)

    @property
    def policy(self) -> AccessPolicy:
        return self._policy

    def capabilities(self, account: Account) -> frozenset[Capability]:
        return self._policy.capabilities_for(account)

    def require(self, account: Account, capability: Capability) -> None:
        require(account, capability, self._policy)

    async def current(self) -> Account | None:
        """Return the account of the persisted session, if any."""
        return await self._storage.get_current_account()

    async def login(self, email: str) -> Account:
        account = await self._storage.find_account_by_email(email)
        if account is None:
            logger.info("session.login_failed", email=email)
            raise AccountNotFoundError(email)
        await self._storage.save_current_account(account)
        logger.info("session.logged_in", account_id=account.id, role=account.role)
        return account

    async def register(
        self,
        name: str,
        email: str,
        *,
        role: UserRole | str = UserRole.STUDENT,
        student_id: str | None = None,
        admin_code: str | None = None,
    ) -> Account:
        """Create an account and immediately start a session for it.

        Admin self-registration requires the configured access code.
        """
        role = UserRole(role)
        if role == UserRole.ADMIN and not hmac.compare_digest(
            (admin_code or "").encode(), self._admin_access_code.encode()
        ):
            logger.warning("session.invalid_admin_code", email=email)
            raise InvalidAdminCodeError()

        account = Account(
            id=self._new_account_id(),
            name=name,
            email=email,
            role=role,
            student_id=student_id if role == UserRole.STUDENT else None,
        )
        await self._storage.add_account(account)
        await self._storage.save_current_account(account)
        logger.info("session.registered", account_id=account.id, role=role)
        return account

    async def create_admin(
        self,
        actor: Account,
        name: str,
        email: str,
        department: Department | str | None = None,
    ) -> Account:
        """Create a staff account on behalf of the super-admin.

        The actor's session is left unchanged.
        """
        self.require(actor, Capability.CREATE_ADMIN)
        account = Account(
            id=self._new_account_id(),
            name=name,
            email=email,
            role=UserRole.ADMIN,
            department=Department(department) if department is not None else None,
        )
        await self._storage.add_account(account)
        logger.info("session.admin_created", account_id=account.id, created_by=actor.id)
        return account

    async def logout(self) -> None:
        await self._storage.clear_current_account()
        logger.info("session.logged_out")
