"""Complaint box composition root.

Configures logging, builds the record store selected in settings, seeds the
super-admin account on first run, and wires the session manager and
complaint lifecycle together.  The presentation layer talks to the returned
:class:`ComplaintBox` through plain async calls.
"""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass

import structlog

from config.settings import Settings, settings
from src.models.account import Account
from src.models.complaint import Complaint, QueueStats
from src.models.enums import ComplaintStatus
from src.models.queue import ALL, QueueFilters
from src.services.access import Capability, SessionManager
from src.services.lifecycle import ComplaintLifecycle
from src.services.queue import compute_stats, project, student_view
from src.services.record_store import RecordStore, RedisRecordStore, create_record_store
from src.services.storage import RecordStorage

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Structured logging configuration
# ---------------------------------------------------------------------------


def configure_logging(config: Settings = settings) -> None:
    """Set up structlog with JSON or console rendering based on settings."""
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if config.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping()[config.log_level],
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Facade
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ComplaintBox:
    """Wired services plus the read-side views the dashboards render."""

    settings: Settings
    store: RecordStore
    storage: RecordStorage
    sessions: SessionManager
    lifecycle: ComplaintLifecycle

    async def staff_queue(self, actor: Account, filters: QueueFilters | None = None) -> list[Complaint]:
        """Filtered, priority-ordered queue of every complaint."""
        self.sessions.require(actor, Capability.VIEW_ALL_COMPLAINTS)
        return project(await self.storage.get_complaints(), filters)

    async def my_complaints(
        self,
        account: Account,
        status: ComplaintStatus | str = ALL,
    ) -> list[Complaint]:
        """Complaints the account submitted, optionally narrowed to one status."""
        self.sessions.require(account, Capability.VIEW_OWN_COMPLAINTS)
        return student_view(await self.storage.get_complaints(), account, status)

    async def dashboard_stats(self, account: Account) -> QueueStats:
        """Counters over all complaints for staff, over own complaints for students."""
        complaints = await self.storage.get_complaints()
        if Capability.VIEW_ALL_COMPLAINTS in self.sessions.capabilities(account):
            return compute_stats(complaints)
        self.sessions.require(account, Capability.VIEW_OWN_COMPLAINTS)
        return compute_stats(student_view(complaints, account))

    async def close(self) -> None:
        """Release backend connections (if any)."""
        if isinstance(self.store, RedisRecordStore):
            with contextlib.suppress(Exception):
                await self.store.close()
        logger.info("app.shutdown")


async def create_complaint_box(
    config: Settings | None = None,
    *,
    store: RecordStore | None = None,
    setup_logging: bool = True,
) -> ComplaintBox:
    """Build and bootstrap a :class:`ComplaintBox`.

    Parameters
    ----------
    config:
        Settings to use; defaults to the module-level ``settings``.
    store:
        Record store to inject.  When omitted, the backend named by
        ``config.storage_backend`` is created.
    setup_logging:
        Whether to (re)configure structlog from *config*.
    """
    config = config or settings
    if setup_logging:
        configure_logging(config)

    logger.info("app.startup", env=config.env, storage_backend=config.storage_backend)

    record_store = store if store is not None else create_record_store(config)
    storage = RecordStorage(record_store)
    seeded = await storage.initialize_default_accounts(config)

    sessions = SessionManager(storage, admin_access_code=config.admin_access_code)
    lifecycle = ComplaintLifecycle(storage, sessions, id_prefix=config.complaint_id_prefix)

    logger.info("app.ready", super_admin_seeded=seeded)
    return ComplaintBox(
        settings=config,
        store=record_store,
        storage=storage,
        sessions=sessions,
        lifecycle=lifecycle,
    )
