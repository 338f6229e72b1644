"""Shared fixtures: in-memory storage, a stepping clock, and sample accounts."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from config.settings import Settings
from src.models.account import SUPER_ADMIN_ID, Account
from src.models.enums import Department, UserRole
from src.services.access import SessionManager
from src.services.lifecycle import ComplaintLifecycle
from src.services.record_store import InMemoryRecordStore
from src.services.storage import RecordStorage


class SteppingClock:
    """Returns a strictly increasing time on every call."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(minutes=1)) -> None:
        self._next = start or datetime(2025, 1, 6, 9, 0, tzinfo=UTC)
        self._step = step
        self.last: datetime | None = None

    def __call__(self) -> datetime:
        self.last = self._next
        self._next = self._next + self._step
        return self.last


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None, storage_backend="memory", log_format="console")


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def storage(store: InMemoryRecordStore) -> RecordStorage:
    return RecordStorage(store)


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def sessions(storage: RecordStorage, test_settings: Settings) -> SessionManager:
    return SessionManager(storage, admin_access_code=test_settings.admin_access_code)


@pytest.fixture
def lifecycle(storage: RecordStorage, sessions: SessionManager, clock: SteppingClock) -> ComplaintLifecycle:
    return ComplaintLifecycle(storage, sessions, clock=clock)


@pytest.fixture
def student() -> Account:
    return Account(
        id="1736150000000",
        name="Asha Verma",
        email="asha@college.edu",
        role=UserRole.STUDENT,
        student_id="21CS042",
    )


@pytest.fixture
def other_student() -> Account:
    return Account(
        id="1736150000999",
        name="Ravi Kumar",
        email="ravi@college.edu",
        role=UserRole.STUDENT,
        student_id="21ME007",
    )


@pytest.fixture
def admin() -> Account:
    return Account(
        id="1736150001234",
        name="Warden Iyer",
        email="iyer@college.edu",
        role=UserRole.ADMIN,
        department=Department.HOSTEL,
    )


@pytest.fixture
def super_admin() -> Account:
    return Account(
        id=SUPER_ADMIN_ID,
        name="Super Administrator",
        email="superadmin@college.edu",
        role=UserRole.ADMIN,
        department=Department.INFRASTRUCTURE,
    )
