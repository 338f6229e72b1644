"""Tests for complaint submission and the status state machine."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from src.core.exceptions import PermissionDeniedError
from src.models.account import Account
from src.models.enums import ComplaintCategory, ComplaintStatus, Department, Priority
from src.services.lifecycle import ComplaintLifecycle
from src.services.storage import RecordStorage

if TYPE_CHECKING:
    from tests.conftest import SteppingClock

WATER_TITLE = "Urgent: broken water pipe in hostel room"
WATER_DESCRIPTION = "leak is getting worse, emergency repair needed"


# -----------------------------------------------------------------------
# Submission
# -----------------------------------------------------------------------


class TestSubmit:
    async def test_water_pipe_scenario(
        self, lifecycle: ComplaintLifecycle, student: Account, clock: SteppingClock
    ) -> None:
        complaint = await lifecycle.submit(student, WATER_TITLE, WATER_DESCRIPTION)
        assert complaint.category == ComplaintCategory.WATER_SANITATION
        assert complaint.department == Department.WATER_SANITATION
        assert complaint.priority == Priority.URGENT
        assert complaint.status == ComplaintStatus.PENDING
        assert complaint.resolved_at is None
        assert complaint.submitted_at == clock.last
        assert complaint.id.startswith("CMP")

    async def test_submitter_captured_by_value(self, lifecycle: ComplaintLifecycle, student: Account) -> None:
        complaint = await lifecycle.submit(student, "Cold food", "dinner in the canteen was cold")
        assert complaint.student_name == "Asha Verma"
        assert complaint.student_email == "asha@college.edu"
        assert complaint.student_id == "21CS042"

    async def test_missing_student_id_stored_as_empty(self, lifecycle: ComplaintLifecycle, student: Account) -> None:
        anonymous = student.model_copy(update={"student_id": None})
        complaint = await lifecycle.submit(anonymous, "Wifi", "wifi drops at night")
        assert complaint.student_id == ""

    async def test_persisted_before_return(
        self, lifecycle: ComplaintLifecycle, storage: RecordStorage, student: Account
    ) -> None:
        first = await lifecycle.submit(student, "Fan", "ceiling fan is noisy")
        second = await lifecycle.submit(student, "Tap", "tap is leaking")
        stored = await storage.get_complaints()
        assert [c.id for c in stored] == [first.id, second.id], "new complaints are appended in order"
        assert first.id != second.id

    async def test_admin_cannot_submit(self, lifecycle: ComplaintLifecycle, admin: Account) -> None:
        with pytest.raises(PermissionDeniedError):
            await lifecycle.submit(admin, "Fan", "ceiling fan is noisy")

    def test_preview_does_not_persist(self, lifecycle: ComplaintLifecycle) -> None:
        result = lifecycle.preview(WATER_TITLE, WATER_DESCRIPTION)
        assert result.category == ComplaintCategory.WATER_SANITATION
        assert result.priority == Priority.URGENT


# -----------------------------------------------------------------------
# Status updates
# -----------------------------------------------------------------------


class TestUpdateStatus:
    async def test_resolve_then_reopen_scenario(
        self,
        lifecycle: ComplaintLifecycle,
        storage: RecordStorage,
        student: Account,
        admin: Account,
        clock: SteppingClock,
    ) -> None:
        complaint = await lifecycle.submit(student, WATER_TITLE, WATER_DESCRIPTION)

        resolved = await lifecycle.update_status(admin, complaint.id, "resolved", "Pipe replaced")
        resolved_time = clock.last
        assert resolved is not None
        assert resolved.status == ComplaintStatus.RESOLVED
        assert resolved.resolved_at == resolved_time
        assert resolved.admin_notes == "Pipe replaced"
        assert resolved.assigned_to == "Warden Iyer"

        reopened = await lifecycle.update_status(admin, complaint.id, ComplaintStatus.IN_PROGRESS)
        assert reopened is not None
        assert reopened.status == ComplaintStatus.IN_PROGRESS
        assert reopened.admin_notes == "Pipe replaced", "omitted notes must not clear existing notes"
        assert reopened.resolved_at == resolved_time, "resolved_at is never cleared"

        [stored] = await storage.get_complaints()
        assert stored == reopened

    async def test_resolved_at_survives_many_transitions(
        self, lifecycle: ComplaintLifecycle, student: Account, admin: Account, clock: SteppingClock
    ) -> None:
        complaint = await lifecycle.submit(student, "Fan", "fan broken")
        await lifecycle.update_status(admin, complaint.id, "resolved")
        resolved_time = clock.last
        for status in ("in_progress", "rejected", "pending", "in_progress"):
            updated = await lifecycle.update_status(admin, complaint.id, status)
            assert updated is not None
            assert updated.resolved_at == resolved_time

    async def test_resolving_again_restamps(
        self, lifecycle: ComplaintLifecycle, student: Account, admin: Account, clock: SteppingClock
    ) -> None:
        complaint = await lifecycle.submit(student, "Fan", "fan broken")
        await lifecycle.update_status(admin, complaint.id, "resolved")
        first = clock.last
        await lifecycle.update_status(admin, complaint.id, "pending")
        again = await lifecycle.update_status(admin, complaint.id, "resolved")
        assert again is not None
        assert again.resolved_at == clock.last
        assert again.resolved_at > first

    async def test_non_resolved_status_leaves_resolved_at_absent(
        self, lifecycle: ComplaintLifecycle, student: Account, admin: Account
    ) -> None:
        complaint = await lifecycle.submit(student, "Fan", "fan broken")
        updated = await lifecycle.update_status(admin, complaint.id, "rejected", "Duplicate")
        assert updated is not None
        assert updated.status == ComplaintStatus.REJECTED
        assert updated.resolved_at is None

    async def test_empty_notes_preserve_previous(
        self, lifecycle: ComplaintLifecycle, student: Account, admin: Account
    ) -> None:
        complaint = await lifecycle.submit(student, "Fan", "fan broken")
        await lifecycle.update_status(admin, complaint.id, "in_progress", "Electrician booked")
        updated = await lifecycle.update_status(admin, complaint.id, "in_progress", "")
        assert updated is not None
        assert updated.admin_notes == "Electrician booked"

    async def test_new_notes_overwrite(
        self, lifecycle: ComplaintLifecycle, student: Account, admin: Account
    ) -> None:
        complaint = await lifecycle.submit(student, "Fan", "fan broken")
        await lifecycle.update_status(admin, complaint.id, "in_progress", "Electrician booked")
        updated = await lifecycle.update_status(admin, complaint.id, "resolved", "Fan replaced")
        assert updated is not None
        assert updated.admin_notes == "Fan replaced"

    async def test_assigned_to_set_even_without_status_change(
        self, lifecycle: ComplaintLifecycle, student: Account, admin: Account, super_admin: Account
    ) -> None:
        complaint = await lifecycle.submit(student, "Fan", "fan broken")
        await lifecycle.update_status(admin, complaint.id, "pending")
        updated = await lifecycle.update_status(super_admin, complaint.id, "pending")
        assert updated is not None
        assert updated.assigned_to == "Super Administrator"

    async def test_unknown_id_is_silent_noop(
        self, lifecycle: ComplaintLifecycle, storage: RecordStorage, student: Account, admin: Account
    ) -> None:
        complaint = await lifecycle.submit(student, "Fan", "fan broken")
        before = await storage.get_complaints()
        assert await lifecycle.update_status(admin, "CMPDOESNOTEXIST", "resolved", "x") is None
        assert await storage.get_complaints() == before
        assert before[0].id == complaint.id

    async def test_only_target_complaint_changes(
        self, lifecycle: ComplaintLifecycle, storage: RecordStorage, student: Account, admin: Account
    ) -> None:
        first = await lifecycle.submit(student, "Fan", "fan broken")
        second = await lifecycle.submit(student, "Tap", "tap leaking")
        await lifecycle.update_status(admin, first.id, "resolved")
        stored = {c.id: c for c in await storage.get_complaints()}
        assert stored[first.id].status == ComplaintStatus.RESOLVED
        assert stored[second.id] == second

    async def test_student_cannot_update(self, lifecycle: ComplaintLifecycle, student: Account) -> None:
        complaint = await lifecycle.submit(student, "Fan", "fan broken")
        with pytest.raises(PermissionDeniedError):
            await lifecycle.update_status(student, complaint.id, "resolved")

    async def test_invalid_status_rejected(
        self, lifecycle: ComplaintLifecycle, student: Account, admin: Account
    ) -> None:
        complaint = await lifecycle.submit(student, "Fan", "fan broken")
        with pytest.raises(ValueError):
            await lifecycle.update_status(admin, complaint.id, "closed")
