"""Account records: an identity with a role."""

from __future__ import annotations

from typing import Final

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.models.enums import Department, UserRole

SUPER_ADMIN_ID: Final[str] = "superadmin"


class Account(BaseModel):
    """A registered student or staff identity.

    ``department`` is the home department for students and the managed
    department for admins.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    name: str
    email: str
    role: UserRole = UserRole.STUDENT
    student_id: str | None = None
    department: Department | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_super_admin(self) -> bool:
        return self.is_admin and self.id == SUPER_ADMIN_ID

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
