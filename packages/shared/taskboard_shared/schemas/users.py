"""User and reporting-line schemas."""

from __future__ import annotations

from typing import List

from pydantic import Field

from .common import UserRole, WireModel
from .tasks import Task


class UserPublic(WireModel):
    id: str
    username: str
    name: str
    role: UserRole


class User(UserPublic):
    """Full user record as stored. The password is an opaque credential."""
    password: str

    def public(self) -> UserPublic:
        return UserPublic.model_validate(self.model_dump(exclude={"password"}))


class ReportingEdge(WireModel):
    """``user_id`` reports to ``report_to_user_id``."""
    id: str
    user_id: str
    report_to_user_id: str


class LoginRequest(WireModel):
    username: str
    password: str


class Bootstrap(WireModel):
    """Response of GET /bootstrap: everything the board needs at startup."""
    tasks: List[Task] = Field(default_factory=list)
    users: List[UserPublic] = Field(default_factory=list)
    reporting: List[ReportingEdge] = Field(default_factory=list)
