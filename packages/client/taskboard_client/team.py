"""
Board visibility by reporting line.

An Admin sees their own tasks plus those of everyone reporting directly to
them, optionally narrowed to one assignee. A User sees only their own.
"""

from __future__ import annotations

from typing import Optional, Sequence

from taskboard_shared.schemas.common import UserRole
from taskboard_shared.schemas.tasks import Task
from taskboard_shared.schemas.users import ReportingEdge, UserPublic


def reportee_ids(user: UserPublic, reporting: Sequence[ReportingEdge]) -> list[str]:
    return [edge.user_id for edge in reporting if edge.report_to_user_id == user.id]


def team_ids(user: UserPublic, reporting: Sequence[ReportingEdge]) -> list[str]:
    if user.role == UserRole.ADMIN:
        return [user.id, *reportee_ids(user, reporting)]
    return [user.id]


def visible_tasks(
    tasks: Sequence[Task],
    user: UserPublic,
    reporting: Sequence[ReportingEdge],
    assignee_id: Optional[str] = None,
) -> list[Task]:
    team = set(team_ids(user, reporting))
    visible = [t for t in tasks if t.assignee_id in team]
    if assignee_id and user.role == UserRole.ADMIN:
        visible = [t for t in visible if t.assignee_id == assignee_id]
    return visible


def assignable_users(
    user: UserPublic,
    users: Sequence[UserPublic],
    reporting: Sequence[ReportingEdge],
) -> list[UserPublic]:
    team = set(team_ids(user, reporting))
    return [u for u in users if u.id in team]
