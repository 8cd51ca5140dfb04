"""
User directory and reporting lines.

Credentials are compared by exact equality against the Users collection;
passwords never leave this module.
"""

from __future__ import annotations

import structlog

from taskboard_server.core.errors import InvalidCredentialsError
from taskboard_server.store.base import Collection, RowStore
from taskboard_server.store.tables import EntityTable
from taskboard_shared.schemas.users import ReportingEdge, User, UserPublic

log = structlog.get_logger()


class UserService:
    def __init__(self, store: RowStore):
        self.users: EntityTable[User] = EntityTable(store, Collection.USERS)
        self.reporting: EntityTable[ReportingEdge] = EntityTable(store, Collection.REPORTING)

    async def list_users(self) -> list[UserPublic]:
        return [user.public() for user in await self.users.all()]

    async def list_reporting(self) -> list[ReportingEdge]:
        return await self.reporting.all()

    async def authenticate(self, username: str, password: str) -> UserPublic:
        for user in await self.users.all():
            if user.username == username and user.password == password:
                log.info("auth.login", user_id=user.id)
                return user.public()
        log.warning("auth.login_failed", username=username)
        raise InvalidCredentialsError()
