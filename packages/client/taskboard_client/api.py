"""
HTTP client for the TaskBoard API.

Every failure, transport or HTTP, surfaces as ApiError. Nothing is retried.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from taskboard_shared.schemas.tasks import Task, TaskCreate, TaskUpdate
from taskboard_shared.schemas.users import Bootstrap, ReportingEdge, UserPublic

log = structlog.get_logger()


class ApiError(Exception):
    def __init__(self, message: str, status: int | None = None, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


class TaskBoardAPI:
    def __init__(
        self,
        base_url: str,
        verify_tls: bool = True,
        request_timeout: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._verify_tls = verify_tls
        self._request_timeout = request_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def open(self) -> None:
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._request_timeout),
            verify=self._verify_tls,
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "TaskBoardAPI":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _request(self, method: str, path: str, body: Any = None) -> httpx.Response:
        assert self._client
        url = f"{self._base_url}{path}"
        try:
            resp = await self._client.request(method, url, json=body)
        except httpx.HTTPError as exc:
            log.error("api.unreachable", method=method, path=path, error=str(exc))
            raise ApiError(f"{method} {path} failed: {exc}") from exc

        if resp.is_error:
            try:
                payload = resp.json()
            except ValueError:
                payload = {}
            message = payload.get("message") or f"{method} {path} returned {resp.status_code}"
            log.error("api.error", method=method, path=path, status=resp.status_code)
            raise ApiError(message, resp.status_code, payload.get("code"))
        return resp

    # --- Reads ---

    async def bootstrap(self) -> Bootstrap:
        resp = await self._request("GET", "/bootstrap")
        return Bootstrap.model_validate(resp.json())

    async def list_tasks(self) -> list[Task]:
        resp = await self._request("GET", "/tasks")
        return [Task.model_validate(item) for item in resp.json()]

    async def list_users(self) -> list[UserPublic]:
        resp = await self._request("GET", "/users")
        return [UserPublic.model_validate(item) for item in resp.json()]

    async def list_reporting(self) -> list[ReportingEdge]:
        resp = await self._request("GET", "/reporting")
        return [ReportingEdge.model_validate(item) for item in resp.json()]

    async def login(self, username: str, password: str) -> UserPublic:
        resp = await self._request(
            "POST", "/auth/login", {"username": username, "password": password}
        )
        return UserPublic.model_validate(resp.json())

    # --- Mutations ---

    async def create_task(self, task_in: TaskCreate) -> Task:
        resp = await self._request(
            "POST", "/tasks", task_in.model_dump(mode="json", by_alias=True)
        )
        return Task.model_validate(resp.json())

    async def update_task(self, task_id: str, updates: TaskUpdate) -> Task:
        resp = await self._request(
            "PUT",
            f"/tasks/{task_id}",
            updates.model_dump(mode="json", by_alias=True, exclude_unset=True),
        )
        return Task.model_validate(resp.json())

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")

    async def add_remark(self, task_id: str, text: str) -> Task:
        resp = await self._request("POST", f"/tasks/{task_id}/remarks", {"text": text})
        return Task.model_validate(resp.json())

    async def start_timer(self, task_id: str) -> Task:
        resp = await self._request("POST", f"/tasks/{task_id}/timer/start")
        return Task.model_validate(resp.json())

    async def stop_timer(self, task_id: str) -> Task:
        resp = await self._request("POST", f"/tasks/{task_id}/timer/stop")
        return Task.model_validate(resp.json())

    async def describe(self, title: str) -> str:
        resp = await self._request("POST", "/tasks/describe", {"title": title})
        return resp.json()["description"]
