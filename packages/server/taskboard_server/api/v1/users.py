"""User directory, reporting lines and credential check."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from taskboard_server.api.deps import get_user_service
from taskboard_server.services.users import UserService
from taskboard_shared.schemas.users import LoginRequest, ReportingEdge, UserPublic

router = APIRouter()


@router.get("/users", response_model=List[UserPublic])
async def list_users_endpoint(users: UserService = Depends(get_user_service)):
    return await users.list_users()


@router.get("/reporting", response_model=List[ReportingEdge])
async def list_reporting_endpoint(users: UserService = Depends(get_user_service)):
    return await users.list_reporting()


@router.post("/auth/login", response_model=UserPublic)
async def login_endpoint(
    body: LoginRequest,
    users: UserService = Depends(get_user_service),
):
    """Exchange a username/password pair for the matching user."""
    return await users.authenticate(body.username, body.password)
