"""FastAPI dependencies: services live on ``app.state``, built once by create_app."""

from fastapi import Request

from taskboard_server.services.descriptions import DescriptionService
from taskboard_server.services.tasks import TaskService
from taskboard_server.services.users import UserService


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_description_service(request: Request) -> DescriptionService:
    return request.app.state.description_service
