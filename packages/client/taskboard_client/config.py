"""
Configuration loading and validation.

Loads client configuration from a YAML file. The password is resolved from
an environment variable and never stored in the file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    url: str = "http://localhost:3001/api"
    verify_tls: bool = True
    request_timeout_seconds: int = 30


class UserConfig(BaseModel):
    username: str
    password_env: str = "TASKBOARD_PASSWORD"

    @property
    def password(self) -> str | None:
        return os.environ.get(self.password_env)


class BoardConfig(BaseModel):
    # Send the task version with updates so stale edits are rejected (409)
    send_versions: bool = False


class LoggingConfig(BaseModel):
    level: str = "warning"
    format: Literal["json", "text"] = "text"


class ClientConfig(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    user: UserConfig | None = None
    board: BoardConfig = Field(default_factory=BoardConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: str | Path) -> ClientConfig:
    """Load and validate client configuration from a YAML file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    return ClientConfig.model_validate(raw)
