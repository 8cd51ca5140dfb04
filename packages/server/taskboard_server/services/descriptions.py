"""
Task description suggestions.

The text generator is an external collaborator. A missing generator or a
failed call degrades to a fixed placeholder; callers never see an error.
"""

from __future__ import annotations

from typing import Protocol

import structlog

log = structlog.get_logger()

DISABLED_DESCRIPTION = "AI features are disabled. Please configure the API key."
FAILED_DESCRIPTION = "An error occurred while generating the description."


class DescriptionGenerator(Protocol):
    async def generate(self, title: str) -> str:
        """Return a one-paragraph description for ``title``; raise on failure."""
        ...


class DescriptionService:
    def __init__(self, generator: DescriptionGenerator | None = None):
        self._generator = generator

    async def describe(self, title: str) -> str:
        if self._generator is None:
            return DISABLED_DESCRIPTION
        try:
            return await self._generator.generate(title)
        except Exception as exc:
            log.warning("description.generation_failed", title=title, error=str(exc))
            return FAILED_DESCRIPTION
