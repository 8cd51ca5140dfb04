"""
Description suggestion tests: placeholders when the generator is missing
or fails, pass-through otherwise.
"""

import pytest
from httpx import AsyncClient, ASGITransport

from taskboard_server.main import create_app
from taskboard_server.services.descriptions import (
    DISABLED_DESCRIPTION,
    FAILED_DESCRIPTION,
    DescriptionService,
)


class EchoGenerator:
    def __init__(self):
        self.calls = []

    async def generate(self, title: str) -> str:
        self.calls.append(title)
        return f"Deliver '{title}' end to end."


class BrokenGenerator:
    async def generate(self, title: str) -> str:
        raise TimeoutError("upstream timed out")


@pytest.mark.asyncio
async def test_disabled_without_generator():
    service = DescriptionService()
    assert await service.describe("Anything") == DISABLED_DESCRIPTION


@pytest.mark.asyncio
async def test_generator_output_is_returned():
    generator = EchoGenerator()
    service = DescriptionService(generator)
    assert await service.describe("Ship v2") == "Deliver 'Ship v2' end to end."
    assert generator.calls == ["Ship v2"]


@pytest.mark.asyncio
async def test_generator_failure_degrades_to_placeholder():
    service = DescriptionService(BrokenGenerator())
    assert await service.describe("Ship v2") == FAILED_DESCRIPTION


@pytest.mark.asyncio
async def test_describe_endpoint_never_fails(settings, store):
    app = create_app(settings=settings, store=store, generator=BrokenGenerator())
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/api/tasks/describe", json={"title": "Ship v2"})
    assert response.status_code == 200
    assert response.json() == {"description": FAILED_DESCRIPTION}


@pytest.mark.asyncio
async def test_describe_endpoint_disabled(client: AsyncClient):
    response = await client.post("/api/tasks/describe", json={"title": "Ship v2"})
    assert response.json() == {"description": DISABLED_DESCRIPTION}
