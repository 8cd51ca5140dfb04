"""
Google Sheets row store tests.

The Sheets REST API is replaced by an httpx.MockTransport that keeps a
small in-memory grid, so ranges, value input options and error mapping
are checked without network access.
"""

from __future__ import annotations

import json
import re
from urllib.parse import unquote

import httpx
import pytest

from taskboard_server.core.errors import StoreUnavailableError
from taskboard_server.store import Collection, SheetsRowStore
from taskboard_server.store.sheets import column_letter

SHEET_ID = "sheet-123"


class StaticTokens:
    async def token(self) -> str:
        return "test-token"


class FakeSheet:
    """Just enough of the values API to back the row store."""

    def __init__(self):
        self.grid: dict[str, list[list[str]]] = {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        assert request.headers["Authorization"] == "Bearer test-token"
        path = unquote(request.url.path)
        match = re.match(rf"/v4/spreadsheets/{SHEET_ID}/values/([^!]+)!([^:]+(?::[A-Z]+\d*)?)(:\w+)?$", path)
        assert match, path
        sheet, span, action = match.groups()
        rows = self.grid.setdefault(sheet, [])

        if request.method == "GET":
            start = int(re.match(r"A(\d+)", span).group(1))
            return httpx.Response(200, json={"values": rows[start - 1:]})
        if action == ":append":
            assert request.url.params["valueInputOption"] == "RAW"
            rows.extend(json.loads(request.content)["values"])
            return httpx.Response(200, json={})
        if action == ":clear":
            position = int(re.match(r"A(\d+)", span).group(1))
            rows[position - 1] = []
            return httpx.Response(200, json={})
        if request.method == "PUT":
            assert request.url.params["valueInputOption"] == "RAW"
            col, position = re.match(r"([A-Z]+)(\d+)$", span).groups()
            row = rows[int(position) - 1]
            index = ord(col) - ord("A")
            row.extend([""] * (index + 1 - len(row)))
            row[index] = json.loads(request.content)["values"][0][0]
            return httpx.Response(200, json={})
        return httpx.Response(400)


@pytest.fixture
def sheet():
    fake = FakeSheet()
    fake.grid["Tasks"] = [["id", "title", "description", "status", "priority", "createdAt", "assigneeId", "version"]]
    fake.grid["Reporting"] = [["id", "userId", "reportToUserId"]]
    return fake


@pytest.fixture
async def sheets_store(sheet):
    client = httpx.AsyncClient(transport=httpx.MockTransport(sheet.handler))
    store = SheetsRowStore(SHEET_ID, StaticTokens(), client)
    yield store
    await store.close()


def test_column_letters():
    assert column_letter(0) == "A"
    assert column_letter(7) == "H"
    assert column_letter(25) == "Z"
    assert column_letter(26) == "AA"


@pytest.mark.asyncio
async def test_read_skips_header(sheets_store, sheet):
    sheet.grid["Tasks"].append(["t-1", "Title", "", "To Do", "Low", "2024-03-01T09:00:00+00:00", "u-1"])
    rows = await sheets_store.read_range(Collection.TASKS)
    assert rows == [["t-1", "Title", "", "To Do", "Low", "2024-03-01T09:00:00+00:00", "u-1"]]
    assert unquote(sheet.requests[-1].url.path).endswith("/values/Tasks!A2:H")


@pytest.mark.asyncio
async def test_append_update_clear(sheets_store, sheet):
    await sheets_store.append(Collection.REPORTING, ["rep-1", "u-2", "u-1"])
    await sheets_store.append(Collection.REPORTING, ["rep-2", "u-3", "u-1"])
    await sheets_store.update_cell(Collection.REPORTING, 3, 2, "u-9")
    await sheets_store.clear_row(Collection.REPORTING, 2)

    assert await sheets_store.read_range(Collection.REPORTING) == [[], ["rep-2", "u-3", "u-9"]]
    paths = [unquote(r.url.path).rsplit("/", 1)[-1] for r in sheet.requests]
    assert paths[:4] == [
        "Reporting!A:C:append",
        "Reporting!A:C:append",
        "Reporting!C3",
        "Reporting!A2:C2:clear",
    ]


@pytest.mark.asyncio
async def test_http_error_is_store_unavailable():
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(503)))
    store = SheetsRowStore(SHEET_ID, StaticTokens(), client)
    with pytest.raises(StoreUnavailableError, match="503"):
        await store.read_range(Collection.TASKS)
    await store.close()


@pytest.mark.asyncio
async def test_transport_error_is_store_unavailable():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
    store = SheetsRowStore(SHEET_ID, StaticTokens(), client)
    with pytest.raises(StoreUnavailableError):
        await store.append(Collection.TASKS, ["t-1"])
    await store.close()
