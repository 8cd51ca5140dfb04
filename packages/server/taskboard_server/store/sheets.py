"""
Google Sheets row store.

Talks to the Sheets v4 ``values`` REST API with httpx. Each collection is a
sheet of the same name whose first row is the header. Every write uses
``valueInputOption=RAW`` so timestamps come back exactly as written.

No retries happen here; transport failures surface as StoreUnavailableError.
"""

from __future__ import annotations

import time
from typing import Any, Protocol, Sequence

import httpx
import jwt
import structlog

from taskboard_server.core.errors import StoreUnavailableError
from taskboard_server.store.base import Collection, Row
from taskboard_server.store.codec import width

log = structlog.get_logger()

SHEETS_API_URL = "https://sheets.googleapis.com/v4/spreadsheets"
TOKEN_URL = "https://oauth2.googleapis.com/token"
SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
TOKEN_LIFETIME_SECONDS = 3600
TOKEN_REFRESH_MARGIN_SECONDS = 60


def column_letter(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA."""
    letters = ""
    index += 1
    while index:
        index, rem = divmod(index - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


class TokenProvider(Protocol):
    async def token(self) -> str: ...


class ServiceAccountTokens:
    """OAuth access tokens for a service account via a signed JWT assertion."""

    def __init__(self, email: str, private_key: str, client: httpx.AsyncClient):
        self._email = email
        # Keys pasted into env vars usually carry literal "\n" sequences
        self._private_key = private_key.replace("\\n", "\n")
        self._client = client
        self._token: str | None = None
        self._expires_at = 0.0

    async def token(self) -> str:
        if self._token and time.time() < self._expires_at - TOKEN_REFRESH_MARGIN_SECONDS:
            return self._token

        now = int(time.time())
        assertion = jwt.encode(
            {
                "iss": self._email,
                "scope": SHEETS_SCOPE,
                "aud": TOKEN_URL,
                "iat": now,
                "exp": now + TOKEN_LIFETIME_SECONDS,
            },
            self._private_key,
            algorithm="RS256",
        )
        resp = await self._client.post(
            TOKEN_URL,
            data={
                "grant_type": "urn:ietf:params:oauth:grant-type:jwt-bearer",
                "assertion": assertion,
            },
        )
        resp.raise_for_status()
        body = resp.json()
        self._token = body["access_token"]
        self._expires_at = now + int(body.get("expires_in", TOKEN_LIFETIME_SECONDS))
        log.debug("store.token_refreshed", expires_in=body.get("expires_in"))
        return self._token


class SheetsRowStore:
    def __init__(
        self,
        sheet_id: str,
        tokens: TokenProvider,
        client: httpx.AsyncClient,
    ):
        self._base_url = f"{SHEETS_API_URL}/{sheet_id}/values"
        self._tokens = tokens
        self._client = client

    @classmethod
    def from_service_account(
        cls,
        sheet_id: str,
        email: str,
        private_key: str,
        request_timeout: int = 30,
    ) -> "SheetsRowStore":
        client = httpx.AsyncClient(timeout=httpx.Timeout(request_timeout))
        return cls(sheet_id, ServiceAccountTokens(email, private_key, client), client)

    async def close(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _span(collection: Collection, first: int | None = None, last: int | None = None) -> str:
        end = column_letter(width(collection) - 1)
        if first is None:
            return f"{collection.value}!A:{end}"
        if last is None:
            return f"{collection.value}!A{first}:{end}"
        return f"{collection.value}!A{first}:{end}{last}"

    async def _request(
        self, method: str, range_: str, *, suffix: str = "", **kwargs: Any
    ) -> dict[str, Any]:
        try:
            token = await self._tokens.token()
            resp = await self._client.request(
                method,
                f"{self._base_url}/{range_}{suffix}",
                headers={"Authorization": f"Bearer {token}"},
                **kwargs,
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            log.error("store.unavailable", range=range_, status=exc.response.status_code)
            raise StoreUnavailableError(
                f"Sheets API returned {exc.response.status_code} for {range_}"
            ) from exc
        except httpx.HTTPError as exc:
            log.error("store.unavailable", range=range_, error=str(exc))
            raise StoreUnavailableError(f"Sheets API unreachable for {range_}: {exc}") from exc
        return resp.json() if resp.content else {}

    async def read_range(self, collection: Collection) -> list[Row]:
        body = await self._request("GET", self._span(collection, 2))
        return [[str(cell) for cell in row] for row in body.get("values", [])]

    async def append(self, collection: Collection, row: Sequence[str]) -> None:
        await self._request(
            "POST",
            self._span(collection),
            suffix=":append",
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            json={"values": [list(row)]},
        )

    async def update_cell(
        self, collection: Collection, position: int, column: int, value: str
    ) -> None:
        await self._request(
            "PUT",
            f"{collection.value}!{column_letter(column)}{position}",
            params={"valueInputOption": "RAW"},
            json={"values": [[value]]},
        )

    async def clear_row(self, collection: Collection, position: int) -> None:
        await self._request("POST", self._span(collection, position, position), suffix=":clear")
