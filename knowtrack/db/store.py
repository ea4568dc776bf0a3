from __future__ import annotations

import logging
from typing import Any, Dict, List

import httpx

from knowtrack.config import Settings
from knowtrack.errors import StoreError

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def _error_message(response: httpx.Response) -> str:
    """Pull the store's own error text out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error_description", "msg", "error"):
            if body.get(key):
                return str(body[key])
    text = response.text.strip()
    return text or f"Store request failed with HTTP {response.status_code}."


def _decode(response: httpx.Response, method: str, path: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        logger.warning("store %s %s returned a non-JSON body", method, path)
        raise StoreError(f"Store returned an unreadable response for {path}.", status=response.status_code) from e


class StoreClient:
    """Thin client for a hosted Postgres REST endpoint.

    Reads go out with the anonymous key; writes carry the signed-in user's
    access token when one is supplied. Nothing is retried: a failure raises
    StoreError with the remote message.
    """

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None):
        self.settings = settings
        self._http = httpx.Client(
            base_url=settings.STORE_URL,
            timeout=settings.TIMEOUT,
            transport=transport,
            headers={"apikey": settings.STORE_KEY},
        )

    def close(self) -> None:
        self._http.close()

    def _headers(self, access_token: str | None, **extra: str) -> Dict[str, str]:
        headers = {"Authorization": f"Bearer {access_token or self.settings.STORE_KEY}"}
        headers.update(extra)
        return headers

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("store %s %s failed: %s", method, path, e)
            raise StoreError(str(e) or e.__class__.__name__) from e
        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning("store %s %s -> %s: %s", method, path, response.status_code, message)
            raise StoreError(message, status=response.status_code)
        return response

    # -------------
    # Table access
    # -------------
    def list(self, table: str, order: str = "created_at") -> List[Row]:
        response = self._send(
            "GET",
            f"/rest/v1/{table}",
            params={"select": "*", "order": f"{order}.desc"},
            headers=self._headers(None),
        )
        rows = _decode(response, "GET", f"/rest/v1/{table}")
        if not isinstance(rows, list):
            raise StoreError(f"Store returned no row list for {table}.", status=response.status_code)
        logger.debug("fetched %d rows from %s", len(rows), table)
        return rows

    def insert(self, table: str, row: Row, access_token: str | None = None) -> Row:
        response = self._send(
            "POST",
            f"/rest/v1/{table}",
            json=[row],
            headers=self._headers(access_token, Prefer="return=representation"),
        )
        created = _decode(response, "POST", f"/rest/v1/{table}")
        if isinstance(created, list):
            if not created:
                raise StoreError(f"Insert into {table} returned no row.", status=response.status_code)
            created = created[0]
        return created

    def update(self, table: str, row_id: int, fields: Row, access_token: str | None = None) -> None:
        self._send(
            "PATCH",
            f"/rest/v1/{table}",
            params={"id": f"eq.{row_id}"},
            json=fields,
            headers=self._headers(access_token, Prefer="return=minimal"),
        )

    def delete(self, table: str, row_id: int, access_token: str | None = None) -> None:
        self._send(
            "DELETE",
            f"/rest/v1/{table}",
            params={"id": f"eq.{row_id}"},
            headers=self._headers(access_token, Prefer="return=minimal"),
        )

    # -------------
    # Auth
    # -------------
    def sign_in(self, email: str, password: str) -> Row:
        response = self._send(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return _decode(response, "POST", "/auth/v1/token")

    def sign_out(self, access_token: str) -> None:
        self._send("POST", "/auth/v1/logout", headers=self._headers(access_token))

