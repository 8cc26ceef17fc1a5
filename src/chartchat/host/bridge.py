"""
ChartChat Host - HTTP embedding bridge.

The embedded report lives in the user's browser; a bridge relays authoring
calls to it. Each session is addressed under ``/sessions/{session_id}``.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from chartchat.exceptions import (
    HostException,
    HostTimeoutException,
    NothingToRemoveException,
    RoleUnavailableException,
)
from chartchat.host.base import FieldTarget, Page, Report, Visual

logger = logging.getLogger(__name__)


def _segment(value: str | int) -> str:
    return quote(str(value), safe="")


def _error_code(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return body["error"].get("code")
    return None


class BridgeClient:
    """Thin JSON client for one session on the embedding bridge."""

    def __init__(
        self,
        base_url: str,
        session_id: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout_seconds = timeout_seconds
        self._client = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/sessions/{_segment(session_id)}",
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        role: str | None = None,
        index: int | None = None,
    ) -> Any:
        operation = f"{method} {path}"
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TimeoutException:
            raise HostTimeoutException(operation, self.timeout_seconds)
        except httpx.HTTPError as e:
            logger.error(f"Bridge request failed: {operation}: {e}")
            raise HostException(f"Bridge unreachable: {e}", details={"operation": operation})

        if response.status_code >= 400:
            code = _error_code(response)
            if code == "ROLE_NOT_FOUND" and role is not None:
                raise RoleUnavailableException(role)
            if method == "DELETE" and index is not None and (
                code == "FIELD_NOT_FOUND" or response.status_code in (404, 410)
            ):
                raise NothingToRemoveException(role or "", index)
            raise HostException(
                f"Bridge rejected {operation} with status {response.status_code}",
                details={"operation": operation, "status": response.status_code, "host_code": code},
            )

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.error(f"Bridge returned malformed JSON for {operation}")
            raise HostException(
                "Bridge returned malformed JSON",
                details={"operation": operation, "status": response.status_code},
            )

    async def aclose(self) -> None:
        await self._client.aclose()


class BridgeVisual(Visual):
    def __init__(self, client: BridgeClient, page_name: str, data: dict[str, Any]):
        self._client = client
        self._page_name = page_name
        self.name = data["name"]
        self.type = data["type"]
        self.title = data.get("title")

    def _path(self, suffix: str) -> str:
        return f"/pages/{_segment(self._page_name)}/visuals/{_segment(self.name)}{suffix}"

    async def get_data_fields(self, role: str) -> list[FieldTarget]:
        data = await self._client.request("GET", self._path(f"/roles/{_segment(role)}/fields"), role=role)
        return [FieldTarget.model_validate(item) for item in data or []]

    async def remove_data_field(self, role: str, index: int) -> None:
        await self._client.request(
            "DELETE",
            self._path(f"/roles/{_segment(role)}/fields/{index}"),
            role=role,
            index=index,
        )

    async def add_data_field(self, role: str, target: FieldTarget) -> None:
        await self._client.request(
            "POST",
            self._path(f"/roles/{_segment(role)}/fields"),
            json=target.to_wire(),
            role=role,
        )

    async def change_type(self, kind: str) -> None:
        await self._client.request("PUT", self._path("/type"), json={"type": kind})
        self.type = kind


class BridgePage(Page):
    def __init__(self, client: BridgeClient, data: dict[str, Any]):
        self._client = client
        self.name = data["name"]
        self.display_name = data.get("displayName")
        self.is_active = bool(data.get("isActive"))

    async def get_visuals(self) -> list[Visual]:
        data = await self._client.request("GET", f"/pages/{_segment(self.name)}/visuals")
        return [BridgeVisual(self._client, self.name, item) for item in data or []]


class BridgeReport(Report):
    def __init__(self, client: BridgeClient):
        self._client = client

    async def get_pages(self) -> list[Page]:
        data = await self._client.request("GET", "/pages")
        return [BridgePage(self._client, item) for item in data or []]

    async def aclose(self) -> None:
        await self._client.aclose()
