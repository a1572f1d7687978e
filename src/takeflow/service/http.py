"""HTTP client for the file service API."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from takeflow.config.models import ServiceSettings
from takeflow.incoming.models import PendingFile
from takeflow.naming.models import SuggestedNaming

from .errors import TransportError
from .interface import RenameLedger, RenameRequest, RenameResponse, TrashResponse, UndoResponse

LOGGER = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_PENDING_LIST = TypeAdapter(List[PendingFile])


class HttpFileService:
    """File service reached over its JSON HTTP API.

    Structured ``{"success": false, "error": ...}`` bodies are returned as responses
    whatever the status code; anything else that fails raises ``TransportError``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            headers={"Content-Type": "application/json"},
        )

    @classmethod
    def from_settings(cls, settings: ServiceSettings) -> "HttpFileService":
        """Build a client from the ``service`` configuration section."""
        return cls(settings.base_url, timeout=settings.timeout_seconds)

    async def __aenter__(self) -> "HttpFileService":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client when this service created it."""
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------ #
    # FileService                                                        #
    # ------------------------------------------------------------------ #

    async def rename(self, request: RenameRequest) -> RenameResponse:
        payload = request.model_dump(mode="json", by_alias=True)
        return await self._call("POST", "/api/rename", RenameResponse, json=payload)

    async def trash(self, path: str) -> TrashResponse:
        return await self._call("POST", "/api/trash", TrashResponse, json={"path": path})

    async def undo(self, rename_id: str) -> UndoResponse:
        return await self._call(
            "POST", "/api/recordings/undo-rename", UndoResponse, json={"id": rename_id}
        )

    async def list_renames(self) -> RenameLedger:
        return await self._call("GET", "/api/recordings/recent-renames", RenameLedger)

    async def list_pending(self) -> List[PendingFile]:
        data = await self._send("GET", "/api/files")
        try:
            return _PENDING_LIST.validate_python(data)
        except ValidationError as exc:
            raise TransportError(f"Malformed response from /api/files: {exc}") from exc

    async def suggested_naming(self) -> SuggestedNaming:
        return await self._call("GET", "/api/suggested-naming", SuggestedNaming)

    # ------------------------------------------------------------------ #
    # Internal helpers                                                   #
    # ------------------------------------------------------------------ #

    async def _call(
        self,
        method: str,
        url: str,
        model: Type[ModelT],
        *,
        json: Optional[dict[str, Any]] = None,
    ) -> ModelT:
        data = await self._send(method, url, json=json, structured="success" in model.model_fields)
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise TransportError(f"Malformed response from {url}: {exc}") from exc

    async def _send(
        self,
        method: str,
        url: str,
        *,
        json: Optional[dict[str, Any]] = None,
        structured: bool = False,
    ) -> Any:
        try:
            response = await self._client.request(method, url, json=json)
        except httpx.HTTPError as exc:
            LOGGER.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(str(exc) or "Request failed") from exc

        try:
            data = response.json()
        except ValueError:
            data = None

        if structured and isinstance(data, dict) and "success" in data:
            return data

        if response.is_error:
            message = data.get("error") if isinstance(data, dict) else None
            LOGGER.warning("%s %s returned %s", method, url, response.status_code)
            raise TransportError(message or f"Request failed with status {response.status_code}")

        if data is None:
            raise TransportError(f"Empty or non-JSON response from {url}")
        return data


__all__ = ["HttpFileService"]
