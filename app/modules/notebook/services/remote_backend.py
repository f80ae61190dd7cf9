"""
Async client for the real RAG backend.

Failures are raised as UpstreamError subclasses. They are never turned into
the demo fallback answer, so callers can tell "nothing relevant found" apart
from "the backend is down".
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from app.modules.notebook.errors import (
    BackendStatusError,
    BackendTimeoutError,
    BackendUnavailableError,
    MalformedPayloadError,
)
from app.modules.notebook.schema.chat import ChatAnswer, ChatRequest
from app.modules.notebook.schema.documents import DocumentListing, IndexReport, IndexRequest
from app.modules.notebook.schema.health import HealthReport
from app.modules.notebook.services.latency import CancellationToken
from core.utils.perf import profile_stage

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class RemoteBackend:
    def __init__(
        self,
        base_url: str,
        timeout: float = 120.0,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
        )

    async def _request(
        self,
        method: str,
        path: str,
        token: Optional[CancellationToken] = None,
        error_body_ok: bool = False,
        **kwargs: Any,
    ) -> Any:
        call = self._client.request(method, path, **kwargs)
        try:
            response = await (token.run(call) if token is not None else call)
        except httpx.TimeoutException as e:
            logger.error(f"{method} {path} timed out: {e}")
            raise BackendTimeoutError(f"{method} {path} timed out") from e
        except httpx.RequestError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise BackendUnavailableError(f"Cannot connect to backend at {self.base_url}") from e

        if response.is_error:
            logger.error(f"{method} {path} returned {response.status_code}")
            body = self._status_body(response) if error_body_ok else None
            if body is not None:
                return body
            raise BackendStatusError(response.status_code, detail=response.text[:200] or None)

        try:
            return response.json()
        except ValueError as e:
            raise MalformedPayloadError(f"{method} {path} returned a non-JSON body") from e

    @staticmethod
    def _status_body(response: httpx.Response) -> Optional[dict]:
        """JSON body of an error reply if it reports a non-healthy status, e.g. a 503 from /health."""
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and isinstance(body.get("status"), str) and body["status"] != "healthy":
            return body
        return None

    @staticmethod
    def _parse(model: Type[M], payload: Any) -> M:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise MalformedPayloadError(f"Unexpected {model.__name__} payload: {e.error_count()} error(s)") from e

    @profile_stage("remote.health")
    async def health(self, token: Optional[CancellationToken] = None) -> HealthReport:
        payload = await self._request("GET", "/health", token=token, error_body_ok=True)
        return self._parse(HealthReport, payload)

    @profile_stage("remote.list_documents")
    async def list_documents(
        self, limit: int = 100, token: Optional[CancellationToken] = None
    ) -> DocumentListing:
        payload = await self._request("GET", "/documents/list", token=token, params={"limit": limit})
        if isinstance(payload, dict):
            payload.setdefault("limit", limit)
        return self._parse(DocumentListing, payload)

    @profile_stage("remote.index_folder")
    async def index_folder(
        self,
        folder_path: str,
        recursive: bool = True,
        file_types: Optional[List[str]] = None,
        token: Optional[CancellationToken] = None,
    ) -> IndexReport:
        body = IndexRequest(folder_path=folder_path, recursive=recursive, file_types=file_types)
        payload = await self._request("POST", "/documents/index", token=token, json=body.model_dump())
        return self._parse(IndexReport, payload)

    @profile_stage("remote.chat")
    async def chat(self, message: str, token: Optional[CancellationToken] = None) -> ChatAnswer:
        body = ChatRequest(message=message, stream=False)
        payload = await self._request("POST", "/chat/message", token=token, json=body.model_dump())
        # An empty answer is reported as such, not as a broken payload
        if isinstance(payload, dict) and payload.get("response") is None:
            payload["response"] = ""
        return self._parse(ChatAnswer, payload)

    async def aclose(self) -> None:
        await self._client.aclose()
