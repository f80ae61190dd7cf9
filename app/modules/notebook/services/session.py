"""
UI-facing application state and the handlers that update it.

The page's state (connection status, indexed documents, transcript, pending
notifications) lives in one AppState object owned by a NotebookSession, which
calls whichever NotebookBackend is configured.
"""

from __future__ import annotations

import copy
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field, fields
from typing import Iterator, List, Optional

from app.modules.notebook.errors import RequestCancelled, UpstreamError
from app.modules.notebook.schema.chat import SourceCitation
from app.modules.notebook.schema.documents import DocumentInfo
from app.modules.notebook.services.backend import NotebookBackend, get_backend
from app.modules.notebook.services.formatting import format_ram_usage
from app.modules.notebook.services.latency import CancellationToken

logger = logging.getLogger(__name__)

APOLOGY_MESSAGE = "Sorry, I encountered an error while processing your message. Please try again."


@dataclass
class Notification:
    level: str  # "info" | "success" | "warning" | "error"
    message: str


@dataclass
class ChatMessage:
    role: str  # "user" | "assistant"
    content: str
    sources: List[SourceCitation] = field(default_factory=list)
    error: bool = False


@dataclass
class AppState:
    status: str = "connecting"
    status_text: str = "Connecting..."
    has_documents: bool = False
    documents: List[DocumentInfo] = field(default_factory=list)
    doc_count: int = 0
    llm_model: str = "-"
    embedding_model: str = "-"
    ram_usage: str = "-"
    folder_path: str = ""
    messages: List[ChatMessage] = field(default_factory=list)
    notifications: List[Notification] = field(default_factory=list)

    def drain_notifications(self) -> List[Notification]:
        pending, self.notifications = self.notifications, []
        return pending


class NotebookSession:
    def __init__(
        self,
        backend: NotebookBackend,
        state: Optional[AppState] = None,
        health_refresh_secs: Optional[float] = None,
    ):
        self.backend = backend
        self.state = state or AppState()
        self.health_refresh_secs = health_refresh_secs

    @classmethod
    def from_settings(cls, settings, backend: Optional[NotebookBackend] = None) -> "NotebookSession":
        # Demo mode pre-fills a sample folder and never polls health
        if settings.DEMO_MODE:
            state = AppState(folder_path=settings.DEFAULT_FOLDER_PATH)
            refresh = None
        else:
            state = AppState()
            refresh = settings.HEALTH_REFRESH_SECS
        return cls(backend or get_backend(settings), state, health_refresh_secs=refresh)

    def _notify(self, level: str, message: str) -> None:
        self.state.notifications.append(Notification(level=level, message=message))

    def _set_status(self, status: str, text: str) -> None:
        self.state.status = status
        self.state.status_text = text

    @contextmanager
    def _discard_on_cancel(self) -> Iterator[None]:
        """Put the state back as it was if the wrapped handler is cancelled."""
        snapshot = copy.deepcopy(self.state)
        try:
            yield
        except RequestCancelled:
            for f in fields(snapshot):
                setattr(self.state, f.name, getattr(snapshot, f.name))
            raise

    def can_send(self, text: str) -> bool:
        return bool(text.strip()) and self.state.has_documents

    async def start(self, token: Optional[CancellationToken] = None) -> AppState:
        logger.info("Initializing Local NotebookLM session...")
        await self.check_health(token=token)
        await self.load_documents(token=token)
        return self.state

    async def check_health(self, token: Optional[CancellationToken] = None) -> AppState:
        try:
            report = await self.backend.health(token=token)
        except UpstreamError as e:
            logger.error(f"Health check failed: {e}")
            self._set_status("error", "Disconnected")
            self._notify("error", "Cannot connect to server. Make sure the backend is running.")
            return self.state

        if not report.healthy:
            self._set_status("error", "Unhealthy")
            self._notify("error", "System health check failed")
            return self.state

        self._set_status("connected", "Connected")
        self.state.llm_model = report.services.models.llm
        self.state.embedding_model = report.services.models.embedding
        self.state.doc_count = report.database.document_count
        self.state.ram_usage = format_ram_usage(report.system)
        if not report.models_available:
            self._notify("warning", "Warning: Some models are not available. Please check Ollama.")
        return self.state

    async def load_documents(self, limit: int = 100, token: Optional[CancellationToken] = None) -> AppState:
        try:
            listing = await self.backend.list_documents(limit=limit, token=token)
        except UpstreamError as e:
            logger.error(f"Failed to load documents: {e}")
            self._notify("error", "Failed to load documents")
            return self.state

        if listing.documents:
            self.state.has_documents = True
            self.state.documents = list(listing.documents)
            self.state.doc_count = listing.total
        else:
            self.state.has_documents = False
            self.state.documents = []
            self.state.doc_count = 0
        return self.state

    async def index_folder(self, folder_path: str, token: Optional[CancellationToken] = None) -> AppState:
        folder_path = folder_path.strip()
        if not folder_path:
            self._notify("warning", "Please enter a folder path")
            return self.state

        with self._discard_on_cancel():
            self.state.folder_path = folder_path
            try:
                report = await self.backend.index_folder(folder_path, recursive=True, file_types=None, token=token)
            except UpstreamError as e:
                logger.error(f"Indexing failed: {e}")
                self._notify("error", "Failed to index documents. Check logs for details.")
                return self.state

            if report.status == "success":
                self._notify(
                    "success",
                    f"Successfully indexed {report.indexed_files} files in {report.processing_time:.2f}s",
                )
                await self.load_documents(token=token)
                await self.check_health(token=token)
            else:
                self._notify("warning", f"Indexing completed with errors. {report.failed_files} files failed.")
                if report.errors:
                    logger.error(f"Indexing errors: {report.errors}")
                await self.load_documents(token=token)
        return self.state

    async def send_message(self, text: str, token: Optional[CancellationToken] = None) -> AppState:
        message = text.strip()
        if not message or not self.state.has_documents:
            return self.state

        with self._discard_on_cancel():
            self.state.messages.append(ChatMessage(role="user", content=message))
            try:
                answer = await self.backend.chat(message, token=token)
            except UpstreamError as e:
                logger.error(f"Chat failed: {e}")
                self.state.messages.append(ChatMessage(role="assistant", content=APOLOGY_MESSAGE, error=True))
                self._notify("error", "Failed to get response")
                return self.state

            if answer.response:
                self.state.messages.append(
                    ChatMessage(role="assistant", content=answer.response, sources=list(answer.sources))
                )
            else:
                self._notify("error", "Received empty response from server")
        return self.state

    def clear_chat(self) -> AppState:
        self.state.messages = []
        self._notify("success", "Chat cleared")
        return self.state

    async def monitor_health(self, token: CancellationToken, interval: Optional[float] = None) -> None:
        """Re-run the health check every ``interval`` seconds until ``token`` is cancelled."""
        interval = interval if interval is not None else self.health_refresh_secs
        if not interval:
            return
        while True:
            try:
                await token.wait(interval)
                await self.check_health(token=token)
            except RequestCancelled:
                logger.debug("Health monitor stopped")
                return
