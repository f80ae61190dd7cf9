from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from app.modules.notebook.schema.chat import ChatAnswer
from app.modules.notebook.schema.documents import DocumentListing, IndexReport
from app.modules.notebook.schema.health import HealthReport
from app.modules.notebook.services.latency import CancellationToken

logger = logging.getLogger(__name__)


class NotebookBackend(Protocol):
    """The four operations the UI relies on. Demo and remote backends return identical shapes."""

    async def health(self, token: Optional[CancellationToken] = None) -> HealthReport: ...

    async def list_documents(
        self, limit: int = 100, token: Optional[CancellationToken] = None
    ) -> DocumentListing: ...

    async def index_folder(
        self,
        folder_path: str,
        recursive: bool = True,
        file_types: Optional[List[str]] = None,
        token: Optional[CancellationToken] = None,
    ) -> IndexReport: ...

    async def chat(self, message: str, token: Optional[CancellationToken] = None) -> ChatAnswer: ...

    async def aclose(self) -> None: ...


def get_backend(settings) -> NotebookBackend:
    """Pick the backend implementation from configuration."""
    if settings.DEMO_MODE:
        from app.modules.notebook.services.demo_backend import DemoBackend
        from app.modules.notebook.services.latency import LatencyProfile

        logger.info("Running in DEMO MODE - responses are simulated")
        return DemoBackend(latency=LatencyProfile.from_settings(settings))

    from app.modules.notebook.services.remote_backend import RemoteBackend

    logger.info(f"Using RAG backend at {settings.API_BASE_URL}")
    return RemoteBackend(
        base_url=settings.API_BASE_URL,
        timeout=settings.REQUEST_TIMEOUT_SECS,
    )
