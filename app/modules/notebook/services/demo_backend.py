"""
Demo backend: answers every notebook call from static data so the UI works
without the RAG service. Each call sleeps for a short simulated latency.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from app.modules.notebook.schema.chat import ChatAnswer, ChatQuery
from app.modules.notebook.schema.documents import DocumentInfo, DocumentListing, IndexReport
from app.modules.notebook.schema.health import (
    DatabaseStatus,
    HealthReport,
    ModelStatus,
    ServiceStatus,
    SystemStatus,
)
from app.modules.notebook.services.knowledge import SAMPLE_DOCUMENTS, total_chunks
from app.modules.notebook.services.latency import (
    CancellationToken,
    LatencyProfile,
    simulate_latency,
)
from app.modules.notebook.services.resolver import ResponseResolver
from core.utils.perf import profile_stage

logger = logging.getLogger(__name__)

DEMO_LLM_MODEL = "phi3:mini"
DEMO_EMBEDDING_MODEL = "all-minilm:l6-v2"
DEMO_PROCESSING_TIME_S = 2.847


class DemoBackend:
    def __init__(
        self,
        resolver: Optional[ResponseResolver] = None,
        documents: Iterable[DocumentInfo] = SAMPLE_DOCUMENTS,
        latency: LatencyProfile = LatencyProfile(),
    ):
        self.resolver = resolver or ResponseResolver()
        self.documents = tuple(documents)
        self.latency = latency

    @profile_stage("demo.health")
    async def health(self, token: Optional[CancellationToken] = None) -> HealthReport:
        await simulate_latency(self.latency.health, token=token)
        return HealthReport(
            status="healthy",
            services=ServiceStatus(
                ollama="connected",
                chromadb="connected",
                models=ModelStatus(
                    llm=DEMO_LLM_MODEL,
                    embedding=DEMO_EMBEDDING_MODEL,
                    llm_available=True,
                    embedding_available=True,
                ),
            ),
            database=DatabaseStatus(
                document_count=len(self.documents),
                total_chunks=total_chunks(self.documents),
            ),
            system=SystemStatus(ram_total_gb="16.0", ram_used_gb="6.2", ram_percent="38.8"),
        )

    @profile_stage("demo.list_documents")
    async def list_documents(
        self, limit: int = 100, token: Optional[CancellationToken] = None
    ) -> DocumentListing:
        await simulate_latency(self.latency.listing, token=token)
        return DocumentListing(
            documents=[d.model_copy() for d in self.documents[: max(limit, 0)]],
            total=len(self.documents),
            page=1,
            limit=limit,
        )

    @profile_stage("demo.index_folder")
    async def index_folder(
        self,
        folder_path: str,
        recursive: bool = True,
        file_types: Optional[List[str]] = None,
        token: Optional[CancellationToken] = None,
    ) -> IndexReport:
        # The path is echoed back as-is; nothing is read from disk.
        logger.info(f"Simulating indexing of {folder_path!r} (recursive={recursive}, file_types={file_types})")
        await simulate_latency(self.latency.indexing, token=token)
        return IndexReport(
            status="success",
            folder_path=folder_path,
            indexed_files=len(self.documents),
            failed_files=0,
            total_chunks=total_chunks(self.documents),
            processing_time=DEMO_PROCESSING_TIME_S,
            errors=[],
        )

    @profile_stage("demo.chat")
    async def chat(self, message: str, token: Optional[CancellationToken] = None) -> ChatAnswer:
        await simulate_latency(self.latency.chat_min, self.latency.chat_max, token=token)
        return self.resolver.resolve(ChatQuery(text=message))

    async def aclose(self) -> None:
        return None
