from fastapi import APIRouter, Depends, HTTPException, Query, Request
import logging

from app.modules.notebook.errors import BackendTimeoutError, UpstreamError
from app.modules.notebook.schema.chat import ChatAnswer, ChatRequest
from app.modules.notebook.schema.documents import DocumentListing, IndexReport, IndexRequest
from app.modules.notebook.schema.health import HealthReport
from app.modules.notebook.services.backend import NotebookBackend

logger = logging.getLogger(__name__)

v1 = APIRouter(tags=["Notebook"])
router = v1  # optional alias for external imports


def get_backend(request: Request) -> NotebookBackend:
    """Backend wired onto app.state at startup."""
    return request.app.state.backend


def _upstream_error(e: UpstreamError) -> HTTPException:
    status_code = 504 if isinstance(e, BackendTimeoutError) else 502
    return HTTPException(status_code=status_code, detail={"error": e.kind, "message": str(e)})


@v1.get("/health", response_model=HealthReport)
async def health(backend: NotebookBackend = Depends(get_backend)) -> HealthReport:
    try:
        return await backend.health()
    except UpstreamError as e:
        logger.error(f"Health check failed: {e}")
        raise _upstream_error(e) from e


@v1.get("/documents/list", response_model=DocumentListing)
async def list_documents(
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of documents to return"),
    backend: NotebookBackend = Depends(get_backend),
) -> DocumentListing:
    try:
        return await backend.list_documents(limit=limit)
    except UpstreamError as e:
        logger.error(f"Listing documents failed: {e}")
        raise _upstream_error(e) from e


@v1.post("/documents/index", response_model=IndexReport)
async def index_documents(
    req: IndexRequest,
    backend: NotebookBackend = Depends(get_backend),
) -> IndexReport:
    """Index a folder of documents for retrieval."""
    try:
        report = await backend.index_folder(
            req.folder_path, recursive=req.recursive, file_types=req.file_types
        )
    except UpstreamError as e:
        logger.error(f"Indexing {req.folder_path!r} failed: {e}")
        raise _upstream_error(e) from e

    logger.info(
        f"Indexed {report.indexed_files} files ({report.failed_files} failed) "
        f"from {req.folder_path!r} in {report.processing_time:.2f}s"
    )
    return report


@v1.post("/chat/message", response_model=ChatAnswer)
async def chat_message(
    req: ChatRequest,
    backend: NotebookBackend = Depends(get_backend),
) -> ChatAnswer:
    """Answer a question about the indexed documents."""
    try:
        return await backend.chat(req.message)
    except UpstreamError as e:
        logger.error(f"Chat failed: {e}")
        raise _upstream_error(e) from e
