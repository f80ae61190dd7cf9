"""
Notebook error taxonomy.

A query that matches nothing is not an error (the resolver answers with the
fallback). Everything below signals that the answer could not be produced at
all and must reach the caller as such.
"""

from typing import Optional


class NotebookError(Exception):
    """Base class for notebook service errors."""

    kind = "notebook_error"


class RequestCancelled(NotebookError):
    """The caller abandoned a pending call."""

    kind = "cancelled"


class UpstreamError(NotebookError):
    """The real RAG backend could not produce a usable response."""

    kind = "upstream_error"


class BackendUnavailableError(UpstreamError):
    kind = "backend_unavailable"


class BackendTimeoutError(UpstreamError):
    kind = "backend_timeout"


class BackendStatusError(UpstreamError):
    kind = "backend_status"

    def __init__(self, status_code: int, detail: Optional[str] = None):
        self.status_code = status_code
        self.detail = detail
        message = f"Backend returned HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class MalformedPayloadError(UpstreamError):
    kind = "malformed_payload"
