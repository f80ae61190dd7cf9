"""
Local NotebookLM: document Q&A over a demo or remote RAG backend.

``NotebookSession`` is the entry point for a UI. It owns the page state
(``AppState``) and renders through ``services.formatting``. The FastAPI
routes in ``api.router`` expose the same backend calls over HTTP.
"""

from app.modules.notebook.services.backend import NotebookBackend, get_backend
from app.modules.notebook.services.resolver import ResponseResolver
from app.modules.notebook.services.session import AppState, NotebookSession

__all__ = ["AppState", "NotebookBackend", "NotebookSession", "ResponseResolver", "get_backend"]
