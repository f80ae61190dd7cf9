import html
import re
from typing import Iterable, List

from app.modules.notebook.schema.chat import SourceCitation
from app.modules.notebook.schema.documents import DocumentInfo
from app.modules.notebook.schema.health import SystemStatus

_BOLD = re.compile(r"\*\*(.*?)\*\*")


def format_message(text: str) -> str:
    """Render an answer as HTML: escape, then **bold** and line breaks."""
    text = html.escape(text or "", quote=False)
    text = _BOLD.sub(r"<strong>\1</strong>", text)
    return text.replace("\n", "<br>")


def format_source(index: int, source: SourceCitation) -> str:
    line = f"Source {index}: {source.filename} (Relevance: {source.relevance_score * 100:.1f}%)"
    if source.page_number:
        line += f" • Page {source.page_number}"
    return line


def format_sources(sources: Iterable[SourceCitation]) -> List[str]:
    return [format_source(i, src) for i, src in enumerate(sources, start=1)]


def format_document(doc: DocumentInfo) -> str:
    return f"{doc.file_type.upper()} • {doc.chunk_count} chunks"


def format_ram_usage(system: SystemStatus) -> str:
    return f"{system.ram_used_gb}/{system.ram_total_gb} GB ({system.ram_percent}%)"
