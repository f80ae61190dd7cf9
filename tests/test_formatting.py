from app.modules.notebook.schema.chat import SourceCitation
from app.modules.notebook.schema.documents import DocumentInfo
from app.modules.notebook.schema.health import SystemStatus
from app.modules.notebook.services.formatting import (
    format_document,
    format_message,
    format_ram_usage,
    format_sources,
)


def test_format_message_bold_and_newlines():
    assert format_message("**Machine learning** is\nfun") == "<strong>Machine learning</strong> is<br>fun"


def test_format_message_escapes_html():
    assert format_message("<script>**x**</script>") == "&lt;script&gt;<strong>x</strong>&lt;/script&gt;"


def test_format_sources():
    lines = format_sources([
        SourceCitation(filename="Machine_Learning_Basics.pdf", relevance_score=0.94, page_number=3),
        SourceCitation(filename="Neural_Networks_Overview.txt", relevance_score=0.78),
    ])
    assert lines == [
        "Source 1: Machine_Learning_Basics.pdf (Relevance: 94.0%) • Page 3",
        "Source 2: Neural_Networks_Overview.txt (Relevance: 78.0%)",
    ]


def test_format_document():
    doc = DocumentInfo(filename="a.pdf", file_type="pdf", chunk_count=24)
    assert format_document(doc) == "PDF • 24 chunks"


def test_format_ram_usage():
    system = SystemStatus(ram_used_gb="6.2", ram_total_gb="16.0", ram_percent="38.8")
    assert format_ram_usage(system) == "6.2/16.0 GB (38.8%)"
