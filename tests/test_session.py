import asyncio

import httpx
import pytest

from app.modules.notebook.errors import BackendUnavailableError, RequestCancelled
from app.modules.notebook.schema.chat import ChatAnswer
from app.modules.notebook.schema.documents import DocumentListing, IndexReport
from app.modules.notebook.services.knowledge import FALLBACK_ANSWER
from app.modules.notebook.services.demo_backend import DemoBackend
from app.modules.notebook.services.latency import CancellationToken, LatencyProfile
from app.modules.notebook.services.remote_backend import RemoteBackend
from app.modules.notebook.services.session import APOLOGY_MESSAGE, AppState, NotebookSession


class BrokenBackend:
    """Every call fails the way an unreachable backend does."""

    def __init__(self):
        self.calls = []

    async def _fail(self, name):
        self.calls.append(name)
        raise BackendUnavailableError("connection refused")

    async def health(self, token=None):
        return await self._fail("health")

    async def list_documents(self, limit=100, token=None):
        return await self._fail("list_documents")

    async def index_folder(self, folder_path, recursive=True, file_types=None, token=None):
        return await self._fail("index_folder")

    async def chat(self, message, token=None):
        return await self._fail("chat")

    async def aclose(self):
        return None


def levels(state):
    return [(n.level, n.message) for n in state.drain_notifications()]


@pytest.mark.asyncio
async def test_start_populates_state(demo_backend):
    session = NotebookSession(demo_backend)
    state = await session.start()
    assert state.status == "connected"
    assert state.status_text == "Connected"
    assert state.llm_model == "phi3:mini"
    assert state.embedding_model == "all-minilm:l6-v2"
    assert state.ram_usage == "6.2/16.0 GB (38.8%)"
    assert state.has_documents
    assert state.doc_count == 5
    assert state.notifications == []


@pytest.mark.asyncio
async def test_health_failure_marks_disconnected():
    session = NotebookSession(BrokenBackend())
    state = await session.check_health()
    assert state.status == "error"
    assert state.status_text == "Disconnected"
    assert levels(state) == [("error", "Cannot connect to server. Make sure the backend is running.")]


@pytest.mark.asyncio
async def test_send_requires_documents(demo_backend):
    session = NotebookSession(demo_backend)
    assert not session.can_send("hello")
    await session.send_message("hello")
    assert session.state.messages == []

    await session.load_documents()
    assert session.can_send("hello")
    assert not session.can_send("   ")


@pytest.mark.asyncio
async def test_send_message_appends_answer(demo_backend):
    session = NotebookSession(demo_backend)
    await session.load_documents()
    state = await session.send_message("  What is machine learning?  ")
    user, assistant = state.messages
    assert user.role == "user"
    assert user.content == "What is machine learning?"
    assert assistant.role == "assistant"
    assert assistant.content.startswith("**Machine learning**")
    assert assistant.sources[0].filename == "Machine_Learning_Basics.pdf"
    assert not assistant.error


@pytest.mark.asyncio
async def test_upstream_failure_is_apology_not_fallback():
    backend = BrokenBackend()
    session = NotebookSession(backend, AppState(has_documents=True))
    state = await session.send_message("quantum gravity")
    reply = state.messages[-1]
    assert reply.content == APOLOGY_MESSAGE
    assert reply.content != FALLBACK_ANSWER.response
    assert reply.error
    assert levels(state) == [("error", "Failed to get response")]


@pytest.mark.asyncio
async def test_empty_answer_notifies(demo_backend):
    class EmptyBackend(type(demo_backend)):
        async def chat(self, message, token=None):
            return ChatAnswer(response="")

    session = NotebookSession(EmptyBackend(latency=demo_backend.latency), AppState(has_documents=True))
    state = await session.send_message("hello")
    assert [m.role for m in state.messages] == ["user"]
    assert levels(state) == [("error", "Received empty response from server")]


@pytest.mark.asyncio
async def test_index_folder_blank_path_warns():
    backend = BrokenBackend()
    session = NotebookSession(backend)
    state = await session.index_folder("   ")
    assert backend.calls == []
    assert levels(state) == [("warning", "Please enter a folder path")]


@pytest.mark.asyncio
async def test_index_folder_success_refreshes(demo_backend):
    session = NotebookSession(demo_backend)
    state = await session.index_folder("~/Documents/Research")
    assert state.folder_path == "~/Documents/Research"
    assert levels(state) == [("success", "Successfully indexed 5 files in 2.85s")]
    assert state.has_documents
    assert state.status == "connected"


@pytest.mark.asyncio
async def test_index_folder_partial_warns(demo_backend):
    class PartialBackend(type(demo_backend)):
        async def index_folder(self, folder_path, recursive=True, file_types=None, token=None):
            return IndexReport(
                status="partial", indexed_files=3, failed_files=2,
                processing_time=1.0, errors=["a.pdf: bad", "b.pdf: bad"],
            )

        async def list_documents(self, limit=100, token=None):
            return DocumentListing(documents=[], total=0)

    session = NotebookSession(PartialBackend(latency=demo_backend.latency), AppState(has_documents=True))
    state = await session.index_folder("/docs")
    assert levels(state) == [("warning", "Indexing completed with errors. 2 files failed.")]
    assert not state.has_documents
    assert state.doc_count == 0


@pytest.mark.asyncio
async def test_index_folder_failure():
    session = NotebookSession(BrokenBackend())
    state = await session.index_folder("/docs")
    assert levels(state) == [("error", "Failed to index documents. Check logs for details.")]


@pytest.mark.asyncio
async def test_load_documents_failure():
    session = NotebookSession(BrokenBackend(), AppState(has_documents=True))
    state = await session.load_documents()
    assert state.has_documents
    assert levels(state) == [("error", "Failed to load documents")]


def test_clear_chat(demo_backend):
    session = NotebookSession(demo_backend)
    session.state.messages.append(object())
    state = session.clear_chat()
    assert state.messages == []
    assert levels(state) == [("success", "Chat cleared")]


@pytest.mark.asyncio
async def test_unhealthy_and_missing_models(demo_backend):
    report = await demo_backend.health()

    class StubBackend(type(demo_backend)):
        async def health(self, token=None):
            return self.report

    backend = StubBackend(latency=demo_backend.latency)
    backend.report = report.model_copy(update={"status": "degraded"})
    session = NotebookSession(backend)
    state = await session.check_health()
    assert state.status_text == "Unhealthy"
    assert levels(state) == [("error", "System health check failed")]

    models = report.services.models.model_copy(update={"llm_available": False})
    services = report.services.model_copy(update={"models": models})
    backend.report = report.model_copy(update={"services": services})
    state = await session.check_health()
    assert state.status == "connected"
    assert levels(state) == [("warning", "Warning: Some models are not available. Please check Ollama.")]


@pytest.mark.asyncio
async def test_monitor_health_stops_on_cancel(demo_backend):
    session = NotebookSession(demo_backend)
    token = CancellationToken()
    task = asyncio.ensure_future(session.monitor_health(token, interval=0.01))
    await asyncio.sleep(0.05)
    token.cancel()
    await asyncio.wait_for(task, timeout=1.0)
    assert session.state.status == "connected"


@pytest.mark.asyncio
async def test_from_settings_demo_prefills_folder_and_skips_polling(demo_backend):
    from core.conf import Settings

    session = NotebookSession.from_settings(Settings(_env_file=None, DEMO_MODE=True), backend=demo_backend)
    assert session.state.folder_path == "~/Documents/Research"
    assert session.health_refresh_secs is None
    # Returns immediately: no polling in demo mode
    await asyncio.wait_for(session.monitor_health(CancellationToken()), timeout=1.0)


def test_from_settings_remote_polls(demo_backend):
    from core.conf import Settings

    settings = Settings(_env_file=None, DEMO_MODE=False, HEALTH_REFRESH_SECS=15.0)
    session = NotebookSession.from_settings(settings, backend=demo_backend)
    assert session.state.folder_path == ""
    assert session.health_refresh_secs == 15.0


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [200, 503])
async def test_remote_unhealthy_status_shows_unhealthy(status_code):
    transport = httpx.MockTransport(lambda request: httpx.Response(status_code, json={"status": "unhealthy"}))
    backend = RemoteBackend("http://backend.test/api/v1", transport=transport)
    session = NotebookSession(backend)
    state = await session.check_health()
    await backend.aclose()
    assert state.status == "error"
    assert state.status_text == "Unhealthy"
    assert levels(state) == [("error", "System health check failed")]


async def cancel_after(token, delay):
    await asyncio.sleep(delay)
    token.cancel()


@pytest.mark.asyncio
async def test_cancelled_send_leaves_no_message():
    backend = DemoBackend(latency=LatencyProfile(chat_min=5.0, chat_max=5.0))
    session = NotebookSession(backend, AppState(has_documents=True))
    token = CancellationToken()
    with pytest.raises(RequestCancelled):
        await asyncio.gather(session.send_message("What is RAG?", token=token), cancel_after(token, 0.05))
    assert session.state.messages == []
    assert session.state.notifications == []


@pytest.mark.asyncio
async def test_cancelled_index_keeps_previous_folder():
    backend = DemoBackend(latency=LatencyProfile(chat_min=0.0, chat_max=0.0, health=0.0, listing=0.0, indexing=5.0))
    session = NotebookSession(backend, AppState(folder_path="~/old"))
    token = CancellationToken()
    with pytest.raises(RequestCancelled):
        await asyncio.gather(session.index_folder("/new/docs", token=token), cancel_after(token, 0.05))
    assert session.state.folder_path == "~/old"
    assert session.state.notifications == []
    assert not session.state.has_documents


@pytest.mark.asyncio
async def test_package_exposes_session_entry_point(demo_backend):
    from app.modules import notebook
    from app.modules.notebook.services.formatting import format_message

    assert notebook.NotebookSession is NotebookSession
    session = notebook.NotebookSession(demo_backend, notebook.AppState())
    await session.start()
    state = await session.send_message("hello")
    assert format_message(state.messages[-1].content).startswith("Hello!")
