"""Shared fixtures: settings and in-memory fakes for the OpenAI, Telegram and HTTP clients."""

import json
from collections.abc import Callable
from types import SimpleNamespace

import httpx
import pytest

from app.api.dependencies import Services, build_services
from app.core.settings import Settings


def completion(content: str | None = None, tool_calls: list | None = None) -> SimpleNamespace:
    """Build a chat completion shaped like the OpenAI SDK response."""
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def tool_completion(name: str, arguments: dict) -> SimpleNamespace:
    """Build a chat completion that calls one tool."""
    call = SimpleNamespace(function=SimpleNamespace(name=name, arguments=json.dumps(arguments)))
    return completion(tool_calls=[call])


class FakeCompletions:
    """Returns queued completions and records every request."""

    def __init__(self) -> None:
        self.replies: list = []
        self.calls: list[dict] = []

    async def create(self, **kwargs: object) -> SimpleNamespace:
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeRuns:
    """Serves run statuses in order; the last one repeats."""

    def __init__(self) -> None:
        self.statuses: list[str] = ["completed"]
        self.calls: list[tuple[str, str]] = []

    async def retrieve(self, run_id: str, *, thread_id: str) -> SimpleNamespace:
        self.calls.append((thread_id, run_id))
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        return SimpleNamespace(id=run_id, thread_id=thread_id, status=status, last_error=None)


class FakeMessages:
    """Returns one assistant reply for any run."""

    def __init__(self) -> None:
        self.reply: str | None = "Hôm nay bạn tiêu 50.000 VNĐ"
        self.calls: list[tuple[str, dict]] = []

    async def list(self, thread_id: str, **kwargs: object) -> SimpleNamespace:
        self.calls.append((thread_id, kwargs))
        if self.reply is None:
            return SimpleNamespace(data=[])
        part = SimpleNamespace(type="text", text=SimpleNamespace(value=self.reply))
        return SimpleNamespace(data=[SimpleNamespace(content=[part])])


class FakeThreads:
    """Creates runs on a fixed thread."""

    def __init__(self) -> None:
        self.runs = FakeRuns()
        self.messages = FakeMessages()
        self.created: list[dict] = []

    async def create_and_run(self, **kwargs: object) -> SimpleNamespace:
        self.created.append(kwargs)
        return SimpleNamespace(id="run_1", thread_id="thread_1", status="queued")


class FakeLLM:
    """Stand-in for ``AsyncOpenAI``."""

    def __init__(self) -> None:
        self.completions = FakeCompletions()
        self.threads = FakeThreads()
        self.chat = SimpleNamespace(completions=self.completions)
        self.beta = SimpleNamespace(threads=self.threads)

    def calls(self) -> int:
        return len(self.completions.calls) + len(self.threads.created)

    async def close(self) -> None:
        return None


class FakeTelegramFile:
    async def download_as_bytearray(self) -> bytearray:
        return bytearray(b"\xff\xd8receipt")


class FakeBot:
    """Stand-in for ``telegram.Bot`` that records sent messages."""

    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.requested_files: list[str] = []

    async def send_message(self, **kwargs: object) -> None:
        self.sent.append(kwargs)

    async def get_file(self, file_id: str) -> FakeTelegramFile:
        self.requested_files.append(file_id)
        return FakeTelegramFile()

    async def initialize(self) -> None:
        return None

    async def shutdown(self) -> None:
        return None


class FakeStorageAPI:
    """Routes file and vector store requests to canned responses and records them."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.upload_status = 200
        self.attach_status = 200
        self.delete_status = 200

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "POST" and path.endswith("/files") and "/vector_stores/" not in path:
            return httpx.Response(self.upload_status, json={"id": "file_123"})
        if request.method == "POST" and "/vector_stores/" in path:
            return httpx.Response(self.attach_status, json={"id": "file_123", "status": "in_progress"})
        if request.method == "DELETE":
            return httpx.Response(self.delete_status, json={"id": "file_123", "deleted": True})
        return httpx.Response(404)

    def paths(self) -> list[tuple[str, str]]:
        return [(request.method, request.url.path) for request in self.requests]


@pytest.fixture
def settings() -> Settings:
    """Settings with dummy credentials and no poll delay."""
    return Settings(
        telegram_chat_id="42",
        telegram_bot_token="123:token",
        telegram_bot_secret_token="webhook-secret",
        openai_project_id="proj_1",
        openai_api_key="sk-test",
        openai_assistant_vectorstore_id="vs_1",
        openai_assistant_id="asst_1",
        poll_interval=0,
    )


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def fake_bot() -> FakeBot:
    return FakeBot()


@pytest.fixture
def storage_api() -> FakeStorageAPI:
    return FakeStorageAPI()


@pytest.fixture
def http_client(storage_api: FakeStorageAPI) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(storage_api.handler))


@pytest.fixture
def services(
    settings: Settings, fake_llm: FakeLLM, fake_bot: FakeBot, http_client: httpx.AsyncClient
) -> Services:
    """All components wired to the fakes."""
    return build_services(settings, llm_client=fake_llm, bot=fake_bot, http_client=http_client)


@pytest.fixture
def transaction_json() -> Callable[..., str]:
    """Build an extraction reply for a sample card payment."""

    def _build(**overrides: str) -> str:
        data = {
            "bank_name": "Vietcombank",
            "datetime": "01/01/2025 08:00:00",
            "amount": "50.000",
            "currency": "VNĐ",
            "message": "Mua cà phê",
            "plain_data": "Thanh toán thẻ tại quán cà phê, 1 ly cà phê sữa đá.",
        }
        data.update(overrides)
        return json.dumps(data, ensure_ascii=False)

    return _build
