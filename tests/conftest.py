"""
Shared fixtures for Escriba backend integration tests.

Runs against a throwaway SQLite file (aiosqlite) unless TEST_DATABASE_URL
points somewhere else, e.g. a PostgreSQL test database.  Each test gets
its own session; tables are created before and dropped after every test.

The model gateway is never contacted: tests that need AI replies install
an httpx.MockTransport through the ``ai_handler`` fixture.
"""
from __future__ import annotations

import json
import os
import tempfile
from typing import AsyncGenerator, Callable

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# Override settings *before* any escriba module is imported, so that
# settings and the global engine point at the test DB and upload dir.
_TMP_DIR = os.environ.get("ESCRIBA_TEST_DIR") or tempfile.mkdtemp(prefix="escriba-tests-")
os.environ["ESCRIBA_TEST_DIR"] = _TMP_DIR
TEST_DATABASE_URL = os.environ.get(
    "TEST_DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'escriba_test.db')}",
)
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["AI_GATEWAY_API_KEY"] = "test-gateway-key"
os.environ["OPENAI_API_KEY"] = "test-openai-key"

from escriba.database import Base, build_engine, get_db  # noqa: E402
from escriba.dependencies.ai import get_writing_assistant  # noqa: E402
from escriba.main import app  # noqa: E402
from escriba.models import database_models  # noqa: E402,F401
from escriba.services.ai_gateway import ChatCompletionClient  # noqa: E402
from escriba.services.writing_assistant import WritingAssistant  # noqa: E402

GATEWAY_URL = "https://gateway.test/v1"
ABSTRACT_URL = "https://abstract.test/v1"


# ---------------------------------------------------------------------------
# Per-test fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a DB session for each test. After the test, all tables are dropped
    so each test starts with a clean slate.
    """
    engine = build_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    httpx AsyncClient wired to the FastAPI app with the DB dependency
    overridden to use the per-test session.
    """

    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def ai_handler():
    """
    Route the app's model calls to *handler*.

    Usage::

        requests = ai_handler(lambda request: chat_reply("[]"))

    Returns the list every intercepted request is appended to.
    """

    def _install(handler: Callable[[httpx.Request], httpx.Response]) -> list:
        seen: list = []

        def _recording(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        assistant = make_assistant(_recording)
        app.dependency_overrides[get_writing_assistant] = lambda: assistant
        return seen

    yield _install

    app.dependency_overrides.pop(get_writing_assistant, None)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

AUTH_HEADERS = {
    "X-User-Id": "test-user-1",
    "X-User-Email": "test1@example.com",
    "X-User-Name": "Test User 1",
}

AUTH_HEADERS_USER2 = {
    "X-User-Id": "test-user-2",
    "X-User-Email": "test2@example.com",
    "X-User-Name": "Test User 2",
}

PROJECT_PAYLOAD = {
    "title": "Impacto do ensino remoto na aprendizagem",
    "premise": "O ensino remoto alterou a forma como estudantes universitários aprendem.",
    "area": "Ciências Humanas",
}


def make_assistant(handler: Callable[[httpx.Request], httpx.Response]) -> WritingAssistant:
    """WritingAssistant whose two clients both go through an httpx.MockTransport."""
    transport = httpx.MockTransport(handler)
    return WritingAssistant(
        suggestion_client=ChatCompletionClient(
            GATEWAY_URL, "test-gateway-key", "suggestion-model", transport=transport
        ),
        abstract_client=ChatCompletionClient(
            ABSTRACT_URL, "test-openai-key", "abstract-model", transport=transport
        ),
    )


def chat_reply(content: str, status_code: int = 200) -> httpx.Response:
    """A chat-completions response carrying *content* as the assistant message."""
    return httpx.Response(
        status_code,
        json={"choices": [{"message": {"role": "assistant", "content": content}}]},
    )


def request_payload(request: httpx.Request) -> dict:
    return json.loads(request.content)


def words(n: int, word: str = "palavra") -> str:
    """Editor HTML paragraph holding exactly *n* words."""
    return "<p>" + " ".join([word] * n) + "</p>"


async def create_project(client: AsyncClient, headers=None, **overrides) -> int:
    payload = {**PROJECT_PAYLOAD, **overrides}
    resp = await client.post("/api/projects", json=payload, headers=headers or AUTH_HEADERS)
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


async def fill_until_abstract(client: AsyncClient, project_id: int, headers=None) -> None:
    """Write every section with just enough words to unlock the abstract step."""
    headers = headers or AUTH_HEADERS
    for section, count in (
        ("objectives", 20),
        ("literature", 20),
        ("introduction", 200),
        ("methodology", 150),
        ("results", 150),
    ):
        resp = await client.put(
            f"/api/projects/{project_id}/sections/{section}",
            json={"content": words(count)},
            headers=headers,
        )
        assert resp.status_code == 200, resp.text
