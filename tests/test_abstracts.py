"""Tests for the project-scoped abstract workflow."""
import pytest
from httpx import AsyncClient

from tests.conftest import (
    AUTH_HEADERS,
    chat_reply,
    create_project,
    fill_until_abstract,
    request_payload,
    words,
)


@pytest.mark.asyncio
async def test_requirements_for_new_project(client: AsyncClient):
    project_id = await create_project(client)

    resp = await client.get(
        f"/api/projects/{project_id}/abstract/requirements", headers=AUTH_HEADERS
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["can_generate"] is False
    assert len(data["requirements"]) == 4
    assert not any(r["met"] for r in data["requirements"])
    intro = data["requirements"][1]
    assert intro["current"] == 0
    assert intro["required"] == 200


@pytest.mark.asyncio
async def test_requirements_met(client: AsyncClient):
    project_id = await create_project(client)
    await fill_until_abstract(client, project_id)

    resp = await client.get(
        f"/api/projects/{project_id}/abstract/requirements", headers=AUTH_HEADERS
    )
    data = resp.json()
    assert data["can_generate"] is True
    assert all(r["met"] for r in data["requirements"])
    assert data["requirements"][2]["current"] == 150


@pytest.mark.asyncio
async def test_generate_blocked_until_requirements_met(client: AsyncClient, ai_handler):
    requests = ai_handler(lambda request: chat_reply("Resumo."))
    project_id = await create_project(client)

    resp = await client.post(
        f"/api/projects/{project_id}/abstract/generate",
        json={"language": "Ambos"},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 409
    assert "Introdução" in resp.json()["detail"]
    assert requests == []


@pytest.mark.asyncio
async def test_generate_sends_plain_text_and_is_not_saved(client: AsyncClient, ai_handler):
    requests = ai_handler(lambda request: chat_reply("Resumo do artigo."))
    project_id = await create_project(client)
    await fill_until_abstract(client, project_id)

    resp = await client.post(
        f"/api/projects/{project_id}/abstract/generate",
        json={"language": "Português"},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["abstract_pt"] == "Resumo do artigo."
    assert data["abstract_en"] is None

    prompt = request_payload(requests[0])["messages"][1]["content"]
    assert "<p>" not in prompt
    assert "TÍTULO: Impacto do ensino remoto na aprendizagem" in prompt

    project = await client.get(f"/api/projects/{project_id}", headers=AUTH_HEADERS)
    assert project.json()["abstract_pt"] == ""


@pytest.mark.asyncio
async def test_generate_warns_on_long_abstract(client: AsyncClient, ai_handler):
    long_abstract = " ".join(["word"] * 520)
    ai_handler(lambda request: chat_reply(long_abstract))
    project_id = await create_project(client)
    await fill_until_abstract(client, project_id)

    resp = await client.post(
        f"/api/projects/{project_id}/abstract/generate",
        json={"language": "Ambos"},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["word_count_pt"] == 520
    assert data["word_count_en"] == 520
    assert len(data["warnings"]) == 2
    assert "520 palavras" in data["warnings"][0]


@pytest.mark.asyncio
async def test_generate_rate_limited(client: AsyncClient, ai_handler):
    import httpx

    ai_handler(lambda request: httpx.Response(429))
    project_id = await create_project(client)
    await fill_until_abstract(client, project_id)

    resp = await client.post(
        f"/api/projects/{project_id}/abstract/generate",
        json={"language": "Inglês"},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 429


@pytest.mark.asyncio
async def test_approve_abstract_completes_project(client: AsyncClient):
    project_id = await create_project(client)
    await fill_until_abstract(client, project_id)

    resp = await client.put(
        f"/api/projects/{project_id}/abstract",
        json={"abstract_pt": "  Resumo aprovado.  ", "abstract_en": "Approved abstract."},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["abstract_pt"] == "Resumo aprovado."
    assert data["abstract_en"] == "Approved abstract."
    assert data["progress"]["percent"] == 100
    assert data["progress"]["current_step"] is None


@pytest.mark.asyncio
async def test_section_suggestions_use_stored_text(client: AsyncClient, ai_handler):
    requests = ai_handler(lambda request: chat_reply(
        '[{"type": "clareza", "title": "Clareza", "content": "Revise.", "icon": "AlertCircle"}]'
    ))
    project_id = await create_project(client)
    await client.put(
        f"/api/projects/{project_id}/sections/objectives",
        json={"content": words(20, "objetivo")},
        headers=AUTH_HEADERS,
    )

    resp = await client.post(
        f"/api/projects/{project_id}/sections/objectives/suggestions", headers=AUTH_HEADERS
    )
    assert resp.status_code == 200
    assert resp.json()["suggestions"][0]["title"] == "Clareza"
    prompt = request_payload(requests[0])["messages"][1]["content"]
    assert "objetivo objetivo" in prompt
    assert "<p>" not in prompt


@pytest.mark.asyncio
async def test_approve_locked_abstract_returns_409(client: AsyncClient):
    project_id = await create_project(client)

    resp = await client.put(
        f"/api/projects/{project_id}/abstract",
        json={"abstract_pt": "Cedo demais."},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 409

    project = await client.get(f"/api/projects/{project_id}", headers=AUTH_HEADERS)
    assert project.json()["abstract_pt"] == ""
