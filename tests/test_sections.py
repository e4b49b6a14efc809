"""Tests for section auto-save, step locking and built-in hints."""
import pytest
from httpx import AsyncClient

from tests.conftest import AUTH_HEADERS, create_project, fill_until_abstract, words


@pytest.mark.asyncio
async def test_get_empty_section(client: AsyncClient):
    project_id = await create_project(client)

    resp = await client.get(f"/api/projects/{project_id}/sections/objectives", headers=AUTH_HEADERS)
    assert resp.status_code == 200
    data = resp.json()
    assert data["content"] == ""
    assert data["word_count"] == 0
    assert data["char_count"] == 0
    assert data["locked"] is False
    assert data["min_words"] == 1


@pytest.mark.asyncio
async def test_unknown_section_returns_422(client: AsyncClient):
    project_id = await create_project(client)

    resp = await client.get(f"/api/projects/{project_id}/sections/discussion", headers=AUTH_HEADERS)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_save_section_counts_plain_text(client: AsyncClient):
    project_id = await create_project(client)
    html = "<h2>Objetivo geral</h2><p>Analisar o <strong>impacto</strong> do ensino&nbsp;remoto.</p>"

    resp = await client.put(
        f"/api/projects/{project_id}/sections/objectives",
        json={"content": html},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["saved"] is True
    assert data["saved_at"] is not None
    assert data["content"] == html
    assert data["word_count"] == 8
    assert data["char_count"] == len("Objetivo geral\n\nAnalisar o impacto do ensino remoto.")


@pytest.mark.asyncio
async def test_save_unchanged_content_is_not_written(client: AsyncClient):
    project_id = await create_project(client)
    url = f"/api/projects/{project_id}/sections/objectives"

    first = await client.put(url, json={"content": words(5)}, headers=AUTH_HEADERS)
    assert first.json()["saved"] is True

    second = await client.put(url, json={"content": words(5)}, headers=AUTH_HEADERS)
    assert second.status_code == 200
    assert second.json()["saved"] is False
    assert second.json()["saved_at"] is None


@pytest.mark.asyncio
async def test_locked_section_rejects_writes(client: AsyncClient):
    project_id = await create_project(client)

    resp = await client.put(
        f"/api/projects/{project_id}/sections/introduction",
        json={"content": words(10)},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 409
    assert "bloqueada" in resp.json()["detail"]

    resp = await client.get(f"/api/projects/{project_id}/sections/introduction", headers=AUTH_HEADERS)
    assert resp.json()["locked"] is True
    assert resp.json()["content"] == ""


@pytest.mark.asyncio
async def test_introduction_unlocks_after_objectives_and_literature(client: AsyncClient):
    project_id = await create_project(client)
    base = f"/api/projects/{project_id}/sections"

    await client.put(f"{base}/objectives", json={"content": words(10)}, headers=AUTH_HEADERS)
    resp = await client.get(f"{base}/introduction", headers=AUTH_HEADERS)
    assert resp.json()["locked"] is True

    await client.put(f"{base}/literature", json={"content": words(10)}, headers=AUTH_HEADERS)
    resp = await client.get(f"{base}/introduction", headers=AUTH_HEADERS)
    assert resp.json()["locked"] is False


@pytest.mark.asyncio
async def test_methodology_needs_200_introduction_words(client: AsyncClient):
    project_id = await create_project(client)
    base = f"/api/projects/{project_id}/sections"
    await client.put(f"{base}/objectives", json={"content": words(10)}, headers=AUTH_HEADERS)
    await client.put(f"{base}/literature", json={"content": words(10)}, headers=AUTH_HEADERS)

    await client.put(f"{base}/introduction", json={"content": words(199)}, headers=AUTH_HEADERS)
    resp = await client.put(f"{base}/methodology", json={"content": words(5)}, headers=AUTH_HEADERS)
    assert resp.status_code == 409

    await client.put(f"{base}/introduction", json={"content": words(200)}, headers=AUTH_HEADERS)
    resp = await client.put(f"{base}/methodology", json={"content": words(5)}, headers=AUTH_HEADERS)
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_shortening_a_section_relocks_later_steps(client: AsyncClient):
    project_id = await create_project(client)
    await fill_until_abstract(client, project_id)
    base = f"/api/projects/{project_id}/sections"

    await client.put(f"{base}/introduction", json={"content": words(50)}, headers=AUTH_HEADERS)

    resp = await client.get(f"{base}/results", headers=AUTH_HEADERS)
    data = resp.json()
    assert data["locked"] is True
    # Stored text is kept while locked
    assert data["word_count"] == 150

    progress = await client.get(f"/api/projects/{project_id}/progress", headers=AUTH_HEADERS)
    assert progress.json()["can_generate_abstract"] is False
    assert progress.json()["current_step"] == "introduction"


@pytest.mark.asyncio
async def test_full_sections_reach_83_percent(client: AsyncClient):
    project_id = await create_project(client)
    await fill_until_abstract(client, project_id)

    resp = await client.get(f"/api/projects/{project_id}/progress", headers=AUTH_HEADERS)
    data = resp.json()
    assert data["percent"] == 83
    assert data["current_step"] == "abstract"
    assert data["can_generate_abstract"] is True


@pytest.mark.asyncio
async def test_hints_for_empty_section(client: AsyncClient):
    project_id = await create_project(client)

    resp = await client.get(
        f"/api/projects/{project_id}/sections/objectives/hints", headers=AUTH_HEADERS
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["word_count"] == 0
    titles = [h["title"] for h in data["hints"]]
    assert "Objetivos Claros" in titles
    # Word-count-dependent hint is hidden on an empty section
    assert "Verbos de Ação" not in titles


@pytest.mark.asyncio
async def test_hints_grow_with_content(client: AsyncClient):
    project_id = await create_project(client)
    await client.put(
        f"/api/projects/{project_id}/sections/objectives",
        json={"content": words(31)},
        headers=AUTH_HEADERS,
    )

    resp = await client.get(
        f"/api/projects/{project_id}/sections/objectives/hints", headers=AUTH_HEADERS
    )
    titles = [h["title"] for h in resp.json()["hints"]]
    assert "Verbos de Ação" in titles
    assert len(titles) == 3
