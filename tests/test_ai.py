"""Tests for the stateless /api/ai endpoints and their error mapping."""
import httpx
import pytest
from httpx import AsyncClient

from tests.conftest import AUTH_HEADERS, chat_reply, request_payload

SUGGESTIONS_REPLY = """```json
[
  {"type": "estrutura", "title": "Contextualize", "content": "Apresente dados gerais.", "icon": "Lightbulb"},
  {"type": "referencia", "title": "Cite autores", "content": "Inclua referências.", "icon": "BookOpen"},
  {"type": "clareza", "title": "Frases longas", "content": "Divida as frases.", "icon": "AlertCircle"}
]
```"""

LONG_TEXT = "O ensino remoto emergencial trouxe desafios inéditos para estudantes e docentes."


@pytest.mark.asyncio
async def test_analyze_text_short_content_returns_empty(client: AsyncClient, ai_handler):
    requests = ai_handler(lambda request: chat_reply(SUGGESTIONS_REPLY))

    resp = await client.post(
        "/api/ai/analyze-text",
        json={"section": "introduction", "content": "Muito curto."},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 200
    assert resp.json() == {"suggestions": []}
    assert requests == []


@pytest.mark.asyncio
async def test_analyze_text_returns_suggestions(client: AsyncClient, ai_handler):
    requests = ai_handler(lambda request: chat_reply(SUGGESTIONS_REPLY))

    resp = await client.post(
        "/api/ai/analyze-text",
        json={"section": "introduction", "content": LONG_TEXT},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 200
    suggestions = resp.json()["suggestions"]
    assert [s["type"] for s in suggestions] == ["estrutura", "referencia", "clareza"]
    assert suggestions[1]["icon"] == "BookOpen"

    payload = request_payload(requests[0])
    assert payload["model"] == "suggestion-model"
    assert payload["max_tokens"] == 800
    assert LONG_TEXT in payload["messages"][1]["content"]


@pytest.mark.asyncio
@pytest.mark.parametrize("upstream, expected", [
    (429, 429),
    (402, 402),
    (500, 502),
    (401, 502),
])
async def test_analyze_text_error_mapping(client: AsyncClient, ai_handler, upstream, expected):
    ai_handler(lambda request: httpx.Response(upstream, json={"error": {"message": "upstream"}}))

    resp = await client.post(
        "/api/ai/analyze-text",
        json={"section": "methodology", "content": LONG_TEXT},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == expected
    assert resp.json()["detail"]


@pytest.mark.asyncio
async def test_analyze_text_unparseable_reply_is_502(client: AsyncClient, ai_handler):
    ai_handler(lambda request: chat_reply("Não sei responder em JSON."))

    resp = await client.post(
        "/api/ai/analyze-text",
        json={"section": "results", "content": LONG_TEXT},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 502


@pytest.mark.asyncio
async def test_missing_api_key_is_503(client: AsyncClient, monkeypatch):
    from escriba.config import settings

    monkeypatch.setattr(settings, "AI_GATEWAY_API_KEY", "")

    resp = await client.post(
        "/api/ai/analyze-text",
        json={"section": "results", "content": LONG_TEXT},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 503


@pytest.mark.asyncio
async def test_analyze_document_returns_ten_tips(client: AsyncClient, ai_handler):
    tips = ",".join(
        f'{{"category": "Redação", "title": "Dica {i}", "description": "Descrição {i}", "icon": "CheckCircle"}}'
        for i in range(1, 13)
    )
    ai_handler(lambda request: chat_reply(f"[{tips}]"))

    resp = await client.post(
        "/api/ai/analyze-document",
        json={"document_text": LONG_TEXT, "area": "Ciências Humanas", "premise": "Premissa"},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 200
    data = resp.json()["tips"]
    assert len(data) == 10
    assert data[0]["id"] == "tip-1"
    assert data[-1]["number"] == 10


@pytest.mark.asyncio
async def test_generate_abstract_both(client: AsyncClient, ai_handler):
    def handler(request):
        system = request_payload(request)["messages"][0]["content"]
        return chat_reply("Resumo gerado." if "ABNT" in system else "Generated abstract.")

    requests = ai_handler(handler)

    resp = await client.post(
        "/api/ai/generate-abstract",
        json={
            "input": {
                "title": "Título",
                "premise": "Premissa",
                "area": "Engenharias",
                "introduction": "<p>Introdução <strong>formatada</strong></p>",
            },
            "language": "Ambos",
        },
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["abstract_pt"] == "Resumo gerado."
    assert data["abstract_en"] == "Generated abstract."
    assert data["word_count_pt"] == 2
    assert data["warnings"] == []

    assert len(requests) == 2
    user_prompt = request_payload(requests[0])["messages"][1]["content"]
    assert "Introdução formatada" in user_prompt
    assert "<strong>" not in user_prompt


@pytest.mark.asyncio
async def test_generate_abstract_portuguese_only(client: AsyncClient, ai_handler):
    requests = ai_handler(lambda request: chat_reply("Resumo."))

    resp = await client.post(
        "/api/ai/generate-abstract",
        json={"input": {"title": "Título"}, "language": "Português"},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 200
    assert resp.json()["abstract_pt"] == "Resumo."
    assert resp.json()["abstract_en"] is None
    assert len(requests) == 1


@pytest.mark.asyncio
async def test_generate_abstract_rejects_unknown_language(client: AsyncClient):
    resp = await client.post(
        "/api/ai/generate-abstract",
        json={"input": {"title": "Título"}, "language": "Espanhol"},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 422
