"""
Chat-completion client for the hosted model gateway.

Talks to any OpenAI-compatible ``POST {base_url}/chat/completions`` endpoint
with bearer auth.  Failures are raised as typed exceptions so routers can
map them onto HTTP statuses; nothing here retries.

Also hosts the JSON clean-up used on model replies, since models like to
wrap JSON in markdown fences or surround it with prose.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import httpx

from escriba.config import settings
from escriba.utils.helpers import truncate_text

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class AIServiceError(Exception):
    """Base class for model gateway failures."""

    status_code: Optional[int] = None

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class AIConfigurationError(AIServiceError):
    """API key or endpoint missing."""


class AIRateLimitError(AIServiceError):
    status_code = 429


class AIInsufficientCreditsError(AIServiceError):
    status_code = 402


class AIEmptyResponseError(AIServiceError):
    """The model answered with no content."""


class AIResponseFormatError(AIServiceError):
    """The model's reply could not be parsed into the expected JSON."""


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class ChatCompletionClient:
    """Thin async wrapper around one model on one chat-completion endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        timeout: float = float(settings.AI_TIMEOUT),
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout = httpx.Timeout(timeout, connect=10.0)
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.base_url)

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int = 800,
        temperature: Optional[float] = None,
    ) -> str:
        """
        Send one system + user exchange and return the assistant's text.

        Raises:
            AIConfigurationError:       no API key configured.
            AIRateLimitError:           gateway answered 429.
            AIInsufficientCreditsError: gateway answered 402.
            AIServiceError:             any other non-2xx or transport failure.
            AIEmptyResponseError:       reply had no content.
        """
        if not self.configured:
            raise AIConfigurationError(f"Chave de API do modelo '{self.model}' não configurada")

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": max_tokens,
        }
        if temperature is not None:
            payload["temperature"] = temperature

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json=payload,
                )
        except httpx.TimeoutException as exc:
            logger.error("complete: %s timed out — %s", self.model, exc)
            raise AIServiceError("Tempo esgotado na requisição à IA") from exc
        except httpx.HTTPError as exc:
            logger.error("complete: connection error for %s — %s", self.model, exc)
            raise AIServiceError(f"Serviço de IA indisponível: {exc}") from exc

        if resp.status_code == 429:
            raise AIRateLimitError("Limite de requisições excedido. Tente novamente em alguns instantes.")
        if resp.status_code == 402:
            raise AIInsufficientCreditsError("Créditos de IA insuficientes. Adicione créditos ao workspace.")
        if resp.status_code >= 400:
            logger.error(
                "complete: gateway returned HTTP %d: %s",
                resp.status_code,
                resp.text[:300],
            )
            raise AIServiceError(
                f"Erro no serviço de IA: {_error_message(resp)}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise AIResponseFormatError("O serviço de IA retornou uma resposta que não é JSON") from exc

        content = _first_message_content(data)
        if not content or not content.strip():
            raise AIEmptyResponseError("Resposta vazia da IA")
        return content.strip()


def _first_message_content(data: Any) -> str:
    try:
        return data["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError):
        return ""


def _error_message(resp: httpx.Response) -> str:
    """Prefer the provider's ``error.message``; fall back to the status code."""
    try:
        body = resp.json()
        message = body.get("error", {}).get("message")
        if message:
            return str(message)
    except (ValueError, AttributeError):
        pass
    return str(resp.status_code)


# ---------------------------------------------------------------------------
# JSON clean-up for model replies
# ---------------------------------------------------------------------------

def parse_json_reply(reply: str) -> Any:
    """
    Parse JSON out of a model reply.

    Tries, in order: the raw text, the text with markdown fences removed,
    the text with common mangling repaired (trailing commas, Python
    literals, ``//`` comments), and finally the first balanced ``[...]`` or
    ``{...}`` block found in surrounding prose.

    Raises:
        AIResponseFormatError: nothing parseable was found.
    """
    text = (reply or "").strip()
    if not text:
        raise AIResponseFormatError("Resposta vazia da IA")

    candidates = [text]
    unfenced = strip_code_fences(text)
    if unfenced != text:
        candidates.append(unfenced)
    candidates.append(_repair_json(unfenced))

    for open_b, close_b in (("[", "]"), ("{", "}")):
        fragment = _balanced_fragment(unfenced, open_b, close_b)
        if fragment:
            candidates.extend([fragment, _repair_json(fragment)])

    for candidate in candidates:
        ok, value = _try_json(candidate)
        if ok:
            return value

    logger.warning("parse_json_reply: unparseable reply. Preview: %s", truncate_text(text, 400))
    raise AIResponseFormatError("A resposta da IA não é um JSON válido")


def strip_code_fences(text: str) -> str:
    """Remove every ```json / ``` fence line the model wrapped its output in."""
    text = re.sub(r"```[a-zA-Z]*\s*\n?", "", text)
    return text.strip()


def _try_json(text: str) -> Tuple[bool, Any]:
    try:
        return True, json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return False, None


_JSON_STRING = re.compile(r'"(?:[^"\\]|\\.)*"', re.DOTALL)


def _repair_json(text: str) -> str:
    """Fix trailing commas, Python literals and ``//`` comments outside string tokens."""
    pieces = []
    last = 0
    for match in _JSON_STRING.finditer(text):
        pieces.append(_repair_outside_strings(text[last:match.start()]))
        pieces.append(match.group(0))
        last = match.end()
    pieces.append(_repair_outside_strings(text[last:]))
    return "".join(pieces).strip()


def _repair_outside_strings(segment: str) -> str:
    segment = re.sub(r",(\s*[}\]])", r"\1", segment)
    segment = re.sub(r"\bTrue\b", "true", segment)
    segment = re.sub(r"\bFalse\b", "false", segment)
    segment = re.sub(r"\bNone\b", "null", segment)
    return re.sub(r"^\s*//[^\n]*", "", segment, flags=re.MULTILINE)


def _balanced_fragment(text: str, open_b: str, close_b: str) -> str:
    """First complete ``open_b … close_b`` block in *text*, ignoring brackets in strings."""
    start = text.find(open_b)
    if start == -1:
        return ""

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if escaped:
            escaped = False
        elif ch == "\\" and in_string:
            escaped = True
        elif ch == '"':
            in_string = not in_string
        elif in_string:
            continue
        elif ch == open_b:
            depth += 1
        elif ch == close_b:
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return ""


def as_item_list(value: Any, key: str) -> List[Any]:
    """
    Accept either a bare JSON array or an object wrapping it under *key*.
    Anything else yields an empty list.
    """
    if isinstance(value, dict):
        value = value.get(key, [])
    return value if isinstance(value, list) else []
