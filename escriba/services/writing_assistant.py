"""
AI writing assistant: section suggestions, document tips, abstracts.

Each operation templates a prompt, forwards it to the model gateway via
ChatCompletionClient, and validates/cleans the reply before handing it
back.  Items that fail validation are dropped; unknown enum values fall
back to a sensible default instead of failing the whole reply.

Public API
----------
WritingAssistant.analyze_section(section, content)              -> List[Dict]
WritingAssistant.analyze_document(document_text, area, premise) -> List[Dict]
WritingAssistant.generate_abstract(abstract_input, language)    -> AbstractResult
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Any, Dict, List, Optional

from escriba.config import settings
from escriba.models.database_models import AbstractLanguage
from escriba.services import prompts
from escriba.services.ai_gateway import (
    ChatCompletionClient,
    as_item_list,
    parse_json_reply,
)
from escriba.utils.helpers import html_to_text

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class AbstractInput:
    """Article content an abstract is generated from (plain text)."""

    title: str
    premise: str
    area: str
    objectives: str = ""
    introduction: str = ""
    methodology: str = ""
    results: str = ""

    @classmethod
    def from_project(cls, project: Any) -> "AbstractInput":
        """Build from a project row, converting editor HTML to plain text."""
        return cls(
            title=project.title,
            premise=project.premise,
            area=project.area,
            objectives=html_to_text(project.objectives or ""),
            introduction=html_to_text(project.introduction or ""),
            methodology=html_to_text(project.methodology or ""),
            results=html_to_text(project.results or ""),
        )

    @classmethod
    def from_document(cls, project: Any, document_text: str) -> "AbstractInput":
        """Build from an uploaded document's extracted text."""
        return cls(
            title=project.title,
            premise=project.premise,
            area=project.area,
            objectives="",
            introduction=document_text[:3000],
            methodology=document_text,
            results=document_text,
        )


@dataclasses.dataclass
class AbstractResult:
    abstract_pt: Optional[str] = None
    abstract_en: Optional[str] = None


class WritingAssistant:
    """Prompt assembly and reply validation around two gateway clients."""

    SECTION_MAX_TOKENS: int = 800
    DOCUMENT_MAX_TOKENS: int = 2000
    ABSTRACT_MAX_TOKENS: int = 800
    ABSTRACT_TEMPERATURE: float = 0.7

    MAX_SUGGESTIONS: int = 5
    MAX_TIPS: int = 10

    SUGGESTION_TYPES = frozenset({"estrutura", "clareza", "melhoria", "referencia"})
    SUGGESTION_ICONS = frozenset({"Lightbulb", "AlertCircle", "BookOpen"})
    TIP_CATEGORIES = frozenset({"Metodologia", "Redação", "Resultados", "Estrutura", "Fundamentação"})
    TIP_ICONS = frozenset({"Lightbulb", "CheckCircle", "AlertCircle"})

    def __init__(
        self,
        suggestion_client: Optional[ChatCompletionClient] = None,
        abstract_client: Optional[ChatCompletionClient] = None,
    ) -> None:
        self.suggestion_client = suggestion_client or ChatCompletionClient(
            base_url=settings.AI_GATEWAY_URL,
            api_key=settings.AI_GATEWAY_API_KEY,
            model=settings.AI_SUGGESTION_MODEL,
        )
        self.abstract_client = abstract_client or ChatCompletionClient(
            base_url=settings.OPENAI_BASE_URL,
            api_key=settings.OPENAI_API_KEY,
            model=settings.AI_ABSTRACT_MODEL,
        )

    # ------------------------------------------------------------------
    # analyze-text
    # ------------------------------------------------------------------

    async def analyze_section(self, section: str, content: str) -> List[Dict[str, str]]:
        """
        Ask the model for 3–5 improvement suggestions on one section.

        Text shorter than MIN_ANALYSIS_CHARS yields an empty list without
        calling the model.
        """
        logger.info("analyze_section: section=%s length=%d", section, len(content or ""))

        if not content or len(content.strip()) < settings.MIN_ANALYSIS_CHARS:
            return []

        reply = await self.suggestion_client.complete(
            prompts.SECTION_SYSTEM_PROMPT,
            prompts.SECTION_USER_PROMPT.format(section=section, content=content),
            max_tokens=self.SECTION_MAX_TOKENS,
        )
        raw = as_item_list(parse_json_reply(reply), "suggestions")

        suggestions: List[Dict[str, str]] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            title = str(item.get("title", "")).strip()
            body = str(item.get("content", "")).strip()
            if not title or not body:
                continue

            kind = str(item.get("type", "melhoria")).strip().lower()
            if kind not in self.SUGGESTION_TYPES:
                kind = "melhoria"
            icon = str(item.get("icon", "Lightbulb")).strip()
            if icon not in self.SUGGESTION_ICONS:
                icon = "Lightbulb"

            suggestions.append({"type": kind, "title": title, "content": body, "icon": icon})
            if len(suggestions) == self.MAX_SUGGESTIONS:
                break

        logger.info("analyze_section: %d suggestions generated", len(suggestions))
        return suggestions

    # ------------------------------------------------------------------
    # analyze-document
    # ------------------------------------------------------------------

    async def analyze_document(
        self,
        document_text: str,
        area: str,
        premise: str,
    ) -> List[Dict[str, Any]]:
        """
        Ask the model for ten numbered improvement tips on a whole document.

        Tips are renumbered 1..N in reply order so ``id``/``number`` are
        always consistent, whatever the model wrote.
        """
        logger.info("analyze_document: area=%s length=%d", area, len(document_text or ""))

        reply = await self.suggestion_client.complete(
            prompts.DOCUMENT_SYSTEM_PROMPT,
            prompts.DOCUMENT_USER_PROMPT.format(
                area=area,
                premise=premise,
                document_text=document_text,
            ),
            max_tokens=self.DOCUMENT_MAX_TOKENS,
        )
        raw = as_item_list(parse_json_reply(reply), "tips")

        tips: List[Dict[str, Any]] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            title = str(item.get("title", "")).strip()
            description = str(item.get("description", "")).strip()
            if not title or not description:
                continue

            category = str(item.get("category", "Estrutura")).strip()
            if category not in self.TIP_CATEGORIES:
                category = "Estrutura"
            icon = str(item.get("icon", "Lightbulb")).strip()
            if icon not in self.TIP_ICONS:
                icon = "Lightbulb"

            number = len(tips) + 1
            tips.append({
                "id": f"tip-{number}",
                "number": number,
                "category": category,
                "title": title,
                "description": description,
                "icon": icon,
            })
            if number == self.MAX_TIPS:
                break

        logger.info("analyze_document: %d tips generated", len(tips))
        return tips

    # ------------------------------------------------------------------
    # generate-abstract
    # ------------------------------------------------------------------

    async def generate_abstract(
        self,
        abstract_input: AbstractInput,
        language: AbstractLanguage,
    ) -> AbstractResult:
        """Generate the abstract in one language, or both concurrently."""
        language = AbstractLanguage(language)
        logger.info("generate_abstract: language=%s title=%r", language.value, abstract_input.title)

        if language == AbstractLanguage.BOTH:
            tasks = [
                asyncio.ensure_future(self._abstract_in(AbstractLanguage.PORTUGUESE, abstract_input)),
                asyncio.ensure_future(self._abstract_in(AbstractLanguage.ENGLISH, abstract_input)),
            ]
            try:
                pt, en = await asyncio.gather(*tasks)
            except BaseException:
                # One language failed: stop the other and collect its outcome
                for task in tasks:
                    if not task.done():
                        task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
            return AbstractResult(abstract_pt=pt, abstract_en=en)
        if language == AbstractLanguage.PORTUGUESE:
            return AbstractResult(abstract_pt=await self._abstract_in(language, abstract_input))
        return AbstractResult(abstract_en=await self._abstract_in(language, abstract_input))

    async def _abstract_in(self, language: AbstractLanguage, abstract_input: AbstractInput) -> str:
        if language == AbstractLanguage.PORTUGUESE:
            system_prompt = prompts.ABSTRACT_SYSTEM_PROMPT_PT
            template = prompts.ABSTRACT_USER_PROMPT_PT
        else:
            system_prompt = prompts.ABSTRACT_SYSTEM_PROMPT_EN
            template = prompts.ABSTRACT_USER_PROMPT_EN

        user_prompt = template.format(**dataclasses.asdict(abstract_input))
        text = await self.abstract_client.complete(
            system_prompt,
            user_prompt,
            max_tokens=self.ABSTRACT_MAX_TOKENS,
            temperature=self.ABSTRACT_TEMPERATURE,
        )
        return text.strip()
