"""
Step gating for the article editor.

A project moves through a fixed, linear sequence of steps:

    config → objectives → introduction → methodology → results → abstract

Each step is *complete* when the fields it owns meet their minimum word
count, and *unlocked* when every step before it is complete.  Nothing is
stored: the status is recomputed from the project's current content, so a
later edit that drops a section below its threshold re-locks the steps
after it (without touching their stored text).

Public API
----------
evaluate_progress(project)              -> ProjectProgress
is_section_unlocked(project, section)   -> bool
step_for_section(section)               -> Step
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from escriba.config import settings
from escriba.models.database_models import Section
from escriba.utils.helpers import count_words, html_word_count

logger = logging.getLogger(__name__)


class Step(str, enum.Enum):
    CONFIG = "config"
    OBJECTIVES = "objectives"
    INTRODUCTION = "introduction"
    METHODOLOGY = "methodology"
    RESULTS = "results"
    ABSTRACT = "abstract"


@dataclass(frozen=True)
class StepRule:
    """Fields owned by a step and the words each needs to count as filled."""

    step: Step
    label: str
    fields: Tuple[str, ...]
    min_words: int = 1
    any_field: bool = False   # True → one filled field is enough
    html: bool = True         # False → fields hold plain text


@dataclass
class StepStatus:
    step: Step
    label: str
    complete: bool
    unlocked: bool
    min_words: int
    word_counts: Dict[str, int] = field(default_factory=dict)


@dataclass
class ProjectProgress:
    steps: List[StepStatus]
    percent: int
    current_step: Optional[Step]
    can_generate_abstract: bool

    def status(self, step: Step) -> StepStatus:
        for item in self.steps:
            if item.step == step:
                return item
        raise KeyError(step)


def step_rules() -> List[StepRule]:
    """Build the step sequence; thresholds are read from settings at call time."""
    return [
        StepRule(Step.CONFIG, "Configuração do Projeto", ("title", "premise", "area"), html=False),
        StepRule(Step.OBJECTIVES, "Objetivos e Revisão", ("objectives", "literature")),
        StepRule(Step.INTRODUCTION, "Introdução", ("introduction",), settings.INTRODUCTION_MIN_WORDS),
        StepRule(Step.METHODOLOGY, "Metodologia", ("methodology",), settings.METHODOLOGY_MIN_WORDS),
        StepRule(Step.RESULTS, "Resultados", ("results",), settings.RESULTS_MIN_WORDS),
        StepRule(Step.ABSTRACT, "Resumo", ("abstract_pt", "abstract_en"), any_field=True, html=False),
    ]


_SECTION_STEPS: Dict[Section, Step] = {
    Section.OBJECTIVES: Step.OBJECTIVES,
    Section.LITERATURE: Step.OBJECTIVES,
    Section.INTRODUCTION: Step.INTRODUCTION,
    Section.METHODOLOGY: Step.METHODOLOGY,
    Section.RESULTS: Step.RESULTS,
}


def step_for_section(section: Section) -> Step:
    return _SECTION_STEPS[Section(section)]


def min_words_for_section(section: Section) -> int:
    target = step_for_section(section)
    return next(rule.min_words for rule in step_rules() if rule.step == target)


def _field_words(project: Any, name: str, html: bool) -> int:
    value = getattr(project, name, None) or ""
    if isinstance(value, enum.Enum):
        value = value.value
    return html_word_count(value) if html else count_words(value)


def evaluate_progress(project: Any) -> ProjectProgress:
    """
    Compute per-step completion and unlock state for *project*.

    *project* is anything exposing the section attributes (ORM row,
    schema, or a plain namespace in tests).
    """
    statuses: List[StepStatus] = []
    all_previous_complete = True

    for rule in step_rules():
        counts = {name: _field_words(project, name, rule.html) for name in rule.fields}
        filled = [count >= rule.min_words for count in counts.values()]
        complete = any(filled) if rule.any_field else all(filled)

        statuses.append(StepStatus(
            step=rule.step,
            label=rule.label,
            complete=complete,
            unlocked=all_previous_complete,
            min_words=rule.min_words,
            word_counts=counts,
        ))
        all_previous_complete = all_previous_complete and complete

    completed = sum(1 for s in statuses if s.complete)
    percent = round(completed / len(statuses) * 100)
    current = next((s.step for s in statuses if not s.complete), None)
    abstract_status = statuses[-1]

    return ProjectProgress(
        steps=statuses,
        percent=percent,
        current_step=current,
        can_generate_abstract=abstract_status.unlocked,
    )


def is_section_unlocked(project: Any, section: Section) -> bool:
    """True if *section* may be written given the project's current content."""
    progress = evaluate_progress(project)
    return progress.status(step_for_section(section)).unlocked
