"""
Built-in writing hints shown beside the editor.

These need no model call: each section has a short list of fixed hints,
some of which only appear once the section has enough words for the hint
to make sense.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from escriba.models.database_models import Section
from escriba.utils.helpers import html_word_count


@dataclass(frozen=True)
class Hint:
    type: str       # structure | clarity | improvement | reference
    title: str
    content: str
    icon: str
    min_words: int = 0  # >0: shown only when the section has more words than this


_HINTS: Dict[Section, List[Hint]] = {
    Section.OBJECTIVES: [
        Hint(
            "structure",
            "Objetivos Claros",
            "Divida seus objetivos em Geral (o propósito central da pesquisa) e Específicos "
            "(metas mensuráveis para alcançar o objetivo geral).",
            "Lightbulb",
        ),
        Hint(
            "clarity",
            "Verbos de Ação",
            "Use verbos precisos como 'analisar', 'investigar', 'avaliar', 'identificar' "
            "ao invés de 'estudar' ou 'conhecer'.",
            "AlertCircle",
            min_words=30,
        ),
        Hint(
            "improvement",
            "Alinhamento",
            "Certifique-se de que seus objetivos específicos respondem diretamente ao objetivo "
            "geral e estão alinhados com sua premissa.",
            "Lightbulb",
        ),
    ],
    Section.LITERATURE: [
        Hint(
            "structure",
            "Revisão Crítica",
            "Não apenas descreva o que outros autores disseram - faça conexões, identifique "
            "lacunas e posicione sua pesquisa no contexto existente.",
            "Lightbulb",
        ),
        Hint(
            "reference",
            "Atualidade das Fontes",
            "Priorize referências dos últimos 5 anos, especialmente em áreas com rápida "
            "evolução tecnológica ou conceitual.",
            "BookOpen",
            min_words=50,
        ),
        Hint(
            "improvement",
            "Organização Temática",
            "Organize sua revisão por temas ou conceitos, não apenas cronologicamente ou por autor.",
            "AlertCircle",
        ),
    ],
    Section.INTRODUCTION: [
        Hint(
            "structure",
            "Estrutura da Introdução",
            "Comece contextualizando o problema de forma ampla. Considere apresentar dados "
            "estatísticos ou um panorama geral do tema.",
            "Lightbulb",
        ),
        Hint(
            "clarity",
            "Clareza na Escrita",
            "Frases muito longas prejudicam a leitura. Considere dividi-las para melhorar a legibilidade.",
            "AlertCircle",
            min_words=50,
        ),
        Hint(
            "reference",
            "Problema de Pesquisa",
            "Termine a introdução deixando explícitos o problema de pesquisa e a justificativa do estudo.",
            "BookOpen",
        ),
    ],
    Section.METHODOLOGY: [
        Hint(
            "structure",
            "Tempo Verbal",
            "A metodologia deve estar em tempo passado, descrevendo os procedimentos que foram realizados.",
            "AlertCircle",
        ),
        Hint(
            "improvement",
            "Detalhamento Necessário",
            "Especifique o perfil dos participantes ou da amostra com mais detalhes "
            "(faixa etária, formação, critérios de inclusão).",
            "Lightbulb",
            min_words=30,
        ),
        Hint(
            "reference",
            "Referência Metodológica",
            "Creswell, J. W. (2014). Projeto de pesquisa: métodos qualitativo, quantitativo e misto. "
            "Esta obra é referência em metodologia de pesquisa.",
            "BookOpen",
        ),
    ],
    Section.RESULTS: [
        Hint(
            "structure",
            "Separação de Seções",
            "Evite interpretar resultados nesta seção. Reserve as interpretações e discussões "
            "para a seção de Discussão.",
            "AlertCircle",
        ),
        Hint(
            "improvement",
            "Visualização de Dados",
            "Considere adicionar elementos visuais (tabelas, gráficos) para ilustrar os dados "
            "de forma mais clara.",
            "Lightbulb",
        ),
        Hint(
            "clarity",
            "Organização dos Resultados",
            "Organize os resultados de forma lógica, do geral ao específico, para facilitar a compreensão.",
            "Lightbulb",
            min_words=40,
        ),
    ],
}


def hints_for(section: Section, content: str) -> List[Hint]:
    """Hints applicable to *section* given its current HTML *content*."""
    words = html_word_count(content)
    return [hint for hint in _HINTS[Section(section)] if not hint.min_words or words > hint.min_words]
