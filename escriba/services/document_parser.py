"""
Text extraction for uploaded article drafts (PDF, DOCX, TXT).

Returns a ParsedDocument with the full text and a little metadata, and
validates that the text looks like an academic article before it is
handed to the model.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

import aiofiles
import fitz  # PyMuPDF
from docx import Document as DocxDocument

from escriba.utils.helpers import count_words

logger = logging.getLogger(__name__)


# Heading keywords (pt-BR and English) the validator looks for
_SECTION_KEYWORDS = {
    "Introdução": ("introdução", "introduction"),
    "Metodologia": ("metodologia", "método", "methodology"),
    "Resultados": ("resultados", "results"),
}

MIN_RECOMMENDED_CHARS = 1000
MAX_RECOMMENDED_CHARS = 50000


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class ParsedDocument:
    """
    Output of the DocumentParser.

    Attributes:
        full_text: Complete text of the document.
        metadata:  Dict with keys: file_type, word_count, char_count and,
                   for PDFs, page_count.
    """

    full_text: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DocumentValidation:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class DocumentParser:
    """Extracts plain text from PDF, DOCX and TXT files."""

    async def parse_document(self, file_path: str, file_type: str) -> ParsedDocument:
        """
        Parse a document file and return its text.

        Args:
            file_path: Path to the file on disk.
            file_type: Extension with or without dot, e.g. ".pdf" or "docx".

        Raises:
            ValueError:   Unsupported file type.
            RuntimeError: Password-protected or unreadable file.
        """
        ft = file_type.lower().lstrip(".")
        if ft == "pdf":
            parsed = self._parse_pdf(file_path)
        elif ft == "docx":
            parsed = self._parse_docx(file_path)
        elif ft == "txt":
            parsed = await self._parse_txt(file_path)
        else:
            raise ValueError(f"Tipo de arquivo não suportado: {file_type!r}")

        parsed.metadata.update({
            "file_type": ft,
            "word_count": count_words(parsed.full_text),
            "char_count": len(parsed.full_text),
        })
        logger.info(
            "Parsed %s: %d words, %d chars",
            file_path,
            parsed.metadata["word_count"],
            parsed.metadata["char_count"],
        )
        return parsed

    def _parse_pdf(self, file_path: str) -> ParsedDocument:
        """One line of text per page, spans joined by spaces."""
        try:
            doc = fitz.open(file_path)
        except Exception as exc:
            raise RuntimeError(f"Não foi possível abrir o PDF: {exc}") from exc

        try:
            if doc.needs_pass:
                raise RuntimeError("O PDF está protegido por senha. Envie uma cópia desbloqueada.")

            pages: List[str] = []
            for page in doc:
                words = page.get_text("text").split()
                pages.append(" ".join(words))
            return ParsedDocument(
                full_text="\n".join(pages).strip(),
                metadata={"page_count": doc.page_count},
            )
        finally:
            doc.close()

    def _parse_docx(self, file_path: str) -> ParsedDocument:
        """Paragraph text followed by table rows (cells joined with ' | ')."""
        try:
            doc = DocxDocument(file_path)
        except Exception as exc:
            raise RuntimeError(f"Não foi possível abrir o DOCX: {exc}") from exc

        lines = [p.text for p in doc.paragraphs if p.text.strip()]
        for table in doc.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells]
                if any(cells):
                    lines.append(" | ".join(cells))
        return ParsedDocument(full_text="\n".join(lines).strip())

    async def _parse_txt(self, file_path: str) -> ParsedDocument:
        async with aiofiles.open(file_path, "r", encoding="utf-8", errors="replace") as fh:
            text = await fh.read()
        return ParsedDocument(full_text=text.strip())


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_document(text: str) -> DocumentValidation:
    """
    Check extracted text before analysis.

    Only an empty document is an error; missing sections and unusual
    lengths are reported as warnings.
    """
    result = DocumentValidation()
    lowered = text.lower()

    for label, keywords in _SECTION_KEYWORDS.items():
        if not any(keyword in lowered for keyword in keywords):
            result.warnings.append(f'Seção "{label}" não encontrada (recomendado)')

    if len(text) < MIN_RECOMMENDED_CHARS:
        result.warnings.append(f"Documento muito curto (menos de {MIN_RECOMMENDED_CHARS} caracteres)")
    if len(text) > MAX_RECOMMENDED_CHARS:
        result.warnings.append(
            f"Documento muito longo (mais de {MAX_RECOMMENDED_CHARS} caracteres); a análise pode demorar"
        )

    if not text.strip():
        result.errors.append("Documento vazio ou não foi possível extrair o texto")

    return result
