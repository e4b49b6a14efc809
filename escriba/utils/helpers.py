"""
Common text helpers: editor HTML to plain text, word counting, truncation.
"""
from html.parser import HTMLParser
from typing import List
import re


# Tags whose boundaries become line breaks in the plain-text rendition
_BLOCK_TAGS = frozenset({
    "p", "div", "br", "li", "ul", "ol", "h1", "h2", "h3", "h4", "h5", "h6",
    "blockquote", "pre", "tr", "td", "th", "table", "section", "article", "hr",
    "dl", "dt", "dd", "figure", "figcaption",
})

# Tags whose content is dropped entirely
_SKIPPED_TAGS = frozenset({"script", "style", "head", "title"})


class _PlainTextExtractor(HTMLParser):
    """Collects visible text; images are skipped and link targets ignored."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._parts: List[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag, attrs):
        if tag in _SKIPPED_TAGS:
            self._skip_depth += 1
        elif tag in _BLOCK_TAGS:
            self._parts.append("\n")

    def handle_startendtag(self, tag, attrs):
        if tag in _BLOCK_TAGS:
            self._parts.append("\n")

    def handle_endtag(self, tag):
        if tag in _SKIPPED_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
        elif tag in _BLOCK_TAGS:
            self._parts.append("\n")

    def handle_data(self, data):
        if not self._skip_depth:
            self._parts.append(data)

    def text(self) -> str:
        return "".join(self._parts)


def html_to_text(html: str) -> str:
    """
    Convert rich-text editor HTML into plain text.

    Args:
        html: HTML fragment as produced by the editor

    Returns:
        Plain text with one line per block element, no wrapping
    """
    if not html or not html.strip():
        return ""

    parser = _PlainTextExtractor()
    parser.feed(html)
    parser.close()

    text = parser.text().replace("\xa0", " ")
    # Collapse runs of spaces inside lines, then runs of blank lines
    text = re.sub(r"[ \t\r\f\v]+", " ", text)
    text = re.sub(r" *\n *", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def count_words(text: str) -> int:
    """
    Count whitespace-separated words.

    Args:
        text: Plain text

    Returns:
        Number of non-empty tokens
    """
    if not text:
        return 0
    return len(text.split())


def html_word_count(html: str) -> int:
    """Word count of an editor HTML fragment; 0 for blank input."""
    if not html or not html.strip():
        return 0
    return count_words(html_to_text(html))


def truncate_text(text: str, max_length: int = 200, suffix: str = "...") -> str:
    """
    Truncate text to maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
