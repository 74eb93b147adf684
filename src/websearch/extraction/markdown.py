"""HTML fragment to Markdown conversion."""

import re

import html2text

_TRAILING_SPACE_RE = re.compile(r"[ \t]+$", re.MULTILINE)
_BLANK_LINES_RE = re.compile(r"\n{3,}")


def _converter() -> html2text.HTML2Text:
    converter = html2text.HTML2Text()
    converter.body_width = 0  # No wrapping
    converter.ignore_links = False
    converter.ignore_images = True
    converter.ignore_emphasis = False
    converter.ignore_tables = False
    converter.unicode_snob = True
    converter.mark_code = False
    converter.protect_links = False
    return converter


def to_markdown(html: str) -> str:
    """
    Convert an HTML content fragment to normalized Markdown.

    Headings, lists, emphasis and links are kept; images and any other markup
    are dropped. Same input, same output.

    Args:
        html: HTML fragment, usually a readability summary

    Returns:
        Markdown text, empty when the fragment has no text
    """
    if not html or not html.strip():
        return ""

    # A fresh converter per call, HTML2Text keeps state between feeds
    markdown = _converter().handle(html)
    markdown = _TRAILING_SPACE_RE.sub("", markdown)
    markdown = _BLANK_LINES_RE.sub("\n\n", markdown)
    return markdown.strip()
