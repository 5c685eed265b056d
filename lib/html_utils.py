# =============================================================================
# lib/html_utils.py - HTML Helpers for Article Content
# =============================================================================
# Article bodies are stored as HTML. This module provides:
# - Plain-text extraction for search records, prompts and similarity checks
# - Table of contents generation (h2/h3) with stable heading anchors
# - Reading time estimation
# - Cleanup of imported WordPress markup and of LLM-generated HTML
#
# Parsing is done with BeautifulSoup; simple character-level cleanups use re.
# =============================================================================

from __future__ import annotations

import math
import re
from typing import Any

from bs4 import BeautifulSoup, Comment

SEARCH_CONTENT_LIMIT = 3000

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_ENTITIES = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
}


# =============================================================================
# Plain Text
# =============================================================================

def strip_html_for_search(html: str | None, limit: int = SEARCH_CONTENT_LIMIT) -> str:
    """
    Convert HTML to the plain text stored in the search index.

    Tags are removed, common entities decoded, whitespace collapsed and the
    result truncated to `limit` characters.
    """
    if not html:
        return ""

    text = _TAG_RE.sub("", html)
    for entity, replacement in _ENTITIES.items():
        text = text.replace(entity, replacement)
    text = _WHITESPACE_RE.sub(" ", text).strip()
    return text[:limit]


def plain_text(html: str | None) -> str:
    """Tags replaced by spaces, whitespace collapsed."""
    if not html:
        return ""
    return _WHITESPACE_RE.sub(" ", _TAG_RE.sub(" ", html)).strip()


# =============================================================================
# Table of Contents
# =============================================================================

def build_table_of_contents(html: str | None) -> tuple[str, list[dict[str, Any]]]:
    """
    Build a table of contents from h2/h3 headings.

    Headings without an id get a deterministic "heading-{n}" id (n counts
    headings in document order from 1), so a TOC stored at publish time
    keeps matching content rendered later. Existing ids are kept.

    Returns:
        (html with heading ids, [{"id", "text", "level"}, ...])

    Example:
        html, toc = build_table_of_contents("<h2>Intro</h2><p>...</p>")
        # html == '<h2 id="heading-1">Intro</h2><p>...</p>'
        # toc  == [{"id": "heading-1", "text": "Intro", "level": 2}]
    """
    if not html:
        return "", []

    soup = BeautifulSoup(html, "html.parser")
    toc: list[dict[str, Any]] = []

    for index, heading in enumerate(soup.find_all(["h2", "h3"]), start=1):
        text = heading.get_text(" ", strip=True)
        if not text:
            continue
        heading_id = heading.get("id") or f"heading-{index}"
        heading["id"] = heading_id
        toc.append({
            "id": heading_id,
            "text": text,
            "level": int(heading.name[1]),
        })

    return str(soup), toc


def extract_h2_headings(html: str | None) -> list[str]:
    """Text of every h2 heading in document order."""
    if not html:
        return []
    soup = BeautifulSoup(html, "html.parser")
    return [h.get_text(" ", strip=True) for h in soup.find_all("h2")]


def reading_time_minutes(html: str | None, chars_per_minute: int = 500) -> int:
    """
    Estimated reading time in minutes (at least 1).

    Japanese text has no word boundaries, so the estimate counts characters.
    """
    length = len(plain_text(html).replace(" ", ""))
    return max(1, math.ceil(length / chars_per_minute))


# =============================================================================
# Markup Cleanup
# =============================================================================

def clean_wordpress_html(html: str | None) -> str:
    """
    Normalize markup imported from WordPress.

    - Removes block comments (<!-- wp:... -->) and any other comments
    - Removes wp-* classes, dropping class attributes left empty
    - Converts figure to div and figcaption to p
    - Removes empty paragraphs
    - Limits runs of <br> to two
    - Collapses whitespace between tags
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")

    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()

    for tag in soup.find_all(class_=True):
        classes = [c for c in tag.get("class", []) if not c.startswith("wp-")]
        if classes:
            tag["class"] = classes
        else:
            del tag["class"]

    for figure in soup.find_all("figure"):
        figure.name = "div"
    for caption in soup.find_all("figcaption"):
        caption.name = "p"

    for paragraph in soup.find_all("p"):
        if not paragraph.get_text(strip=True) and not paragraph.find(["img", "iframe", "video"]):
            paragraph.decompose()

    cleaned = str(soup)
    cleaned = re.sub(r"(<br\s*/?>\s*){3,}", "<br/><br/>", cleaned)
    cleaned = re.sub(r">\s+<", "><", cleaned)
    return cleaned.strip()


def clean_generated_html(text: str | None) -> str:
    """
    Tidy HTML returned by the LLM.

    Strips Markdown code fences, removes whitespace between tags and keeps a
    single newline between paragraphs and headings.
    """
    if not text:
        return ""

    cleaned = re.sub(r"```html\n?", "", text)
    cleaned = re.sub(r"```\n?", "", cleaned)
    cleaned = re.sub(r"\n{3,}", "\n\n", cleaned)
    cleaned = re.sub(r">\s+<", "><", cleaned)
    cleaned = re.sub(r"</p>\s*<p>", "</p>\n<p>", cleaned)
    cleaned = re.sub(r"</h([23])>\s*<p>", r"</h\1>\n<p>", cleaned)
    return cleaned.strip()
