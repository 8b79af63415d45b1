"""HTML markup for tokens and the title page."""

from __future__ import annotations

import re
from collections.abc import Iterable

from scriptlex.parser.inline import LINE_BREAK_HTML, format_inline
from scriptlex.parser.tokens import TitleEntry, TokenType

_SIMPLE_TEMPLATES: dict[TokenType, str] = {
    TokenType.TRANSITION: "<h2>{}</h2>",
    TokenType.CHARACTER: "<h4>{}</h4>",
    TokenType.DIALOGUE: "<p>{}</p>",
    TokenType.PARENTHETICAL: '<p class="parenthetical">{}</p>',
    TokenType.ACTION: "<p>{}</p>",
    TokenType.CENTERED: '<p class="centered">{}</p>',
    TokenType.LYRICS: '<p class="lyrics">{}</p>',
    TokenType.SYNOPSIS: '<p class="synopsis">{}</p>',
    TokenType.NOTE: "<!-- {} -->",
}

_TITLE_PAGE_CLASSES = {
    "credit": "credit",
    "author": "authors",
    "authors": "authors",
    "written by": "authors",
    "source": "source",
    "notes": "notes",
    "draft date": "draft-date",
    "date": "date",
    "contact": "contact",
    "copyright": "copyright",
}


def render_token(
    token_type: TokenType,
    inner_html: str = "",
    *,
    scene_number: str | None = None,
    depth: int | None = None,
    dual: str | None = None,
) -> str:
    """Wrap already formatted inline HTML in the markup for ``token_type``."""
    if token_type is TokenType.SCENE_HEADING:
        if scene_number:
            return f'<h3 id="{scene_number}">{inner_html}</h3>'
        return f"<h3>{inner_html}</h3>"
    if token_type is TokenType.SECTION:
        return f'<p class="section" data-depth="{depth or 1}">{inner_html}</p>'
    if token_type is TokenType.DIALOGUE_BEGIN:
        return f'<div class="dialogue {dual}">' if dual else '<div class="dialogue">'
    if token_type is TokenType.DUAL_DIALOGUE_BEGIN:
        return '<div class="dual-dialogue">'
    if token_type in (TokenType.DIALOGUE_END, TokenType.DUAL_DIALOGUE_END):
        return "</div>"
    if token_type is TokenType.PAGE_BREAK:
        return "<hr />"
    if token_type is TokenType.NOTE:
        # "--" would close the comment early
        inner_html = inner_html.replace("--", "&#45;&#45;")
    template = _SIMPLE_TEMPLATES.get(token_type, "<p>{}</p>")
    return template.format(inner_html)


def _css_class(key: str) -> str:
    lowered = key.strip().lower().replace("_", " ")
    if lowered in _TITLE_PAGE_CLASSES:
        return _TITLE_PAGE_CLASSES[lowered]
    return re.sub(r"[^a-z0-9]+", "-", lowered).strip("-") or "field"


def render_title_page(entries: Iterable[TitleEntry]) -> str:
    """Render title page entries in the order they were written."""
    parts = []
    for entry in entries:
        inner = LINE_BREAK_HTML.join(format_inline(item).html for item in entry.items)
        if entry.key.strip().lower() == "title":
            parts.append(f"<h1>{inner}</h1>")
        else:
            parts.append(f'<p class="{_css_class(entry.key)}">{inner}</p>')
    return "".join(parts)
