"""Inline markup handling: escapes, notes and emphasis.

Every text-bearing token is run through :func:`format_inline`, which yields
two projections of the same source text:

* ``plain`` - all emphasis markers removed, escapes resolved. Used for
  ``Token.text`` and by anything that counts words or lines.
* ``html`` - HTML-escaped text with emphasis rendered as nested ``<span>``
  elements and line breaks as ``<br />``.

Emphasis is matched longest marker first (``***`` then ``**`` then ``*``,
then ``_``) and never spans lines. An opening marker without a partner on
the same line is kept as literal text.
"""

from __future__ import annotations

import html
import re
from collections.abc import Callable
from dataclasses import dataclass

# Escaped markup characters are parked on private-use code points while
# emphasis runs, then restored as literals. Code points from that range
# already present in the input are shielded first so they round-trip.
_ESCAPES = {
    "\\": "\ue000",
    "*": "\ue001",
    "_": "\ue002",
    "[": "\ue003",
    "]": "\ue004",
}
_RESTORE = {placeholder: char for char, placeholder in _ESCAPES.items()}
_SHIELD = "\ue005"
_RESERVED_PATTERN = re.compile("[\ue000-\ue005]")
_ESCAPE_PATTERN = re.compile(r"\\([\\*_\[\]])")
_RESTORE_PATTERN = re.compile(_SHIELD + "([0-5])|([\ue000-\ue004])")

NOTE_PATTERN = re.compile(r"\[\[(.*?)\]\]", re.DOTALL)

# Ordered longest marker first; a triple run must never be read as * + **.
EMPHASIS_RULES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("bold italic", re.compile(r"\*{3}(?=\S)(.+?)(?<=\S)\*{3}")),
    ("bold", re.compile(r"\*{2}(?=\S)(.+?)(?<=\S)\*{2}")),
    ("italic", re.compile(r"\*(?=\S)(.+?)(?<=\S)\*")),
    ("underline", re.compile(r"_(?=\S)(.+?)(?<=\S)_")),
)

LINE_BREAK_HTML = "<br />"


@dataclass(frozen=True)
class FormattedText:
    """Plain and HTML projections of one piece of source text."""

    plain: str
    html: str


def _park_escapes(text: str) -> str:
    text = _RESERVED_PATTERN.sub(
        lambda m: f"{_SHIELD}{ord(m.group(0)) - 0xE000}", text
    )
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPES[m.group(1)], text)


def _restore_escapes(text: str, keep_backslash: bool = False) -> str:
    def restore(match: re.Match[str]) -> str:
        if match.group(1) is not None:
            return chr(0xE000 + int(match.group(1)))
        char = _RESTORE[match.group(2)]
        return f"\\{char}" if keep_backslash else char

    return _RESTORE_PATTERN.sub(restore, text)


def _apply_emphasis(text: str, wrap: Callable[[str, str], str]) -> str:
    for css_class, pattern in EMPHASIS_RULES:
        text = pattern.sub(lambda m, c=css_class: wrap(c, m.group(1)), text)
    return text


def _span(css_class: str, inner: str) -> str:
    return f'<span class="{css_class}">{inner}</span>'


def _unwrap(_css_class: str, inner: str) -> str:
    return inner


def strip_notes(text: str) -> str:
    """Remove ``[[note]]`` spans, including ones that cross line breaks.

    Escaped brackets never delimit a note; escapes are left in place.
    """
    return _restore_escapes(
        NOTE_PATTERN.sub("", _park_escapes(text)), keep_backslash=True
    )


def extract_notes(text: str) -> list[str]:
    """Return the stripped bodies of all ``[[note]]`` spans in ``text``."""
    return [
        _restore_escapes(match.group(1), keep_backslash=True).strip()
        for match in NOTE_PATTERN.finditer(_park_escapes(text))
    ]


def _format_parked(line: str) -> FormattedText:
    plain = _apply_emphasis(line, _unwrap)
    marked_up = _apply_emphasis(html.escape(line, quote=False), _span)
    return FormattedText(
        plain=_restore_escapes(plain),
        html=_restore_escapes(marked_up),
    )


def format_line(line: str) -> FormattedText:
    """Format a single line of source text.

    Args:
        line: Raw text of one line, without its newline.

    Returns:
        The plain-text and HTML projections of the line.
    """
    return _format_parked(NOTE_PATTERN.sub("", _park_escapes(line)))


def format_inline(text: str) -> FormattedText:
    """Format possibly multi-line text line by line.

    Notes are removed before the text is split so a note may span lines.

    Args:
        text: Raw token text; lines are separated by ``\\n``.

    Returns:
        Projections joined with ``\\n`` (plain) and ``<br />`` (HTML).
    """
    parked = NOTE_PATTERN.sub("", _park_escapes(text))
    lines = [_format_parked(line) for line in parked.split("\n")]
    return FormattedText(
        plain="\n".join(line.plain for line in lines),
        html=LINE_BREAK_HTML.join(line.html for line in lines),
    )
