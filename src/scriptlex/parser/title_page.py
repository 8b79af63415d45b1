"""Title page extraction."""

from __future__ import annotations

import re
from dataclasses import dataclass

from scriptlex.parser.rules import FORCED_MARKERS
from scriptlex.parser.tokens import TitleEntry

TITLE_KEY_PATTERN = re.compile(r"^(?P<key>[A-Za-z][\w .'/-]*?)\s*:\s*(?P<value>.*)$")
LIST_ITEM_PATTERN = re.compile(r"^\s*[-*+]\s+(?P<item>.*)$")

KNOWN_TITLE_KEYS = frozenset(
    {
        "title",
        "credit",
        "author",
        "authors",
        "written by",
        "source",
        "notes",
        "draft date",
        "date",
        "contact",
        "copyright",
        "revision",
        "episode",
        "season",
        "series",
    }
)

# Lines starting with these can only belong to the script body
_BODY_MARKERS = FORCED_MARKERS + "#="


@dataclass(frozen=True)
class TitlePage:
    """Title page entries and where the script body starts."""

    entries: tuple[TitleEntry, ...] = ()
    body_offset: int = 0


def _opens_title_page(line: str) -> bool:
    if line[:1] in _BODY_MARKERS:
        return False
    match = TITLE_KEY_PATTERN.match(line)
    if not match:
        return False
    key = match.group("key")
    # "FADE IN:" and friends look like keys but start the body
    return not (key.isupper() and key.lower() not in KNOWN_TITLE_KEYS)


def parse_title_page(text: str) -> TitlePage:
    """Extract a leading ``Key: value`` block from ``text``.

    The block runs from the first non-blank line to the first blank line.
    A line with a key starts a new entry; an indented or list-marked line
    adds an item to the current entry. Other lines are ignored. A repeated
    key (compared case-insensitively) replaces the earlier value but keeps
    its position.

    Args:
        text: Normalised screenplay text.

    Returns:
        The entries and the offset of the first body line. When no title
        block is present the entries are empty and the offset is zero.
    """
    lines = text.splitlines(keepends=True)
    index = 0
    offset = 0
    while index < len(lines) and not lines[index].strip():
        offset += len(lines[index])
        index += 1

    if index == len(lines) or not _opens_title_page(lines[index].rstrip("\n")):
        return TitlePage()

    entries: dict[str, tuple[str, list[str]]] = {}
    current: list[str] | None = None

    while index < len(lines) and lines[index].strip():
        line = lines[index].rstrip("\n")
        offset += len(lines[index])
        index += 1

        list_item = LIST_ITEM_PATTERN.match(line)
        if list_item or line[:1].isspace():
            if current is not None:
                item = list_item.group("item") if list_item else line
                current.append(item.strip())
            continue

        match = TITLE_KEY_PATTERN.match(line)
        if match:
            key = match.group("key")
            value = match.group("value").strip()
            current = [value] if value else []
            entries[key.lower()] = (key, current)

    while index < len(lines) and not lines[index].strip():
        offset += len(lines[index])
        index += 1

    return TitlePage(
        entries=tuple(
            TitleEntry(key=key, value="\n".join(items))
            for key, items in entries.values()
        ),
        body_offset=offset,
    )
