"""Data models for the screenplay token stream."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TokenType(str, Enum):
    """Structural role of a token.

    Consumers switch on this value and must ignore types they do not know.
    """

    SCENE_HEADING = "scene_heading"
    ACTION = "action"
    CHARACTER = "character"
    DIALOGUE = "dialogue"
    PARENTHETICAL = "parenthetical"
    TRANSITION = "transition"
    DIALOGUE_BEGIN = "dialogue_begin"
    DIALOGUE_END = "dialogue_end"
    DUAL_DIALOGUE_BEGIN = "dual_dialogue_begin"
    DUAL_DIALOGUE_END = "dual_dialogue_end"
    SECTION = "section"
    SYNOPSIS = "synopsis"
    NOTE = "note"
    PAGE_BREAK = "page_break"
    CENTERED = "centered"
    LYRICS = "lyrics"


# Token types allowed between dialogue_begin and dialogue_end
DIALOGUE_CONTENT_TYPES = frozenset(
    {TokenType.CHARACTER, TokenType.PARENTHETICAL, TokenType.DIALOGUE}
)


@dataclass(frozen=True)
class Token:
    """A single classified element of a screenplay."""

    type: TokenType
    text: str = ""
    html: str | None = None
    scene_number: str | None = None
    dual: str | None = None  # "left" or "right" inside a dual dialogue group
    depth: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize the token, omitting unset optional fields."""
        data: dict[str, Any] = {"type": self.type.value, "text": self.text}
        if self.html is not None:
            data["html"] = self.html
        if self.scene_number is not None:
            data["sceneNumber"] = self.scene_number
        if self.dual is not None:
            data["dual"] = self.dual
        if self.depth is not None:
            data["depth"] = self.depth
        return data


@dataclass(frozen=True)
class TitleEntry:
    """One key of the title page block."""

    key: str
    value: str

    @property
    def items(self) -> list[str]:
        """Return the value split into its list items."""
        return self.value.split("\n") if self.value else []


@dataclass(frozen=True)
class RenderedHTML:
    """HTML projections of a parsed document."""

    title_page: str = ""
    script: str = ""


@dataclass(frozen=True)
class ParseResult:
    """Everything produced by one parse call."""

    title_page: tuple[TitleEntry, ...] = ()
    tokens: tuple[Token, ...] = ()
    html: RenderedHTML = field(default_factory=RenderedHTML)

    def get_title_value(self, *keys: str) -> str | None:
        """Return the value of the first matching title key (case-insensitive)."""
        wanted = [key.lower() for key in keys]
        by_key = {entry.key.lower(): entry.value for entry in self.title_page}
        for key in wanted:
            if key in by_key:
                return by_key[key]
        return None

    @property
    def title(self) -> str | None:
        """Script title from the title page, if any."""
        return self.get_title_value("title")

    @property
    def authors(self) -> str | None:
        """Author credit from the title page, if any."""
        return self.get_title_value("author", "authors", "written by")

    def tokens_of(self, *types: TokenType) -> list[Token]:
        """Return the tokens whose type is one of ``types``, in order."""
        return [token for token in self.tokens if token.type in types]

    def to_dict(self) -> dict[str, Any]:
        """Serialize the result into JSON-ready primitives."""
        return {
            "titlePage": [
                {"key": entry.key, "value": entry.value} for entry in self.title_page
            ],
            "tokens": [token.to_dict() for token in self.tokens],
            "html": {
                "titlePage": self.html.title_page,
                "script": self.html.script,
            },
        }
