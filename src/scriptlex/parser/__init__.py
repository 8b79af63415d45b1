"""Fountain screenplay lexer for ScriptLex."""

from __future__ import annotations

from .fountain_parser import FountainParser, parse
from .options import ParserOptions
from .tokens import ParseResult, RenderedHTML, TitleEntry, Token, TokenType

__all__ = [
    "FountainParser",
    "ParseResult",
    "ParserOptions",
    "RenderedHTML",
    "TitleEntry",
    "Token",
    "TokenType",
    "parse",
]
