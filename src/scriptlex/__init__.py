"""ScriptLex: a lexer for the Fountain screenplay format.

ScriptLex turns Fountain text into a flat, typed token stream with title
page metadata and an HTML projection, ready for preview, statistics,
export and scene board consumers.
"""

from .exceptions import ParseError, ScriptLexError
from .parser import (
    FountainParser,
    ParseResult,
    ParserOptions,
    RenderedHTML,
    TitleEntry,
    Token,
    TokenType,
    parse,
)
from .scene_board import SceneCard, build_scene_board

__version__ = "0.1.0"

__all__ = [
    "FountainParser",
    "ParseError",
    "ParseResult",
    "ParserOptions",
    "RenderedHTML",
    "SceneCard",
    "ScriptLexError",
    "TitleEntry",
    "Token",
    "TokenType",
    "__version__",
    "build_scene_board",
    "parse",
]
