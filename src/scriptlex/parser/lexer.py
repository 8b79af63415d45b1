"""Block lexer: turns the script body into a flat token stream.

The lexer splits the body into paragraphs, classifies each one with the
rule table and emits tokens. Dialogue blocks are bracketed by
``dialogue_begin``/``dialogue_end``. Because a ``^`` cue only reveals that
it pairs with the block before it, the most recently completed block is
held in a one-slot buffer until the next token decides its fate: a dual cue
wraps both blocks in ``dual_dialogue_begin``/``dual_dialogue_end``, anything
else flushes the buffered block unchanged.
"""

from __future__ import annotations

import re
from enum import Enum

from scriptlex.config import get_logger
from scriptlex.parser.html import render_token
from scriptlex.parser.inline import extract_notes, format_inline, strip_notes
from scriptlex.parser.options import ParserOptions
from scriptlex.parser.rules import DialogueElement, Element, classify
from scriptlex.parser.tokens import Token, TokenType

logger = get_logger(__name__)

BONEYARD_PATTERN = re.compile(r"/\*.*?\*/", re.DOTALL)

# Two spaces keep a paragraph open, e.g. an intentional empty dialogue line
SOFT_BLANK_LINE = "  "


class LexerState(str, Enum):
    """Where the lexer is relative to the dual dialogue buffer.

    A dialogue block itself is read in one step by the dialogue rules, so
    the lexer only has to track whether a completed block is waiting for a
    possible ``^`` partner.
    """

    DEFAULT = "default"
    IN_DUAL_DIALOGUE_BUFFER = "in_dual_dialogue_buffer"


def strip_boneyard(text: str) -> str:
    """Delete ``/* ... */`` spans, including ones spanning paragraphs.

    An opening ``/*`` without a closing ``*/`` is kept as literal text.
    """
    return BONEYARD_PATTERN.sub("", text)


def _is_blank(line: str) -> bool:
    return not line.strip() and line != SOFT_BLANK_LINE


def split_paragraphs(text: str) -> list[list[str]]:
    """Split text into maximal runs of non-blank lines."""
    paragraphs: list[list[str]] = []
    current: list[str] = []
    for line in text.split("\n"):
        if _is_blank(line):
            if current:
                paragraphs.append(current)
                current = []
        else:
            current.append(line)
    if current:
        paragraphs.append(current)
    return paragraphs


class BlockLexer:
    """State machine for one lexing run.

    Instances hold the state of a single run and are not reused; create a
    fresh lexer for every body you tokenize.
    """

    def __init__(self, options: ParserOptions | None = None) -> None:
        """Initialize the lexer.

        Args:
            options: Parser options; defaults are used when omitted.
        """
        self.options = options or ParserOptions()
        self.state = LexerState.DEFAULT
        self._tokens: list[Token] = []
        self._pending: DialogueElement | None = None
        self._scene_count = 0
        self._dual_groups = 0

    def tokenize(self, text: str) -> list[Token]:
        """Lex a normalised script body.

        Args:
            text: Body text with ``\\n`` line endings and no title page.

        Returns:
            Tokens in source order.
        """
        paragraphs = split_paragraphs(strip_boneyard(text))
        for paragraph in paragraphs:
            self._lex_paragraph(paragraph)
        self._flush_pending()

        logger.debug(
            "Lexed script body",
            paragraphs=len(paragraphs),
            tokens=len(self._tokens),
            scenes=self._scene_count,
            dual_groups=self._dual_groups,
        )
        return self._tokens

    def _lex_paragraph(self, lines: list[str]) -> None:
        raw = "\n".join(lines)
        if "[[" in raw:
            stripped = strip_notes(raw)
            if not stripped.strip():
                if self.options.keep_notes:
                    for note in extract_notes(raw):
                        self._emit(Element(TokenType.NOTE, note))
                return
            lines = [
                line
                for line in stripped.split("\n")
                if line.strip() or line == SOFT_BLANK_LINE
            ]

        after_blank = True
        while lines:
            classification = classify(lines, after_blank)
            self._emit(classification.element)
            lines = lines[classification.consumed :]
            # The line that cut a dialogue block short opens a new unit
            after_blank = isinstance(classification.element, DialogueElement)

    def _emit(self, element: Element | DialogueElement) -> None:
        if isinstance(element, DialogueElement):
            self._emit_dialogue(element)
            return
        self._flush_pending()
        self._tokens.append(self._make_token(element))

    def _emit_dialogue(self, block: DialogueElement) -> None:
        if block.dual and self.state is LexerState.IN_DUAL_DIALOGUE_BUFFER:
            left = self._take_pending()
            self._tokens.append(self._bracket(TokenType.DUAL_DIALOGUE_BEGIN))
            self._tokens.extend(self._dialogue_tokens(left, "left"))
            self._tokens.extend(self._dialogue_tokens(block, "right"))
            self._tokens.append(self._bracket(TokenType.DUAL_DIALOGUE_END))
            self._dual_groups += 1
            return

        self._flush_pending()
        self._pending = block
        self.state = LexerState.IN_DUAL_DIALOGUE_BUFFER

    def _take_pending(self) -> DialogueElement:
        block, self._pending = self._pending, None
        assert block is not None
        self.state = LexerState.DEFAULT
        return block

    def _flush_pending(self) -> None:
        if self.state is LexerState.IN_DUAL_DIALOGUE_BUFFER:
            self._tokens.extend(self._dialogue_tokens(self._take_pending(), None))

    def _dialogue_tokens(
        self, block: DialogueElement, dual: str | None
    ) -> list[Token]:
        tokens = [self._bracket(TokenType.DIALOGUE_BEGIN, dual)]
        tokens.append(
            self._make_token(Element(TokenType.CHARACTER, block.character), dual)
        )
        tokens.extend(self._make_token(line, dual) for line in block.lines)
        tokens.append(self._bracket(TokenType.DIALOGUE_END, dual))
        return tokens

    def _bracket(self, token_type: TokenType, dual: str | None = None) -> Token:
        html = render_token(token_type, dual=dual) if self.options.render_html else None
        return Token(type=token_type, html=html, dual=dual)

    def _make_token(self, element: Element, dual: str | None = None) -> Token:
        scene_number = element.scene_number
        if element.type is TokenType.SCENE_HEADING:
            self._scene_count += 1
            if scene_number is None and self.options.auto_number_scenes:
                scene_number = str(self._scene_count)

        formatted = format_inline(element.text)
        html = None
        if self.options.render_html:
            html = render_token(
                element.type,
                formatted.html,
                scene_number=scene_number,
                depth=element.depth,
            )
        return Token(
            type=element.type,
            text=formatted.plain,
            html=html,
            scene_number=scene_number,
            dual=dual,
            depth=element.depth,
        )


def tokenize(text: str, options: ParserOptions | None = None) -> list[Token]:
    """Lex ``text`` with a fresh :class:`BlockLexer`."""
    return BlockLexer(options).tokenize(text)
