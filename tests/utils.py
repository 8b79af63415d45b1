"""Common test utilities for ScriptLex tests."""

import re
from collections.abc import Sequence

from scriptlex.parser.tokens import DIALOGUE_CONTENT_TYPES, Token, TokenType


def strip_ansi_codes(text: str) -> str:
    """Strip ANSI escape sequences from CLI output."""
    return re.compile(r"\x1b\[[0-9;]*m").sub("", text)


def token_types(tokens: Sequence[Token]) -> list[str]:
    """Return the type names of ``tokens`` for compact assertions."""
    return [token.type.value for token in tokens]


def assert_well_bracketed(tokens: Sequence[Token]) -> None:
    """Assert the bracketing invariants of a token stream.

    Every dialogue block is closed, contains only cue, parenthetical and
    dialogue tokens and is never nested. Every dual group wraps exactly two
    complete, adjacent dialogue blocks.
    """
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token.type is TokenType.DUAL_DIALOGUE_BEGIN:
            index = _assert_block(tokens, index + 1, "left")
            index = _assert_block(tokens, index, "right")
            assert index < len(tokens), "unterminated dual dialogue group"
            assert tokens[index].type is TokenType.DUAL_DIALOGUE_END
            index += 1
        elif token.type is TokenType.DIALOGUE_BEGIN:
            index = _assert_block(tokens, index, None)
        else:
            assert token.type not in DIALOGUE_CONTENT_TYPES, (
                f"{token.type.value} outside a dialogue block at {index}"
            )
            assert token.type not in (
                TokenType.DIALOGUE_END,
                TokenType.DUAL_DIALOGUE_END,
            ), f"unmatched {token.type.value} at {index}"
            index += 1


def _assert_block(tokens: Sequence[Token], index: int, dual: str | None) -> int:
    assert index < len(tokens), "missing dialogue block"
    assert tokens[index].type is TokenType.DIALOGUE_BEGIN
    assert tokens[index].dual == dual
    index += 1
    assert tokens[index].type is TokenType.CHARACTER
    while tokens[index].type in DIALOGUE_CONTENT_TYPES:
        assert tokens[index].dual == dual
        index += 1
    assert tokens[index].type is TokenType.DIALOGUE_END, (
        f"expected dialogue_end at {index}, got {tokens[index].type.value}"
    )
    assert tokens[index].dual == dual
    return index + 1
