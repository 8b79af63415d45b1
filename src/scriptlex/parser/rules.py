"""Ordered classification rules for screenplay paragraphs.

A paragraph is a run of non-blank lines. The lexer hands the remaining lines
of a paragraph to :func:`classify`, which walks :data:`BLOCK_RULES` in order
and lets the first rule whose predicate accepts the lines build an element.
Each element records how many lines it consumed; the lexer re-classifies
whatever is left of the paragraph, so no line is ever dropped.

Forced markers come first so they always beat auto-detection. Action is the
last rule and accepts anything.

Lines inside a dialogue block are classified with :data:`DIALOGUE_RULES`.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from scriptlex.parser.tokens import TokenType

FORCED_MARKERS = "!@.>~"

PAGE_BREAK_PATTERN = re.compile(r"^={3,}$")
SECTION_PATTERN = re.compile(r"^(#+)\s*(.*)$")
SYNOPSIS_PATTERN = re.compile(r"^=(?!=)\s*(.*)$")
SCENE_HEADING_PATTERN = re.compile(
    r"^(?:INT\.?/EXT|EXT\.?/INT|I/E|E/I|INT|EXT|EST)(?:\.\s*|\s+)\S",
    re.IGNORECASE,
)
# Inside a speech only an uppercase heading ends the block
DIALOGUE_BREAK_PATTERN = re.compile(SCENE_HEADING_PATTERN.pattern)
SCENE_NUMBER_PATTERN = re.compile(r"\s*#([\w.\-]+)#\s*$")
TRANSITION_PATTERN = re.compile(r"^[^a-z]*TO:$")
TRANSITION_PHRASES = frozenset(
    {"FADE IN:", "FADE OUT.", "FADE TO BLACK.", "CUT TO BLACK."}
)
CUE_EXTENSION_PATTERN = re.compile(r"^(?:\([^()]*\)\s*)+$")
PARENTHETICAL_PATTERN = re.compile(r"^\(.*\)$")
CUE_TRAILING_PUNCTUATION = ".,;:!?"


@dataclass(frozen=True)
class Element:
    """A classified, not yet formatted, piece of a paragraph."""

    type: TokenType
    text: str
    scene_number: str | None = None
    depth: int | None = None


@dataclass(frozen=True)
class DialogueElement:
    """A character cue and the parenthetical/dialogue lines that follow it."""

    character: str
    dual: bool
    lines: tuple[Element, ...] = ()


@dataclass(frozen=True)
class Classification:
    """Outcome of applying one rule to the head of a paragraph."""

    consumed: int
    element: Element | DialogueElement


Predicate = Callable[[Sequence[str], bool], bool]
Builder = Callable[[Sequence[str]], Classification]


@dataclass(frozen=True)
class Rule:
    """One (predicate, constructor) pair of the rule table."""

    name: str
    predicate: Predicate
    build: Builder


def _head(lines: Sequence[str]) -> str:
    return lines[0].strip()


def split_scene_number(heading: str) -> tuple[str, str | None]:
    """Split a trailing ``#n#`` scene number off a scene heading.

    Returns:
        The heading without the suffix and the number, or ``None``.
    """
    match = SCENE_NUMBER_PATTERN.search(heading)
    if not match:
        return heading.strip(), None
    return heading[: match.start()].strip(), match.group(1)


def parse_cue(line: str) -> tuple[str, bool] | None:
    """Recognise an auto-detected character cue.

    A cue is an uppercase name, optionally followed by parenthesised
    extensions such as ``(V.O.)`` or ``(cont'd)`` and a trailing ``^``.

    Returns:
        ``(cue_text, dual)`` or ``None`` when the line is not a cue.
    """
    text = line.strip()
    dual = text.endswith("^")
    if dual:
        text = text[:-1].rstrip()
    if not text or text[-1] in CUE_TRAILING_PUNCTUATION:
        return None

    name, paren, extension = text.partition("(")
    name = name.rstrip()
    if not name or not any(char.isalpha() for char in name):
        return None
    if name != name.upper():
        return None
    if paren and not CUE_EXTENSION_PATTERN.match(paren + extension):
        return None
    return text, dual


def _forced_cue(line: str) -> tuple[str, bool]:
    text = line.strip()[1:].strip()
    dual = text.endswith("^")
    if dual:
        text = text[:-1].rstrip()
    return text, dual


# Predicates


def _is_forced_action(lines: Sequence[str], after_blank: bool) -> bool:
    return _head(lines).startswith("!")


def _is_forced_character(lines: Sequence[str], after_blank: bool) -> bool:
    return _head(lines).startswith("@") and bool(_forced_cue(lines[0])[0])


def _is_forced_scene_heading(lines: Sequence[str], after_blank: bool) -> bool:
    head = _head(lines)
    return len(head) > 1 and head[0] == "." and head[1] != "."


def _is_forced_transition(lines: Sequence[str], after_blank: bool) -> bool:
    head = _head(lines)
    return head.startswith(">") and not head.endswith("<") and len(head) > 1


def _is_lyric(lines: Sequence[str], after_blank: bool) -> bool:
    return _head(lines).startswith("~")


def _is_page_break(lines: Sequence[str], after_blank: bool) -> bool:
    return bool(PAGE_BREAK_PATTERN.match(_head(lines)))


def _is_section(lines: Sequence[str], after_blank: bool) -> bool:
    return _head(lines).startswith("#")


def _is_synopsis(lines: Sequence[str], after_blank: bool) -> bool:
    return bool(SYNOPSIS_PATTERN.match(_head(lines)))


def _is_scene_heading(lines: Sequence[str], after_blank: bool) -> bool:
    return after_blank and bool(SCENE_HEADING_PATTERN.match(_head(lines)))


def _is_character(lines: Sequence[str], after_blank: bool) -> bool:
    return after_blank and len(lines) > 1 and parse_cue(lines[0]) is not None


def _is_transition(lines: Sequence[str], after_blank: bool) -> bool:
    head = _head(lines)
    if not after_blank:
        return False
    return head in TRANSITION_PHRASES or bool(TRANSITION_PATTERN.match(head))


def _is_centered_line(line: str) -> bool:
    text = line.strip()
    return len(text) > 1 and text.startswith(">") and text.endswith("<")


def _is_centered(lines: Sequence[str], after_blank: bool) -> bool:
    return _is_centered_line(lines[0])


def _is_action(lines: Sequence[str], after_blank: bool) -> bool:
    return True


# Constructors


def _single(token_type: TokenType, text: str, **fields: object) -> Classification:
    return Classification(consumed=1, element=Element(token_type, text, **fields))


def _build_forced_action(lines: Sequence[str]) -> Classification:
    first = lines[0].lstrip()[1:]
    body = [first, *lines[1:]]
    return Classification(
        consumed=len(lines),
        element=Element(TokenType.ACTION, "\n".join(line.rstrip() for line in body)),
    )


def _build_action(lines: Sequence[str]) -> Classification:
    return Classification(
        consumed=len(lines),
        element=Element(
            TokenType.ACTION, "\n".join(line.rstrip() for line in lines)
        ),
    )


def _build_scene_heading_text(text: str) -> Classification:
    heading, number = split_scene_number(text)
    return _single(TokenType.SCENE_HEADING, heading, scene_number=number)


def _build_forced_scene_heading(lines: Sequence[str]) -> Classification:
    return _build_scene_heading_text(_head(lines)[1:])


def _build_scene_heading(lines: Sequence[str]) -> Classification:
    return _build_scene_heading_text(_head(lines))


def _build_forced_transition(lines: Sequence[str]) -> Classification:
    return _single(TokenType.TRANSITION, _head(lines)[1:].strip())


def _build_transition(lines: Sequence[str]) -> Classification:
    return _single(TokenType.TRANSITION, _head(lines))


def _build_lyrics(lines: Sequence[str]) -> Classification:
    taken = 0
    for line in lines:
        if not line.strip().startswith("~"):
            break
        taken += 1
    text = "\n".join(line.strip()[1:].strip() for line in lines[:taken])
    return Classification(consumed=taken, element=Element(TokenType.LYRICS, text))


def _build_centered(lines: Sequence[str]) -> Classification:
    taken = 0
    for line in lines:
        if not _is_centered_line(line):
            break
        taken += 1
    text = "\n".join(line.strip()[1:-1].strip() for line in lines[:taken])
    return Classification(consumed=taken, element=Element(TokenType.CENTERED, text))


def _build_page_break(lines: Sequence[str]) -> Classification:
    return _single(TokenType.PAGE_BREAK, "")


def _build_section(lines: Sequence[str]) -> Classification:
    match = SECTION_PATTERN.match(_head(lines))
    assert match is not None
    return _single(TokenType.SECTION, match.group(2), depth=len(match.group(1)))


def _build_synopsis(lines: Sequence[str]) -> Classification:
    match = SYNOPSIS_PATTERN.match(_head(lines))
    assert match is not None
    return _single(TokenType.SYNOPSIS, match.group(1))


def _build_parenthetical(lines: Sequence[str]) -> Classification:
    return _single(TokenType.PARENTHETICAL, _head(lines))


def _build_dialogue_line(lines: Sequence[str]) -> Classification:
    return _single(TokenType.DIALOGUE, _head(lines))


def _build_dialogue_block(cue: str, dual: bool, lines: Sequence[str]) -> Classification:
    body: list[Element] = []
    consumed = 1
    for line in lines[1:]:
        rule = _first_match(DIALOGUE_RULES, [line], False)
        if rule is None:
            break
        element = rule.build([line]).element
        assert isinstance(element, Element)
        previous = body[-1] if body else None
        if (
            element.type is TokenType.DIALOGUE
            and previous is not None
            and previous.type is TokenType.DIALOGUE
        ):
            # Consecutive dialogue lines form one speech with soft breaks
            body[-1] = Element(TokenType.DIALOGUE, f"{previous.text}\n{element.text}")
        else:
            body.append(element)
        consumed += 1

    return Classification(
        consumed=consumed,
        element=DialogueElement(character=cue, dual=dual, lines=tuple(body)),
    )


def _build_forced_character(lines: Sequence[str]) -> Classification:
    cue, dual = _forced_cue(lines[0])
    return _build_dialogue_block(cue, dual, lines)


def _build_character(lines: Sequence[str]) -> Classification:
    parsed = parse_cue(lines[0])
    assert parsed is not None
    cue, dual = parsed
    return _build_dialogue_block(cue, dual, lines)


# Rule tables


def _ends_dialogue(lines: Sequence[str], after_blank: bool) -> bool:
    head = _head(lines)
    return (
        head.startswith("@")
        or _is_forced_scene_heading(lines, after_blank)
        or bool(DIALOGUE_BREAK_PATTERN.match(head))
    )


def _is_parenthetical(lines: Sequence[str], after_blank: bool) -> bool:
    return bool(PARENTHETICAL_PATTERN.match(_head(lines)))


def _not_ending_dialogue(lines: Sequence[str], after_blank: bool) -> bool:
    return not _ends_dialogue(lines, after_blank)


BLOCK_RULES: tuple[Rule, ...] = (
    Rule("forced_action", _is_forced_action, _build_forced_action),
    Rule("forced_character", _is_forced_character, _build_forced_character),
    Rule("forced_scene_heading", _is_forced_scene_heading, _build_forced_scene_heading),
    Rule("forced_transition", _is_forced_transition, _build_forced_transition),
    Rule("lyrics", _is_lyric, _build_lyrics),
    Rule("page_break", _is_page_break, _build_page_break),
    Rule("section", _is_section, _build_section),
    Rule("synopsis", _is_synopsis, _build_synopsis),
    Rule("scene_heading", _is_scene_heading, _build_scene_heading),
    Rule("character", _is_character, _build_character),
    Rule("transition", _is_transition, _build_transition),
    Rule("centered", _is_centered, _build_centered),
    Rule("action", _is_action, _build_action),
)

# Order matters: a line that opens a new block ends the current one.
DIALOGUE_RULES: tuple[Rule, ...] = (
    Rule("parenthetical", _is_parenthetical, _build_parenthetical),
    Rule("dialogue", _not_ending_dialogue, _build_dialogue_line),
)


def _first_match(
    rules: Sequence[Rule], lines: Sequence[str], after_blank: bool
) -> Rule | None:
    for rule in rules:
        if rule.predicate(lines, after_blank):
            return rule
    return None


def classify(lines: Sequence[str], after_blank: bool) -> Classification:
    """Classify the head of a paragraph.

    Args:
        lines: Remaining lines of the paragraph; must not be empty.
        after_blank: Whether the first line follows a blank line. Scene
            headings, cues and transitions are only auto-detected there.

    Returns:
        The element built by the first matching rule and the number of
        lines it consumed (always at least one).
    """
    rule = _first_match(BLOCK_RULES, lines, after_blank)
    assert rule is not None  # action accepts everything
    return rule.build(lines)
