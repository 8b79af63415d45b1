"""Scene board: one card per scene heading, derived from the token stream."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from scriptlex.parser.tokens import ParseResult, Token, TokenType
from scriptlex.utils import ScreenplayUtils

DEFAULT_DESCRIPTION_LIMIT = 100


@dataclass
class SceneCard:
    """Summary of one scene for a board or outline view."""

    index: int
    heading: str
    scene_number: str | None = None
    scene_type: str = ""
    location: str | None = None
    time_of_day: str | None = None
    description: str = ""
    characters: list[str] = field(default_factory=list)

    @property
    def label(self) -> str:
        """Scene number when written in the script, else the running index."""
        return self.scene_number or str(self.index)


def build_scene_board(
    source: ParseResult | Iterable[Token],
    description_limit: int | None = DEFAULT_DESCRIPTION_LIMIT,
) -> list[SceneCard]:
    """Group action and cues under the scene heading they follow.

    Only ``scene_heading``, ``action`` and ``character`` tokens are read;
    everything else is ignored. Content before the first heading is not
    part of any scene.

    Args:
        source: A parse result or its tokens.
        description_limit: Stop appending action text once the description
            reaches this many characters. ``None`` keeps all action text.

    Returns:
        Cards in script order.
    """
    tokens = source.tokens if isinstance(source, ParseResult) else source
    cards: list[SceneCard] = []
    current: SceneCard | None = None

    for token in tokens:
        if token.type is TokenType.SCENE_HEADING:
            heading = token.text.strip()
            scene_type, location, time_of_day = ScreenplayUtils.parse_scene_heading(
                heading
            )
            current = SceneCard(
                index=len(cards) + 1,
                heading=heading,
                scene_number=token.scene_number,
                scene_type=scene_type,
                location=location,
                time_of_day=time_of_day,
            )
            cards.append(current)
        elif current is None:
            continue
        elif token.type is TokenType.ACTION and token.text.strip():
            if description_limit is None or len(current.description) < description_limit:
                text = " ".join(token.text.split())
                current.description = f"{current.description} {text}".strip()
        elif token.type is TokenType.CHARACTER and token.text.strip():
            name = ScreenplayUtils.character_name(token.text)
            if name and name not in current.characters:
                current.characters.append(name)

    return cards
