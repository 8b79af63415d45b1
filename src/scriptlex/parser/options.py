"""Options controlling a single parse call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scriptlex.config import ScriptLexSettings


@dataclass(frozen=True)
class ParserOptions:
    """Switches for the title page parser and the block lexer."""

    extract_title_page: bool = True
    keep_notes: bool = False
    render_html: bool = True
    auto_number_scenes: bool = False
    tab_width: int = 4

    @classmethod
    def from_settings(cls, settings: ScriptLexSettings) -> ParserOptions:
        """Build options from application settings."""
        return cls(
            extract_title_page=settings.extract_title_page,
            keep_notes=settings.keep_notes,
            render_html=settings.render_html,
            auto_number_scenes=settings.auto_number_scenes,
            tab_width=settings.tab_width,
        )
