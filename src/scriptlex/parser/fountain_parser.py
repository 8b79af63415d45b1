"""Fountain screenplay parser: title page, body tokens and HTML."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any

from scriptlex.config import get_logger
from scriptlex.exceptions import ParseError, ScriptLexFileNotFoundError
from scriptlex.parser.html import render_title_page
from scriptlex.parser.lexer import BlockLexer
from scriptlex.parser.options import ParserOptions
from scriptlex.parser.title_page import TitlePage, parse_title_page
from scriptlex.parser.tokens import ParseResult, RenderedHTML

logger = get_logger(__name__)


def decode_input(source: Any) -> str:
    """Return ``source`` as text or raise :class:`ParseError`.

    Accepts ``str`` and UTF-8 ``bytes``. A leading byte order mark is
    dropped.

    Raises:
        ParseError: If ``source`` is not text or cannot be decoded.
    """
    if isinstance(source, bytes | bytearray):
        try:
            return bytes(source).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            logger.warning("Rejected undecodable input", position=e.start)
            raise ParseError(
                message="Screenplay input is not valid UTF-8",
                hint="Save the file with UTF-8 encoding and try again.",
                details={"position": e.start, "reason": e.reason},
            ) from e

    if not isinstance(source, str):
        logger.warning("Rejected non-text input", input_type=type(source).__name__)
        raise ParseError(
            message=f"Cannot parse input of type {type(source).__name__}",
            hint="Pass the screenplay as str or UTF-8 encoded bytes.",
            details={"input_type": type(source).__name__},
        )

    try:
        source.encode("utf-8")
    except UnicodeEncodeError as e:
        logger.warning("Rejected text with unpaired surrogates", position=e.start)
        raise ParseError(
            message="Screenplay text contains characters that are not valid Unicode",
            hint="Check the source for broken surrogate pairs.",
            details={"position": e.start, "reason": e.reason},
        ) from e

    return source.removeprefix("\ufeff")


def normalize_text(text: str, tab_width: int = 4) -> str:
    """Unify line endings and expand tabs."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return text.expandtabs(tab_width)


class FountainParser:
    """Parse Fountain text into a :class:`ParseResult`.

    The parser keeps no state between calls; every call builds its own
    lexer, so one instance may be shared freely.
    """

    def __init__(self, options: ParserOptions | None = None) -> None:
        """Initialize the fountain parser.

        Args:
            options: Parser options; defaults are used when omitted.
        """
        self.options = options or ParserOptions()

    def parse(
        self, content: str | bytes, extract_title_page: bool | None = None
    ) -> ParseResult:
        """Parse Fountain content into tokens.

        Malformed screenplay text never raises; unrecognised lines become
        action.

        Args:
            content: Raw Fountain text, or UTF-8 bytes.
            extract_title_page: Overrides the configured title page switch.

        Returns:
            The title page entries, body tokens and HTML projections.

        Raises:
            ParseError: If ``content`` is not text or cannot be decoded.
        """
        options = self.options
        if extract_title_page is not None:
            options = replace(options, extract_title_page=extract_title_page)

        text = normalize_text(decode_input(content), options.tab_width)

        title_page = (
            parse_title_page(text) if options.extract_title_page else TitlePage()
        )
        tokens = BlockLexer(options).tokenize(text[title_page.body_offset :])

        html = RenderedHTML()
        if options.render_html:
            html = RenderedHTML(
                title_page=render_title_page(title_page.entries),
                script="".join(token.html or "" for token in tokens),
            )

        logger.debug(
            "Parsed screenplay",
            title_entries=len(title_page.entries),
            tokens=len(tokens),
            body_offset=title_page.body_offset,
        )
        return ParseResult(
            title_page=title_page.entries,
            tokens=tuple(tokens),
            html=html,
        )

    def parse_file(self, file_path: Path) -> ParseResult:
        """Parse a Fountain file.

        Args:
            file_path: Path to the Fountain file

        Returns:
            Parsed result

        Raises:
            ScriptLexFileNotFoundError: If the file does not exist.
            ParseError: If the file is not valid UTF-8.
        """
        if not file_path.is_file():
            raise ScriptLexFileNotFoundError(
                message=f"Fountain file not found: {file_path}",
                hint="Check the path and try again.",
                details={"file": str(file_path)},
            )
        logger.debug("Parsing fountain file", file=str(file_path))
        return self.parse(file_path.read_bytes())


def parse(
    text: str | bytes,
    extract_title_page: bool = True,
    *,
    keep_notes: bool = False,
    render_html: bool = True,
    auto_number_scenes: bool = False,
) -> ParseResult:
    """Parse Fountain text with explicit options.

    Output depends on the arguments only, so results may be memoized.

    Raises:
        ParseError: If ``text`` is not text or cannot be decoded.
    """
    options = ParserOptions(
        extract_title_page=extract_title_page,
        keep_notes=keep_notes,
        render_html=render_html,
        auto_number_scenes=auto_number_scenes,
    )
    return FountainParser(options).parse(text)
