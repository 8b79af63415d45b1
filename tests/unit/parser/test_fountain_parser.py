"""Tests for the fountain parser entry points."""

from pathlib import Path

import pytest

from scriptlex.exceptions import ParseError, ScriptLexFileNotFoundError
from scriptlex.parser import FountainParser, ParserOptions, TitleEntry, TokenType, parse
from scriptlex.parser.fountain_parser import decode_input, normalize_text
from tests.utils import assert_well_bracketed, token_types


class TestDecodeInput:
    """Test the input boundary."""

    def test_str_passes_through(self):
        """Test text input is returned unchanged."""
        assert decode_input("INT. HOUSE") == "INT. HOUSE"

    def test_utf8_bytes(self):
        """Test bytes are decoded as UTF-8."""
        assert decode_input("CAFÉ".encode()) == "CAFÉ"

    def test_byte_order_mark_dropped(self):
        """Test a BOM is removed from both bytes and text."""
        assert decode_input(b"\xef\xbb\xbfTitle: X") == "Title: X"
        assert decode_input("\ufeffTitle: X") == "Title: X"

    def test_invalid_utf8_raises(self):
        """Test undecodable bytes raise a parse error."""
        with pytest.raises(ParseError) as exc_info:
            decode_input(b"Action \xff\xfe here")
        assert exc_info.value.details["position"] == 7
        assert exc_info.value.hint

    @pytest.mark.parametrize("source", [None, 42, ["INT. HOUSE"], object()])
    def test_non_text_raises(self, source):
        """Test non-text input raises a parse error."""
        with pytest.raises(ParseError, match="Cannot parse input of type"):
            decode_input(source)

    def test_lone_surrogate_raises(self):
        """Test text that cannot be encoded is rejected."""
        with pytest.raises(ParseError):
            decode_input("broken \ud800 text")


class TestNormalizeText:
    """Test text normalisation."""

    def test_line_endings(self):
        """Test CRLF and CR become LF."""
        assert normalize_text("a\r\nb\rc") == "a\nb\nc"

    def test_tabs_expanded(self):
        """Test tab expansion honours the width."""
        assert normalize_text("\tx", tab_width=2) == "  x"


class TestParse:
    """Test the module level parse function."""

    def test_scene_number(self):
        """Test the scene number is split off the heading."""
        result = parse("INT. HOUSE - DAY #3#")
        (token,) = result.tokens
        assert token.type is TokenType.SCENE_HEADING
        assert token.text == "INT. HOUSE - DAY"
        assert token.scene_number == "3"

    def test_title_page(self):
        """Test entries and the first body token."""
        result = parse("Title: Big Fish\nAuthor: John August\n\nFADE IN:")
        assert result.title_page == (
            TitleEntry("Title", "Big Fish"),
            TitleEntry("Author", "John August"),
        )
        assert result.tokens[0].type is TokenType.TRANSITION
        assert result.tokens[0].text == "FADE IN:"
        assert result.html.title_page == (
            '<h1>Big Fish</h1><p class="authors">John August</p>'
        )

    def test_title_page_disabled(self):
        """Test that key lines become body text when extraction is off."""
        result = parse("Title: Big Fish\n\nFADE IN:", extract_title_page=False)
        assert result.title_page == ()
        assert token_types(result.tokens) == ["action", "transition"]
        assert result.tokens[0].text == "Title: Big Fish"

    def test_dual_dialogue(self):
        """Test a dual pair in order."""
        result = parse("JANE\nHello.\n\nJANE^\nHi.")
        assert token_types(result.tokens) == [
            "dual_dialogue_begin",
            "dialogue_begin",
            "character",
            "dialogue",
            "dialogue_end",
            "dialogue_begin",
            "character",
            "dialogue",
            "dialogue_end",
            "dual_dialogue_end",
        ]

    def test_emphasis(self):
        """Test plain and HTML projections of emphasis."""
        (token,) = parse("This is ***very*** important").tokens
        assert token.text == "This is very important"
        assert '<span class="bold italic">very</span>' in token.html

    def test_boneyard(self):
        """Test boneyard markers never reach a token."""
        tokens = parse("Action line /* cut this */ continues").tokens
        assert token_types(tokens) == ["action"]
        assert "/*" not in tokens[0].text
        assert "*/" not in tokens[0].text

    def test_escaped_note_brackets(self):
        """Test escaped note brackets survive as literal text."""
        result = parse(r"He said \[[not a note]] ok", extract_title_page=False)
        assert [(token.type.value, token.text) for token in result.tokens] == [
            ("action", "He said [[not a note]] ok")
        ]

    def test_heading_after_speech(self):
        """Test a heading that closes a speech keeps its role."""
        result = parse("BOB\nHi.\nINT. HOUSE - DAY")
        assert result.tokens[-1].type is TokenType.SCENE_HEADING
        assert result.tokens[-1].text == "INT. HOUSE - DAY"

    def test_idempotent(self, coffee_shop_text):
        """Test two parses of the same input are identical."""
        first = parse(coffee_shop_text)
        second = parse(coffee_shop_text)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_crlf_input_matches_lf(self, coffee_shop_text):
        """Test line endings do not change the result."""
        assert parse(coffee_shop_text.replace("\n", "\r\n")) == parse(
            coffee_shop_text
        )

    def test_bytes_input_matches_str(self, coffee_shop_text):
        """Test UTF-8 bytes parse like text."""
        assert parse(coffee_shop_text.encode()) == parse(coffee_shop_text)

    def test_empty_input(self):
        """Test empty input parses to an empty result."""
        result = parse("")
        assert result.title_page == ()
        assert result.tokens == ()
        assert result.html.script == ""

    def test_html_disabled(self):
        """Test HTML projections stay empty when rendering is off."""
        result = parse("Title: X\n\nINT. HOUSE - DAY", render_html=False)
        assert result.html.title_page == ""
        assert result.html.script == ""
        assert result.tokens[0].html is None

    def test_script_html_concatenates_tokens(self):
        """Test the script projection is the token markup in order."""
        result = parse("INT. HOUSE - DAY\n\nBOB\nHi.")
        assert result.html.script == (
            "<h3>INT. HOUSE - DAY</h3>"
            '<div class="dialogue"><h4>BOB</h4><p>Hi.</p></div>'
        )

    def test_malformed_input_never_raises(self):
        """Test odd markup falls back to action text."""
        text = "**unclosed\n\n/* open boneyard\n\n[[open note\n\n((\n\n^\n\n@"
        result = parse(text)
        assert result.tokens
        assert_well_bracketed(result.tokens)

    def test_non_text_raises(self):
        """Test the boundary error."""
        with pytest.raises(ParseError):
            parse(12345)


class TestFountainParser:
    """Test the parser class against the sample screenplay."""

    def test_title_page(self, coffee_shop_path):
        """Test the sample title page."""
        result = FountainParser().parse_file(coffee_shop_path)
        assert result.title == "The Coffee Shop"
        assert result.authors == "Test Author"
        assert [entry.key for entry in result.title_page] == [
            "Title",
            "Credit",
            "Author",
            "Draft date",
            "Contact",
        ]
        assert result.get_title_value("contact") == "Test Author\ntest@example.com"

    def test_token_stream(self, coffee_shop_path):
        """Test the full token sequence of the sample screenplay."""
        result = FountainParser().parse_file(coffee_shop_path)
        assert token_types(result.tokens) == [
            "transition",
            "section",
            "synopsis",
            "scene_heading",
            "action",
            "dialogue_begin",
            "character",
            "parenthetical",
            "dialogue",
            "dialogue_end",
            "action",
            "dual_dialogue_begin",
            "dialogue_begin",
            "character",
            "dialogue",
            "dialogue_end",
            "dialogue_begin",
            "character",
            "dialogue",
            "dialogue_end",
            "dual_dialogue_end",
            "transition",
            "scene_heading",
            "action",
            "dialogue_begin",
            "character",
            "dialogue",
            "dialogue_end",
            "centered",
        ]
        assert_well_bracketed(result.tokens)

    def test_token_details(self, coffee_shop_path):
        """Test text and markup of selected tokens."""
        tokens = FountainParser().parse_file(coffee_shop_path).tokens

        assert tokens[1].depth == 1
        assert tokens[1].text == "Act One"
        assert tokens[3].text == "EXT. COFFEE SHOP - DAY"
        assert tokens[3].scene_number == "1"
        assert tokens[8].text == "This code has to work."
        assert tokens[8].html == '<p>This code has to <span class="bold">work</span>.</p>'
        assert tokens[17].text == "ALICE"
        assert tokens[17].dual == "right"
        assert tokens[22].scene_number == "2"
        assert tokens[25].text == "ALICE (V.O.)"
        assert tokens[26].text == "Finally! It's working!"
        assert tokens[28].text == "THE END"

    def test_boneyard_and_notes_removed(self, coffee_shop_path):
        """Test cut material never reaches the output."""
        result = FountainParser().parse_file(coffee_shop_path)
        texts = " ".join(token.text for token in result.tokens)
        assert "aspiring screenwriter" not in texts
        assert "montage" not in texts
        assert "montage" not in result.html.script

    def test_notes_kept(self, coffee_shop_text):
        """Test the sample note becomes a token when notes are kept."""
        parser = FountainParser(ParserOptions(keep_notes=True))
        notes = parser.parse(coffee_shop_text).tokens_of(TokenType.NOTE)
        assert [note.text for note in notes] == ["Consider a montage here."]

    def test_extract_title_page_override(self, coffee_shop_text):
        """Test the per-call switch overrides the options."""
        result = FountainParser().parse(coffee_shop_text, extract_title_page=False)
        assert result.title_page == ()
        assert result.tokens[0].type is TokenType.ACTION

    def test_parser_is_reusable(self, coffee_shop_text):
        """Test one instance can parse repeatedly without leaking state."""
        parser = FountainParser(ParserOptions(auto_number_scenes=True))
        first = parser.parse("INT. A - DAY\n\nBOB\nHi.")
        parser.parse(coffee_shop_text)
        again = parser.parse("INT. A - DAY\n\nBOB\nHi.")
        assert first == again
        assert first.tokens[0].scene_number == "1"

    def test_missing_file(self, tmp_path):
        """Test a missing file raises a descriptive error."""
        with pytest.raises(ScriptLexFileNotFoundError) as exc_info:
            FountainParser().parse_file(tmp_path / "missing.fountain")
        assert "missing.fountain" in str(exc_info.value)

    def test_undecodable_file(self, tmp_path):
        """Test a file with invalid bytes raises a parse error."""
        path = tmp_path / "bad.fountain"
        path.write_bytes(b"INT. HOUSE\n\n\xff")
        with pytest.raises(ParseError):
            FountainParser().parse_file(path)

    def test_parse_file_accepts_path(self, fixtures_dir):
        """Test parsing a path built from the fixtures directory."""
        result = FountainParser().parse_file(Path(fixtures_dir) / "coffee_shop.fountain")
        assert result.tokens
