"""Tests for the exception hierarchy."""

import pytest

from scriptlex.exceptions import (
    ConfigurationError,
    ParseError,
    ScriptLexError,
    ScriptLexFileNotFoundError,
    check_config_keys,
)


class TestScriptLexError:
    """Test error formatting."""

    def test_message_only(self):
        """Test a bare message."""
        error = ScriptLexError("Something broke")
        assert str(error) == "Error: Something broke"
        assert error.hint is None
        assert error.details is None

    def test_full_format(self):
        """Test hint and details are included."""
        error = ScriptLexError(
            message="Bad input",
            hint="Try again",
            details={"position": 3},
        )
        assert str(error) == (
            "Error: Bad input\nHint: Try again\nDetails:\n  position: 3"
        )

    @pytest.mark.parametrize(
        "error_class", [ConfigurationError, ParseError, ScriptLexFileNotFoundError]
    )
    def test_subclasses(self, error_class):
        """Test every error is a ScriptLexError."""
        assert issubclass(error_class, ScriptLexError)


class TestCheckConfigKeys:
    """Test detection of common configuration mistakes."""

    @pytest.mark.parametrize(
        ("wrong", "correct"),
        [
            ("notes", "keep_notes"),
            ("html", "render_html"),
            ("title_page", "extract_title_page"),
            ("number_scenes", "auto_number_scenes"),
        ],
    )
    def test_wrong_keys(self, wrong, correct):
        """Test each wrong key points at the right one."""
        with pytest.raises(ConfigurationError) as exc_info:
            check_config_keys({wrong: True})
        assert exc_info.value.details["correct_key"] == correct
        assert correct in exc_info.value.hint

    def test_valid_keys(self):
        """Test correct keys pass."""
        check_config_keys({"keep_notes": True, "tab_width": 2})
