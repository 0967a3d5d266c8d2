"""Tests for the property text parser."""

import pytest

from argv_builder.properties import ParseError, PropertyParser, parse_properties


class TestPropertyParser:
    """Tests for well-formed property text."""

    def test_simple_entries_keep_order(self):
        """Test that entries come back in file order."""
        result = parse_properties("b=2\na=1\nc=3")

        assert list(result.items()) == [("b", "2"), ("a", "1"), ("c", "3")]

    def test_empty_text(self):
        """Test that empty text yields an empty mapping."""
        assert parse_properties("") == {}
        assert parse_properties("\n\n   \n") == {}

    def test_comments_and_blank_lines(self):
        """Test that comments and blank lines are ignored."""
        text = "# comment\n\n! another comment\n  # indented comment\nkey=value\n"

        assert parse_properties(text) == {"key": "value"}

    def test_comment_lines_do_not_continue(self):
        """Test that a backslash at the end of a comment is not a continuation."""
        assert parse_properties("# comment \\\na=1") == {"a": "1"}

    @pytest.mark.parametrize(
        "line",
        ["key=value", "key:value", "key value", "key = value", "key\t:\tvalue", "   key=value"],
    )
    def test_separators(self, line):
        """Test the accepted key/value separators."""
        assert parse_properties(line) == {"key": "value"}

    def test_value_keeps_trailing_whitespace_and_separators(self):
        """Test that only whitespace before the value is stripped."""
        assert parse_properties("a =  b = c  ") == {"a": "b = c  "}

    def test_key_without_value(self):
        """Test that a bare key has an empty value."""
        assert parse_properties("flag\nother=") == {"flag": "", "other": ""}

    def test_escapes(self):
        """Test decoding of standard escapes."""
        result = parse_properties("tab=a\\tb\nnewline=a\\nb\npath=C:\\\\temp\nplain=\\q")

        assert result == {"tab": "a\tb", "newline": "a\nb", "path": "C:\\temp", "plain": "q"}

    def test_unicode_escapes(self):
        """Test \\uXXXX escapes including surrogate pairs."""
        result = parse_properties("greeting=caf\\u00e9\nemoji=\\ud83d\\ude00")

        assert result == {"greeting": "café", "emoji": "\U0001F600"}

    def test_escaped_separator_in_key(self):
        """Test that escaped separators belong to the key."""
        assert parse_properties("a\\=b=c") == {"a=b": "c"}
        assert parse_properties("a\\ b:c") == {"a b": "c"}

    def test_continuation_lines(self):
        """Test joining of continued lines without their leading whitespace."""
        text = "list=a,\\\n    b,\\\n\tc\nnext=1"

        assert parse_properties(text) == {"list": "a,b,c", "next": "1"}

    def test_even_backslashes_do_not_continue(self):
        """Test that an escaped backslash at line end is kept."""
        assert parse_properties("a=x\\\\\nb=y") == {"a": "x\\", "b": "y"}

    def test_line_endings(self):
        """Test CRLF and CR line endings."""
        assert parse_properties("a=1\r\nb=2\rc=3") == {"a": "1", "b": "2", "c": "3"}

    def test_duplicate_key_last_wins(self):
        """Test that a later duplicate replaces the value in place."""
        result = parse_properties("a=1\nb=2\na=3")

        assert list(result.items()) == [("a", "3"), ("b", "2")]

    def test_parser_class(self):
        """Test the class entry point."""
        assert PropertyParser("x=y").parse() == {"x": "y"}


class TestPropertyParserErrors:
    """Tests for malformed property text."""

    @pytest.mark.parametrize("text", ["a=\\u12G4", "a=\\u12", "a\\uZZZZ=b"])
    def test_malformed_unicode_escape(self, text):
        """Test that broken \\u escapes are rejected."""
        with pytest.raises(ParseError) as exc_info:
            parse_properties(text)

        assert "Malformed" in str(exc_info.value)
        assert exc_info.value.line == 1

    def test_unterminated_continuation(self):
        """Test that a continuation on the last line is rejected."""
        with pytest.raises(ParseError) as exc_info:
            parse_properties("a=1\nb=2\\")

        assert exc_info.value.line == 2
        assert "line 2" in str(exc_info.value)

    def test_unterminated_continuation_with_final_newline(self):
        """Test that a final line break does not terminate a continuation."""
        with pytest.raises(ParseError):
            parse_properties("a=1\\\n")

    def test_error_line_number(self):
        """Test that the reported line is where the logical line starts."""
        with pytest.raises(ParseError) as exc_info:
            parse_properties("a=1\n\nb=\\\n  \\u00")

        assert exc_info.value.line == 3

    def test_parse_error_is_value_error(self):
        """Test that ParseError can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_properties("x=\\u")
