"""Parser for property-file formatted text (``key=value`` per line).

The grammar follows the classic Java ``.properties`` conventions:
- natural lines end with ``\\n``, ``\\r`` or ``\\r\\n``; leading blanks are skipped
- blank lines and lines starting with ``#`` or ``!`` are ignored
- a line ending in an odd number of backslashes continues on the next line
- the key ends at the first unescaped ``=``, ``:`` or blank
- ``\\t``, ``\\n``, ``\\r``, ``\\f`` and ``\\uXXXX`` escapes are decoded, any
  other escaped character stands for itself
"""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from typing import Iterator

from .types import PropertyMap

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class ParseError(ValueError):
    """Exception raised for malformed property text."""

    def __init__(self, message: str, line: int | None = None):
        self.message = message
        self.line = line
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)


@dataclass
class LogicalLine:
    """A key/value line after continuation lines have been joined."""

    text: str
    line: int


class PropertyParser:
    """Parser turning property text into an ordered mapping."""

    WHITESPACE = " \t\f"
    SEPARATORS = "=:"
    COMMENT_CHARS = "#!"
    ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}

    def __init__(self, text: str):
        self.text = text

    def parse(self) -> PropertyMap:
        """Parse the whole text.

        Nothing is returned unless every line parses; a later duplicate key
        replaces the value but keeps the original position.
        """
        entries: PropertyMap = {}
        for logical in self._logical_lines():
            key, value = self._split_entry(logical)
            entries[key] = value
        return entries

    def _natural_lines(self) -> list[str]:
        lines = _LINE_BREAK.split(self.text)
        # A final line break terminates the last line, it does not open a new one
        if lines and lines[-1] == "":
            lines.pop()
        return lines

    def _logical_lines(self) -> Iterator[LogicalLine]:
        """Yield logical lines, skipping blanks and comments."""
        lines = self._natural_lines()
        index = 0

        while index < len(lines):
            start = index
            line = lines[index].lstrip(self.WHITESPACE)
            index += 1

            if not line or line[0] in self.COMMENT_CHARS:
                continue

            parts = []
            while self._continues(line):
                parts.append(line[:-1])
                if index >= len(lines):
                    raise ParseError("Unterminated line continuation", start + 1)
                line = lines[index].lstrip(self.WHITESPACE)
                index += 1
            parts.append(line)

            yield LogicalLine("".join(parts), start + 1)

    @staticmethod
    def _continues(line: str) -> bool:
        """Return whether the line ends in an unescaped backslash."""
        trailing = len(line) - len(line.rstrip("\\"))
        return trailing % 2 == 1

    def _split_entry(self, logical: LogicalLine) -> tuple[str, str]:
        text = logical.text
        length = len(text)
        position = 0

        while position < length:
            char = text[position]
            if char == "\\":
                position += 2
                continue
            if char in self.SEPARATORS or char in self.WHITESPACE:
                break
            position += 1

        key_end = min(position, length)

        while position < length and text[position] in self.WHITESPACE:
            position += 1
        if position < length and text[position] in self.SEPARATORS:
            position += 1
        while position < length and text[position] in self.WHITESPACE:
            position += 1

        key = self._unescape(text[:key_end], logical.line)
        value = self._unescape(text[position:], logical.line)
        return key, value

    def _unescape(self, raw: str, line: int) -> str:
        """Decode backslash escapes in a key or value."""
        if "\\" not in raw:
            return raw

        chars = []
        position = 0
        has_surrogates = False

        while position < len(raw):
            char = raw[position]
            if char != "\\":
                chars.append(char)
                position += 1
                continue

            position += 1
            if position >= len(raw):
                break
            char = raw[position]

            if char == "u":
                digits = raw[position + 1:position + 5]
                if len(digits) != 4 or any(d not in string.hexdigits for d in digits):
                    raise ParseError("Malformed \\uxxxx encoding", line)
                code_point = int(digits, 16)
                has_surrogates = has_surrogates or 0xD800 <= code_point <= 0xDFFF
                chars.append(chr(code_point))
                position += 5
            else:
                chars.append(self.ESCAPES.get(char, char))
                position += 1

        result = "".join(chars)
        if has_surrogates:
            # Join UTF-16 surrogate pairs written as two \u escapes
            result = result.encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")
        return result


def parse_properties(text: str) -> PropertyMap:
    """Parse property text into an ordered ``key -> value`` mapping."""
    return PropertyParser(text).parse()
