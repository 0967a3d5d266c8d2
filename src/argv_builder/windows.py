"""Escaping of argument lists into a single ``cmd.exe /C`` command string."""

from __future__ import annotations

import string
from typing import TYPE_CHECKING

from .builder import ArgumentBuilder

if TYPE_CHECKING:
    from collections.abc import Iterable

CMD_EXE = "cmd.exe"

# Double %% so ERRORLEVEL is expanded after the wrapped command ran, not when
# cmd.exe parses the line.
EXIT_WITH_ERRORLEVEL = "&& exit %%ERRORLEVEL%%"

# Characters that only require the argument to be quoted
QUOTE_TRIGGERS = frozenset(" *?;")

# Shell metacharacters that need a caret even inside quotes
CARET_ESCAPED = frozenset("^&<>|")


def _start_quoting(escaped: list[str], arg: str, at_index: int) -> bool:
    escaped.append('"')
    escaped.append(arg[:at_index])
    return True


def escape_windows_argument(arg: str) -> str:
    """Escape a single argument for ``cmd.exe``.

    The argument is wrapped in double quotes if it contains any of
    space ``*?;^&<>|"`` or ``%`` followed by a letter. In addition:
    - ``^&<>|`` are prefixed with ``^``
    - ``"`` is prefixed with another ``"``
    - a letter after ``%`` is wrapped in double quotes so it cannot start a
      variable reference: ``%foo%`` becomes ``"%"f"oo%"``. The closing ``%``
      needs nothing since no letter follows it.
    """
    escaped: list[str] = []
    quoted = percent = False

    for index, char in enumerate(arg):
        if not quoted and char in QUOTE_TRIGGERS:
            quoted = _start_quoting(escaped, arg, index)
        elif char in CARET_ESCAPED:
            if not quoted:
                quoted = _start_quoting(escaped, arg, index)
            escaped.append("^")
        elif char == '"':
            if not quoted:
                quoted = _start_quoting(escaped, arg, index)
            escaped.append('"')
        elif percent and char in string.ascii_letters:
            if not quoted:
                quoted = _start_quoting(escaped, arg, index)
            escaped.append('"' + char)
            char = '"'

        percent = char == "%"
        if quoted:
            escaped.append(char)

    if not quoted:
        return arg

    escaped.append('"')
    return "".join(escaped)


def to_windows_command(args: Iterable[str]) -> ArgumentBuilder:
    """Wrap a command in a ``cmd.exe`` call so its exit code (ERRORLEVEL) is returned.

    Returns a new, unmasked builder ``["cmd.exe", "/C", '"<escaped> && exit %%ERRORLEVEL%%"']``.
    Secret flags of the input are not carried over.
    """
    if isinstance(args, str):
        raise TypeError("to_windows_command expects a sequence of arguments, not a string")
    command = "".join(f"{escape_windows_argument(arg)} " for arg in args)
    command += EXIT_WITH_ERRORLEVEL
    return ArgumentBuilder(CMD_EXE, "/C").append_quoted(command)
