"""Builder for process invocation arguments with secret masking."""

from __future__ import annotations

from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .properties import parse_properties
from .tokenizer import tokenize
from .types import MASKED_VALUE, IdentityResolver

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from .types import Argv, MacroResolver, MaskArray


@dataclass(frozen=True)
class Argument:
    """A single argument and whether it must be hidden when displayed."""

    value: str
    secret: bool = False


def _to_argument_string(value: Any) -> str:
    """Convert a value to its argument form; paths become absolute."""
    if isinstance(value, str):
        return value
    if isinstance(value, PathLike):
        return str(Path(value).absolute())
    return str(value)


def _quote_for_display(value: str) -> str:
    if " " in value or not value:
        return f'"{value}"'
    return value


class ArgumentBuilder:
    """Used to build up arguments for a process invocation.

    Each argument is stored together with its secret flag, so operations that
    move arguments around (``prepend``) keep the flags attached to the right
    values.

    Mutators return the builder so calls can be chained::

        builder = ArgumentBuilder("ant").append("-f").append(path).append_masked(password)
    """

    def __init__(self, *args: Any):
        self._arguments: list[Argument] = []
        self.add(*args)

    @property
    def arguments(self) -> tuple[Argument, ...]:
        """Return the argument records in invocation order."""
        return tuple(self._arguments)

    def append(self, value: Any) -> ArgumentBuilder:
        """Append one argument. ``None`` is ignored."""
        if value is not None:
            self._arguments.append(Argument(_to_argument_string(value)))
        return self

    def add(self, *values: Any) -> ArgumentBuilder:
        """Append several arguments in order."""
        for value in values:
            self.append(value)
        return self

    def append_quoted(self, value: Any) -> ArgumentBuilder:
        """Append an argument wrapped in double quotes.

        Only needed when the whole command line is re-parsed as a single
        string (ssh, rsh, ``cmd.exe /C``). Normal process invocations pass
        each argument separately and must not use this.
        """
        if value is None:
            return self
        return self.append(f'"{_to_argument_string(value)}"')

    def append_masked(self, value: Any) -> ArgumentBuilder:
        """Append an argument that must not be echoed back, such as a password."""
        if value is None:
            raise ValueError("Masked argument must not be None")
        self._arguments.append(Argument(_to_argument_string(value), secret=True))
        return self

    def append_tokenized(self, text: str | None) -> ArgumentBuilder:
        """Decompose ``text`` into multiple arguments by splitting on whitespace."""
        return self.add(*tokenize(text))

    def append_key_value_pairs(
        self, prefix: str, pairs: Mapping[str, Any], *, masked: bool = False
    ) -> ArgumentBuilder:
        """Add key value pairs as ``-Dkey=value -Dkey=value ...``.

        The ``-D`` portion is the ``prefix``. Iteration order of ``pairs`` is kept.
        """
        for key, value in pairs.items():
            self._append_pair(prefix, key, value, masked)
        return self

    def append_key_value_pairs_from_property_string(
        self,
        prefix: str,
        properties: str | None,
        resolver: MacroResolver | None = None,
        *,
        masked: bool = False,
    ) -> ArgumentBuilder:
        """Add key value pairs parsed from property text, e.g. ``"abc=def\\nghi=jkl"``.

        Args:
            prefix: The ``-D`` portion of each argument
            properties: Property text; ``None`` makes this a no-op
            resolver: Resolver applied to every value, identity when omitted
            masked: Whether the resulting arguments are secret

        Raises:
            ParseError: If ``properties`` is malformed. Nothing is appended then.
        """
        if properties is None:
            return self

        resolver = resolver or IdentityResolver()
        entries = parse_properties(properties)
        resolved = [(key, resolver.resolve(value, key)) for key, value in entries.items()]

        for key, value in resolved:
            self._append_pair(prefix, key, value, masked)
        return self

    def _append_pair(self, prefix: str, key: str, value: Any, masked: bool) -> None:
        argument = f"{prefix}{key}={value}"
        if masked:
            self.append_masked(argument)
        else:
            self.append(argument)

    def prepend(self, *values: Any) -> ArgumentBuilder:
        """Insert ``values`` before all existing arguments.

        Prepended values are never secret; existing secret arguments stay
        secret at their shifted positions.
        """
        prefix = [Argument(_to_argument_string(value)) for value in values if value is not None]
        self._arguments[:0] = prefix
        return self

    def clear(self) -> None:
        """Re-initialize the argument list, secret flags included."""
        self._arguments.clear()

    def duplicate(self) -> ArgumentBuilder:
        """Return an independent copy carrying the same secret flags."""
        copy = ArgumentBuilder()
        # Argument records are immutable, so sharing them is safe
        copy._arguments = list(self._arguments)
        return copy

    __copy__ = duplicate

    def to_array(self) -> Argv:
        """Return the arguments as a new list, ready for a process API."""
        return [argument.value for argument in self._arguments]

    def to_list(self) -> Argv:
        """Alias of ``to_array``."""
        return self.to_array()

    def to_display_string(self) -> str:
        """Join the arguments, quoting those that are empty or contain spaces.

        Secret arguments are shown in clear text; use
        ``to_masked_display_string`` for anything that ends up in a log.
        """
        return " ".join(_quote_for_display(argument.value) for argument in self._arguments)

    def to_masked_display_string(self) -> str:
        """Like ``to_display_string`` but with secret arguments replaced by a placeholder."""
        return " ".join(
            MASKED_VALUE if argument.secret else _quote_for_display(argument.value)
            for argument in self._arguments
        )

    def has_masked(self) -> bool:
        """Return True if there are any masked arguments."""
        return any(argument.secret for argument in self._arguments)

    def mask_array(self) -> MaskArray:
        """Return one boolean per argument, True where the argument is masked."""
        return [argument.secret for argument in self._arguments]

    def to_windows_command(self) -> ArgumentBuilder:
        """Wrap the command in a ``cmd.exe /C`` call that returns its exit code."""
        # Import here to avoid circular imports
        from .windows import to_windows_command

        return to_windows_command(self)

    def __len__(self) -> int:
        return len(self._arguments)

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_array())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArgumentBuilder):
            return NotImplemented
        return self._arguments == other._arguments

    def __repr__(self) -> str:
        return f"ArgumentBuilder({self.to_masked_display_string()!r})"
