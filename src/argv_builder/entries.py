"""Application of command spec entries to an argument builder."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .tokenizer import tokenize

if TYPE_CHECKING:
    from .builder import Argument, ArgumentBuilder
    from .macro_engine import MacroEngine
    from .models import ArgumentEntry
    from .types import Errors

VALUE_KINDS = ("plain", "quoted", "masked")


@dataclass
class ResolvedEntry:
    """Result of applying an argument entry."""

    entry: ArgumentEntry
    arguments: tuple[Argument, ...]
    errors: Errors

    @property
    def is_sensitive(self) -> bool:
        """Return whether the entry produced secret arguments."""
        return self.entry.is_sensitive

    @property
    def name(self) -> str:
        """Return the entry label for convenience."""
        return self.entry.label


def apply_entry(builder: ArgumentBuilder, entry: ArgumentEntry, engine: MacroEngine) -> ResolvedEntry:
    """Append the arguments described by ``entry`` to ``builder``.

    Failures are reported in ``ResolvedEntry.errors``; a failing entry adds
    no arguments.
    """
    start = len(builder)
    errors: Errors = []

    try:
        _apply(builder, entry, engine)
    except ValueError as e:
        errors.append(f"Argument '{entry.label}': {e}")

    return ResolvedEntry(entry=entry, arguments=builder.arguments[start:], errors=errors)


def _apply(builder: ArgumentBuilder, entry: ArgumentEntry, engine: MacroEngine) -> None:
    value = expand_value(entry.value, engine)

    if entry.kind in VALUE_KINDS and value is None:
        raise ValueError(f"a value is required for kind '{entry.kind}'")

    if entry.kind == "plain":
        if entry.sensitive:
            builder.append_masked(value)
        else:
            builder.append(value)

    elif entry.kind == "quoted":
        if entry.sensitive:
            builder.append_masked(f'"{value}"')
        else:
            builder.append_quoted(value)

    elif entry.kind == "masked":
        builder.append_masked(value)

    elif entry.kind == "tokenized":
        if entry.sensitive:
            for token in tokenize(value):
                builder.append_masked(token)
        else:
            builder.append_tokenized(value)

    elif entry.kind == "key_value":
        pairs = {key: expand_value(item, engine) or "" for key, item in entry.pairs.items()}
        builder.append_key_value_pairs(entry.prefix, pairs, masked=entry.sensitive)

    elif entry.kind == "properties":
        builder.append_key_value_pairs_from_property_string(
            entry.prefix, entry.properties, engine, masked=entry.sensitive
        )


def expand_value(value: Any, engine: MacroEngine) -> str | None:
    """Expand macros in string values; other scalars are converted to strings."""
    if value is None:
        return None
    if isinstance(value, str):
        return engine.expand(value)
    return str(value)
