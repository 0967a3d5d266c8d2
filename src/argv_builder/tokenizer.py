"""Whitespace tokenizer for blobs of command-line flags."""

from __future__ import annotations

import re

# Same delimiter set as a classic string tokenizer: space, tab, newline, CR, form feed.
DELIMITERS = " \t\n\r\f"

_DELIMITER_RUN = re.compile(f"[{re.escape(DELIMITERS)}]+")


def tokenize(text: str | None) -> list[str]:
    """Split ``text`` on runs of whitespace.

    Quotes get no special treatment, so ``'-Dmsg="a b"'`` yields two tokens.
    Returns an empty list for ``None``, empty or all-whitespace input.
    """
    if not text:
        return []
    return [token for token in _DELIMITER_RUN.split(text) if token]
