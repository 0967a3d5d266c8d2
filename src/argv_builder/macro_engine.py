"""Macro engine for expanding ``$NAME`` and ``${...}`` references in argument values."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .types import RuntimeContext, Warnings

# $$, ${anything-but-brace} or $NAME
MACRO_PATTERN = re.compile(r"\$(\$|\{[^}]+\}|[A-Za-z0-9_]+)")


class MacroEngine:
    """Engine for substituting macros in strings.

    Unresolvable references are left in place so that values meant for a
    shell further down the line keep their ``$VAR`` text.
    """

    def __init__(self, context: RuntimeContext, variables: Mapping[str, str] | None = None):
        self.context = context
        self.variables = dict(variables or {})
        self.warnings: Warnings = []

    def resolve(self, template: str, key: str | None = None) -> str:
        """Resolve macros in a property value (``MacroResolver`` protocol)."""
        return self.expand(template)

    def expand(self, template: str) -> str:
        """Expand all macros in a template string, recording warnings on the engine."""
        value, warnings = self.try_expand(template)
        self.warnings.extend(warnings)
        return value

    def try_expand(self, template: str) -> tuple[str, Warnings]:
        """Expand macros and return value with warnings."""
        warnings: Warnings = []

        def replace(match: re.Match[str]) -> str:
            body = match.group(1)
            if body == "$":
                return "$"

            if body.startswith("{"):
                value, token_warnings = self._expand_token(body[1:-1])
            else:
                value, token_warnings = self._expand_single_token(body)
            warnings.extend(token_warnings)

            return match.group(0) if value is None else value

        # re.sub never rescans substituted text
        return MACRO_PATTERN.sub(replace, template), warnings

    def _expand_token(self, token_content: str) -> tuple[str | None, Warnings]:
        """Expand a braced token, honouring ``${TOKEN|fallback}``."""
        warnings: Warnings = []

        if "|" in token_content:
            token_part, fallback = token_content.split("|", 1)
            value, token_warnings = self._expand_single_token(token_part.strip())
            warnings.extend(token_warnings)

            if value is None or value == "":
                return fallback.strip(), warnings
            return value, warnings

        return self._expand_single_token(token_content.strip())

    def _expand_single_token(self, token: str) -> tuple[str | None, Warnings]:
        """Expand a single token without fallback."""
        warnings: Warnings = []

        # Environment variables: ${ENV:VAR}
        if token.startswith("ENV:"):
            var_name = token[4:]
            value = self.context.env.get(var_name)
            if value is None:
                warnings.append(f"Environment variable '{var_name}' not found")
            return value, warnings

        # Date tokens: ${DATE:format}
        if token.startswith("DATE:"):
            format_str = token[5:]
            try:
                return self.context.now.strftime(format_str), warnings
            except (ValueError, AttributeError) as e:
                warnings.append(f"Invalid date format '{format_str}': {e}")
                return None, warnings

        if token in self.variables:
            return self.variables[token], warnings

        # Special tokens
        if token == "HOME":
            return self.context.home, warnings

        if token == "PID":
            return str(self.context.pid), warnings

        warnings.append(f"Unknown variable: {token}")
        return None, warnings
