"""Type definitions for argv-builder."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

# Constants
MASKED_VALUE = "<masked>"


# Utility functions
def mask_sensitive_value(value: str | None, is_sensitive: bool) -> str | None:
    """Mask a sensitive value with a placeholder.

    Args:
        value: The value to potentially mask
        is_sensitive: Whether the value should be masked

    Returns:
        The original value if not sensitive, or a masked placeholder if sensitive
    """
    if value is None or not is_sensitive:
        return value
    return MASKED_VALUE


# Type aliases
EnvMap = dict[str, str]
VariableMap = dict[str, str]
PropertyMap = dict[str, str]
Argv = list[str]
MaskArray = list[bool]
Errors = list[str]
Warnings = list[str]


@runtime_checkable
class MacroResolver(Protocol):
    """Substitutes placeholders in a value before it becomes an argument."""

    def resolve(self, template: str, key: str | None = None) -> str:
        """Return ``template`` with its macros substituted.

        ``key`` is the property key the value belongs to, when there is one.
        """
        ...


class IdentityResolver:
    """Resolver that leaves every value untouched."""

    def resolve(self, template: str, key: str | None = None) -> str:
        return template


@dataclass
class RuntimeContext:
    """Runtime context for macro expansion and variable providers."""

    env: EnvMap
    now: datetime
    pid: int
    home: str
    extra: dict[str, Any] = field(default_factory=dict)
