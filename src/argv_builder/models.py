"""Command specification models for argv-builder."""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class FilterRule(BaseModel):
    """Filter rule for provider key filtering."""

    include: str | None = None
    exclude: str | None = None

    @field_validator("include", "exclude")
    @classmethod
    def _compile_regex(cls, v: str | None) -> str | None:
        """Validate regex patterns."""
        if v is None:
            return v
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid regex pattern '{v}': {e}") from e
        return v


class Provider(BaseModel):
    """Source of macro variables."""

    type: Literal["env", "dotenv"]
    id: str
    name: str | None = None
    enabled: bool = True
    hierarchical: bool | None = None
    filename: str | None = None
    path: str | None = None
    precedence: Literal["deep-first", "shallow-first"] | None = None
    filter_chain: list[FilterRule | dict[str, str] | str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _normalize_filter_chain(self) -> Provider:
        """Convert filter_chain items to FilterRule objects."""
        normalized_chain: list[FilterRule] = []
        for item in self.filter_chain:
            if isinstance(item, FilterRule):
                normalized_chain.append(item)
            elif isinstance(item, dict):
                normalized_chain.append(FilterRule(**item))
            elif isinstance(item, str):
                # Treat string as include pattern
                normalized_chain.append(FilterRule(include=item))
            else:
                raise ValueError(f"Invalid filter_chain item: {item}")
        self.filter_chain = normalized_chain  # type: ignore[assignment]
        return self


class ArgumentEntry(BaseModel):
    """One entry of the argument list.

    ``kind`` selects the builder operation:
    - plain: one argument (masked when ``sensitive``)
    - quoted: one argument wrapped in double quotes
    - masked: one secret argument
    - tokenized: ``value`` split on whitespace
    - key_value: ``prefix + key=value`` for every item of ``pairs``
    - properties: like key_value, parsed from property text
    """

    name: str | None = None
    kind: Literal["plain", "quoted", "masked", "tokenized", "key_value", "properties"] = "plain"
    value: Any | None = None
    prefix: str = "-D"
    pairs: dict[str, Any] = Field(default_factory=dict)
    properties: str | None = None
    sensitive: bool = False

    @property
    def label(self) -> str:
        """Return the entry name, or its kind when unnamed."""
        return self.name or self.kind

    @property
    def is_sensitive(self) -> bool:
        """Return whether the produced arguments are secret."""
        return self.sensitive or self.kind == "masked"


class CommandSpec(BaseModel):
    """Main command specification."""

    version: str
    command: list[str]
    prepend: list[str] = Field(default_factory=list)
    windows: bool = False
    variables: dict[str, str] = Field(default_factory=dict)
    variable_providers: list[Provider] = Field(default_factory=list)
    arguments: list[ArgumentEntry] = Field(default_factory=list)
