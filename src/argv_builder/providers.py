"""Variable providers feeding the macro engine."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from dotenv import dotenv_values

if TYPE_CHECKING:
    from .models import CommandSpec, FilterRule, Provider
    from .types import RuntimeContext, VariableMap


class ProviderProtocol(Protocol):
    """Protocol for variable providers."""

    id: str

    def load(self, context: RuntimeContext) -> VariableMap:
        """Load variables."""
        ...


def apply_filters(values: VariableMap, filter_chain: list[FilterRule]) -> VariableMap:
    """Apply a filter chain to a variable map.

    Include rules accumulate keys, exclude rules drop keys included so far.
    An empty chain keeps everything.
    """
    if not filter_chain:
        return dict(values)

    included_keys = set()

    for rule in filter_chain:
        if rule.include:
            pattern = re.compile(rule.include)
            for key in values:
                if pattern.match(key):
                    included_keys.add(key)

        if rule.exclude:
            pattern = re.compile(rule.exclude)
            for key in list(included_keys):
                if pattern.match(key):
                    included_keys.discard(key)

    return {k: v for k, v in values.items() if k in included_keys}


class EnvProvider:
    """Environment variable provider."""

    def __init__(self, provider: Provider):
        self.id = provider.id
        self.provider = provider

    def load(self, context: RuntimeContext) -> VariableMap:
        """Load environment variables."""
        return apply_filters(context.env, self.provider.filter_chain)


class DotenvProvider:
    """Dotenv file provider."""

    def __init__(self, provider: Provider):
        self.id = provider.id
        self.provider = provider

    def load(self, context: RuntimeContext) -> VariableMap:
        """Load dotenv file(s)."""
        if self.provider.hierarchical:
            values = self._load_hierarchical(context)
        else:
            values = self._load_single(context)
        return apply_filters(values, self.provider.filter_chain)

    def _working_dir(self, context: RuntimeContext) -> Path:
        return Path(context.extra.get("working_dir") or os.getcwd())

    def _load_single(self, context: RuntimeContext) -> VariableMap:
        """Load a single dotenv file; a missing file yields no variables."""
        if self.provider.path:
            env_file = Path(self.provider.path).expanduser()
        elif self.provider.filename:
            env_file = self._working_dir(context) / self.provider.filename
        else:
            return {}

        if not env_file.exists():
            return {}

        return _read_dotenv(env_file)

    def _load_hierarchical(self, context: RuntimeContext) -> VariableMap:
        """Load dotenv files found walking up from the working directory to the root."""
        if not self.provider.filename:
            return {}

        env_files = []
        current_dir = self._working_dir(context).resolve()
        root_dir = current_dir.anchor
        while True:
            env_file = current_dir / self.provider.filename
            if env_file.exists():
                env_files.append(env_file)
            if str(current_dir) == root_dir:
                break
            current_dir = current_dir.parent

        return self._merge_hierarchical(env_files, self.provider.precedence or "deep-first")

    def _merge_hierarchical(self, files: list[Path], precedence: str) -> VariableMap:
        """Merge dotenv files.

        For deep-first the file closest to the working directory wins, so files
        are merged from root to leaf. Shallow-first merges leaf to root.
        """
        merged: VariableMap = {}
        file_order = list(reversed(files)) if precedence == "deep-first" else files

        for env_file in file_order:
            merged.update(_read_dotenv(env_file))

        return merged


def _read_dotenv(env_file: Path) -> VariableMap:
    return {k: str(v) for k, v in dotenv_values(env_file).items() if v is not None}


def create_provider(provider: Provider) -> ProviderProtocol:
    """Create a provider instance based on type."""
    if provider.type == "env":
        return EnvProvider(provider)
    elif provider.type == "dotenv":
        return DotenvProvider(provider)
    else:
        raise ValueError(f"Unknown provider type: {provider.type}")


def load_variables(spec: CommandSpec, context: RuntimeContext) -> VariableMap:
    """Merge variables of all enabled providers, then the inline variables.

    Later providers override earlier ones; inline variables override all.
    """
    variables: VariableMap = {}

    for provider_config in spec.variable_providers:
        if not provider_config.enabled:
            continue
        provider = create_provider(provider_config)
        variables.update(provider.load(context))

    variables.update(spec.variables)
    return variables
