"""Core functionality for argv-builder."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Sequence

import yaml

from .builder import ArgumentBuilder
from .entries import ResolvedEntry, apply_entry
from .macro_engine import MacroEngine
from .models import CommandSpec
from .providers import load_variables
from .types import (
    Argv,
    EnvMap,
    Errors,
    MaskArray,
    RuntimeContext,
    VariableMap,
    Warnings,
    mask_sensitive_value,
)
from .windows import to_windows_command


@dataclass
class BuildResult:
    """Result of building the argument list."""

    builder: ArgumentBuilder
    resolved: Sequence[ResolvedEntry]
    display: str
    windows: bool
    warnings: Warnings
    errors: Errors

    @property
    def argv(self) -> Argv:
        """Return the arguments to hand to the process API."""
        return self.builder.to_array()

    @property
    def mask(self) -> MaskArray:
        """Return the secret flags parallel to ``argv``."""
        return self.builder.mask_array()

    @property
    def masked_argv(self) -> Argv:
        """Return ``argv`` with secret arguments replaced by a placeholder."""
        return [mask_sensitive_value(arg, secret) for arg, secret in zip(self.argv, self.mask)]


@dataclass
class DryRunReport:
    """Dry run report showing what would be executed."""

    variables: VariableMap
    build: BuildResult
    text_summary: str
    json_summary: dict


def load_spec(path: Path) -> CommandSpec:
    """Load YAML specification from file."""
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    return CommandSpec(**(data or {}))


def build_runtime_context(*, env: Optional[EnvMap] = None, working_dir: Optional[str] = None) -> RuntimeContext:
    """Build runtime context for macro expansion."""
    if env is None:
        env = dict(os.environ)

    context = RuntimeContext(
        env=env,
        now=datetime.now(),
        pid=os.getpid(),
        home=str(Path.home()),
    )
    if working_dir:
        context.extra["working_dir"] = working_dir
    return context


def _redact(builder: ArgumentBuilder) -> ArgumentBuilder:
    """Return a builder whose secret arguments are replaced by a placeholder."""
    return ArgumentBuilder(
        *(mask_sensitive_value(argument.value, argument.secret) for argument in builder.arguments)
    )


def _wrap_for_windows(builder: ArgumentBuilder) -> ArgumentBuilder:
    """Wrap for cmd.exe, masking the command string if it embeds any secret."""
    wrapped = to_windows_command(builder)
    if not builder.has_masked():
        return wrapped

    executable, switch, command = wrapped.to_array()
    return ArgumentBuilder(executable, switch).append_masked(command)


def build_arguments(
    spec: CommandSpec,
    context: RuntimeContext,
    *,
    windows: Optional[bool] = None,
    variables: Optional[VariableMap] = None,
) -> BuildResult:
    """Build the final argument list from a specification.

    ``windows`` overrides ``spec.windows`` when given.
    """
    if variables is None:
        variables = load_variables(spec, context)
    if windows is None:
        windows = spec.windows

    engine = MacroEngine(context, variables)
    builder = ArgumentBuilder(*(engine.expand(arg) for arg in spec.command))

    resolved = [apply_entry(builder, entry, engine) for entry in spec.arguments]
    builder.prepend(*(engine.expand(arg) for arg in spec.prepend))

    if windows:
        display = to_windows_command(_redact(builder)).to_display_string()
        builder = _wrap_for_windows(builder)
    else:
        display = builder.to_masked_display_string()

    errors: Errors = []
    for resolved_entry in resolved:
        errors.extend(resolved_entry.errors)

    return BuildResult(
        builder=builder,
        resolved=resolved,
        display=display,
        windows=windows,
        warnings=list(engine.warnings),
        errors=errors,
    )


def dry_run(spec: CommandSpec, context: RuntimeContext, *, windows: Optional[bool] = None) -> DryRunReport:
    """Perform a dry run showing what would be executed."""
    variables = load_variables(spec, context)
    build = build_arguments(spec, context, windows=windows, variables=variables)

    return DryRunReport(
        variables=variables,
        build=build,
        text_summary=_generate_text_summary(spec, variables, build),
        json_summary=_generate_json_summary(spec, variables, build),
    )


def _entry_values(resolved_entry: ResolvedEntry) -> list[str]:
    return [mask_sensitive_value(argument.value, argument.secret) for argument in resolved_entry.arguments]


def _generate_text_summary(spec: CommandSpec, variables: VariableMap, build: BuildResult) -> str:
    """Generate human-readable text summary."""
    lines = []

    lines.append("=== Variables ===")
    lines.append(f"providers: {len([p for p in spec.variable_providers if p.enabled])}")
    lines.append(f"variables: {len(variables)} (inline: {len(spec.variables)})")

    lines.append("\n=== Arguments ===")
    for resolved_entry in build.resolved:
        entry = resolved_entry.entry
        if resolved_entry.errors:
            lines.append(f"{resolved_entry.name} ({entry.kind}) -> ERROR: {resolved_entry.errors}")
        else:
            lines.append(f"{resolved_entry.name} ({entry.kind}) -> {_entry_values(resolved_entry)}")

    lines.append("\n=== Command Line ===")
    if build.windows:
        lines.append("(wrapped for cmd.exe)")
    lines.append(build.display)

    if build.warnings:
        lines.append("\n=== Warnings ===")
        lines.extend(build.warnings)

    return "\n".join(lines)


def _generate_json_summary(spec: CommandSpec, variables: VariableMap, build: BuildResult) -> dict[str, Any]:
    """Generate machine-readable JSON summary."""
    return {
        "spec": {
            "version": spec.version,
            "command": spec.command,
            "windows": build.windows,
        },
        "variables": {
            "count": len(variables),
            "inline": len(spec.variables),
            "providers": [p.id for p in spec.variable_providers if p.enabled],
        },
        "arguments": [
            {
                "name": r.name,
                "kind": r.entry.kind,
                "sensitive": r.is_sensitive,
                "values": _entry_values(r),
                "errors": r.errors,
            }
            for r in build.resolved
        ],
        "build": {
            "argv": build.masked_argv,
            "mask": build.mask,
            "display": build.display,
            "warnings": build.warnings,
            "errors": build.errors,
        },
    }
