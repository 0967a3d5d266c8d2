"""Semantic validation for argv-builder command specifications."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .entries import VALUE_KINDS
from .properties import ParseError, parse_properties

if TYPE_CHECKING:
    from .models import CommandSpec
    from .types import Errors


def semantic_validate(spec: CommandSpec, strict: bool = False) -> Errors:
    """
    Perform semantic validation on a specification.

    Args:
        spec: The specification to validate
        strict: Whether to perform strict validation

    Returns:
        A list of validation errors, empty if valid
    """
    errors = []

    errors.extend(validate_command(spec))
    errors.extend(validate_unique_provider_ids(spec))
    errors.extend(validate_unique_argument_names(spec))
    errors.extend(validate_required_fields(spec))
    errors.extend(validate_properties_syntax(spec))

    # Additional strict validations
    if strict:
        errors.extend(validate_strict_rules(spec))

    return errors


def validate_command(spec: CommandSpec) -> Errors:
    """Validate that there is something to invoke."""
    if not spec.command and not spec.prepend:
        return ["Command must not be empty"]
    return []


def validate_unique_provider_ids(spec: CommandSpec) -> Errors:
    """Validate that provider IDs are unique."""
    errors = []
    seen_ids = set()

    for provider in spec.variable_providers:
        if provider.id in seen_ids:
            errors.append(f"Duplicate provider ID: '{provider.id}'")
        else:
            seen_ids.add(provider.id)

    return errors


def validate_unique_argument_names(spec: CommandSpec) -> Errors:
    """Validate that named arguments are unique. Unnamed entries are ignored."""
    errors = []
    seen_names = set()

    for entry in spec.arguments:
        if entry.name is None:
            continue
        if entry.name in seen_names:
            errors.append(f"Duplicate argument name: '{entry.name}'")
        else:
            seen_names.add(entry.name)

    return errors


def validate_required_fields(spec: CommandSpec) -> Errors:
    """
    Validate the fields each kind of entry relies on.

    Rules:
    - plain, quoted, masked and tokenized entries need a value
    - key_value entries need at least one pair
    """
    errors = []

    for entry in spec.arguments:
        if (entry.kind in VALUE_KINDS or entry.kind == "tokenized") and entry.value is None:
            errors.append(f"Argument '{entry.label}' of kind '{entry.kind}' requires a value")
        elif entry.kind == "key_value" and not entry.pairs:
            errors.append(f"Argument '{entry.label}' of kind 'key_value' requires pairs")

    return errors


def validate_properties_syntax(spec: CommandSpec) -> Errors:
    """Validate that property text of properties entries parses."""
    errors = []

    for entry in spec.arguments:
        if entry.kind != "properties" or entry.properties is None:
            continue
        try:
            parse_properties(entry.properties)
        except ParseError as e:
            errors.append(f"Argument '{entry.label}' has invalid properties: {e}")

    return errors


def validate_strict_rules(spec: CommandSpec) -> Errors:
    """
    Perform additional strict validations.

    Rules:
    - All entries should have a name
    - key_value and properties entries should have a prefix
    - Sensitive entries should not be empty
    """
    errors = []

    for index, entry in enumerate(spec.arguments):
        if not entry.name:
            errors.append(f"Argument #{index + 1} ({entry.kind}) should have a name")

        if entry.kind in ("key_value", "properties") and not entry.prefix:
            errors.append(f"Argument '{entry.label}' should have a prefix")

        if entry.is_sensitive and entry.kind in VALUE_KINDS and entry.value == "":
            errors.append(f"Sensitive argument '{entry.label}' should not be empty")

    return errors
