"""Tests for the semantic validation module."""

from argv_builder.models import ArgumentEntry, CommandSpec, Provider
from argv_builder.validation import (
    semantic_validate,
    validate_command,
    validate_properties_syntax,
    validate_required_fields,
    validate_strict_rules,
    validate_unique_argument_names,
    validate_unique_provider_ids,
)


def make_spec(**kwargs) -> CommandSpec:
    kwargs.setdefault("command", ["echo"])
    return CommandSpec(version="0.1", **kwargs)


def test_validate_command():
    """Test that an empty command is rejected."""
    assert validate_command(make_spec(command=[])) == ["Command must not be empty"]
    assert validate_command(make_spec(command=[], prepend=["nice"])) == []
    assert validate_command(make_spec()) == []


def test_validate_unique_provider_ids():
    """Test validation of unique provider IDs."""
    spec = make_spec(
        variable_providers=[
            Provider(type="env", id="env"),
            Provider(type="dotenv", id="env", path=".env"),
        ]
    )

    errors = validate_unique_provider_ids(spec)
    assert len(errors) == 1
    assert "Duplicate provider ID: 'env'" in errors[0]

    spec = make_spec(
        variable_providers=[
            Provider(type="env", id="env"),
            Provider(type="dotenv", id="dotenv", path=".env"),
        ]
    )
    assert validate_unique_provider_ids(spec) == []


def test_validate_unique_argument_names():
    """Test validation of unique argument names; unnamed entries are ignored."""
    spec = make_spec(
        arguments=[
            ArgumentEntry(name="a", value="1"),
            ArgumentEntry(name="a", value="2"),
            ArgumentEntry(value="3"),
            ArgumentEntry(value="4"),
        ]
    )

    assert validate_unique_argument_names(spec) == ["Duplicate argument name: 'a'"]


def test_validate_required_fields():
    """Test the fields each kind requires."""
    spec = make_spec(
        arguments=[
            ArgumentEntry(name="plain"),
            ArgumentEntry(name="flags", kind="tokenized"),
            ArgumentEntry(name="pairs", kind="key_value"),
            ArgumentEntry(name="props", kind="properties"),
            ArgumentEntry(name="ok", kind="masked", value="pw"),
        ]
    )

    errors = validate_required_fields(spec)

    assert len(errors) == 3
    assert "Argument 'plain' of kind 'plain' requires a value" in errors
    assert "Argument 'flags' of kind 'tokenized' requires a value" in errors
    assert "Argument 'pairs' of kind 'key_value' requires pairs" in errors


def test_validate_properties_syntax():
    """Test that unparseable property text is reported."""
    spec = make_spec(
        arguments=[
            ArgumentEntry(name="good", kind="properties", properties="a=1"),
            ArgumentEntry(name="bad", kind="properties", properties="a=\\uXYZW"),
        ]
    )

    errors = validate_properties_syntax(spec)

    assert len(errors) == 1
    assert errors[0].startswith("Argument 'bad' has invalid properties")


def test_validate_strict_rules():
    """Test strict validation rules."""
    spec = make_spec(
        arguments=[
            ArgumentEntry(value="unnamed"),
            ArgumentEntry(name="pairs", kind="key_value", pairs={"a": "1"}, prefix=""),
            ArgumentEntry(name="pw", kind="masked", value=""),
        ]
    )

    errors = validate_strict_rules(spec)

    assert "Argument #1 (plain) should have a name" in errors
    assert "Argument 'pairs' should have a prefix" in errors
    assert "Sensitive argument 'pw' should not be empty" in errors


def test_semantic_validate():
    """Test the combined validation, with and without strict mode."""
    spec = make_spec(arguments=[ArgumentEntry(value="unnamed")])

    assert semantic_validate(spec) == []
    assert semantic_validate(spec, strict=True) == ["Argument #1 (plain) should have a name"]

    bad = make_spec(command=[], arguments=[ArgumentEntry(name="x", kind="masked")])
    assert len(semantic_validate(bad)) == 2
