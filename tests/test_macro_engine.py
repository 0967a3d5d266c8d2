"""Tests for macro expansion."""

from datetime import datetime

import pytest

from argv_builder.macro_engine import MacroEngine
from argv_builder.types import IdentityResolver, MacroResolver, RuntimeContext


@pytest.fixture
def context():
    """Create a fixed runtime context."""
    return RuntimeContext(
        env={"USER_NAME": "alice", "EMPTY": ""},
        now=datetime(2024, 1, 2, 3, 4, 5),
        pid=4242,
        home="/home/test",
    )


def test_variables(context):
    """Test $NAME and ${NAME} lookups."""
    engine = MacroEngine(context, {"TARGET": "dist", "V": "1.2"})

    assert engine.expand("$TARGET/out") == "dist/out"
    assert engine.expand("${TARGET}_v${V}") == "dist_v1.2"
    assert engine.warnings == []


def test_environment_token(context):
    """Test ${ENV:NAME} lookups."""
    engine = MacroEngine(context)

    assert engine.expand("user=${ENV:USER_NAME}") == "user=alice"


def test_special_tokens(context):
    """Test HOME, PID and DATE tokens."""
    engine = MacroEngine(context)

    assert engine.expand("${HOME}/.m2") == "/home/test/.m2"
    assert engine.expand("$PID") == "4242"
    assert engine.expand("${DATE:%Y-%m-%d}") == "2024-01-02"


def test_variables_override_special_tokens(context):
    """Test that explicit variables win over built-in tokens."""
    engine = MacroEngine(context, {"HOME": "/custom"})

    assert engine.expand("${HOME}") == "/custom"


def test_fallback(context):
    """Test ${NAME|fallback} for missing and empty values."""
    engine = MacroEngine(context, {"SET": "yes"})

    assert engine.expand("${MISSING|default}") == "default"
    assert engine.expand("${ENV:EMPTY|fallback}") == "fallback"
    assert engine.expand("${SET|no}") == "yes"


def test_unknown_references_are_kept(context):
    """Test that unresolvable references stay verbatim and produce warnings."""
    engine = MacroEngine(context)

    assert engine.expand("$UNKNOWN/bin") == "$UNKNOWN/bin"
    assert engine.expand("${ENV:NOPE}") == "${ENV:NOPE}"
    assert "Unknown variable: UNKNOWN" in engine.warnings
    assert "Environment variable 'NOPE' not found" in engine.warnings


def test_dollar_escape(context):
    """Test that $$ yields a literal dollar sign."""
    engine = MacroEngine(context, {"X": "1"})

    assert engine.expand("cost $$5 and $$X") == "cost $5 and $X"


def test_substitutions_are_not_rescanned(context):
    """Test that substituted values are inserted literally."""
    engine = MacroEngine(context, {"A": "$B", "B": "x"})

    assert engine.expand("$A") == "$B"


def test_try_expand_returns_warnings(context):
    """Test that try_expand reports warnings without storing them."""
    engine = MacroEngine(context)

    value, warnings = engine.try_expand("$NOPE")

    assert value == "$NOPE"
    assert warnings == ["Unknown variable: NOPE"]
    assert engine.warnings == []


def test_resolve_protocol(context):
    """Test that the engine and the identity resolver satisfy MacroResolver."""
    engine = MacroEngine(context, {"A": "1"})

    assert isinstance(engine, MacroResolver)
    assert isinstance(IdentityResolver(), MacroResolver)
    assert engine.resolve("$A", "key") == "1"
    assert IdentityResolver().resolve("$A", "key") == "$A"
