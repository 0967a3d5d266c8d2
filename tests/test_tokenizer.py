"""Tests for the whitespace tokenizer."""

import pytest

from argv_builder.tokenizer import tokenize


def test_tokenize_simple():
    """Test splitting on single spaces."""
    assert tokenize("--flag value") == ["--flag", "value"]


def test_tokenize_collapses_whitespace():
    """Test that runs of mixed whitespace act as one delimiter."""
    assert tokenize(" -a  \t-b\r\n-c\f-d ") == ["-a", "-b", "-c", "-d"]


@pytest.mark.parametrize("text", [None, "", "   ", "\t\n"])
def test_tokenize_empty(text):
    """Test that empty input yields no tokens."""
    assert tokenize(text) == []


def test_tokenize_ignores_quotes():
    """Test that quoted phrases are not grouped."""
    assert tokenize("'a b' \"c d\"") == ["'a", "b'", '"c', 'd"']
