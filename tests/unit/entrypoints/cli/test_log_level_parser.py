"""Unit tests for the CLI log level parser.

These tests exercise aeharness.entrypoints.cli.helpers.log_level_parser.parse_log_level,
covering default behavior, override semantics, input normalization (commas/spaces),
case-insensitivity, and error handling for malformed input.
"""

import logging
import types

import click
import pytest

from aeharness.entrypoints.cli.helpers.log_level_parser import DEFAULT_LIB_LEVELS, parse_log_level


@pytest.fixture
def ctx():
    """Minimal Click context stub; the callback never looks at it."""
    return types.SimpleNamespace()


def test_empty_uses_defaults(ctx):
    """Without overrides the HTTP client loggers are kept at WARNING."""
    assert parse_log_level(ctx, None, ()) == {"httpx": logging.WARNING, "httpcore": logging.WARNING}


def test_defaults_are_not_mutated(ctx):
    """Overrides return a new mapping."""
    parse_log_level(ctx, None, ("httpx=DEBUG",))
    assert DEFAULT_LIB_LEVELS["httpx"] == logging.WARNING


def test_repeated_flags_later_wins(ctx):
    """Later repeated CLI flags override earlier ones for the same logger."""
    out = parse_log_level(ctx, None, ("httpx=INFO", "aeharness=DEBUG", "httpx=ERROR"))
    assert out["httpx"] == logging.ERROR
    assert out["aeharness"] == logging.DEBUG


def test_envvar_string_with_commas_and_spaces(ctx):
    """A plain string (e.g. from AEHARNESS_LOGGER_LEVELS) is split on commas and spaces."""
    out = parse_log_level(ctx, None, "httpx=INFO,  aeharness.client=DEBUG httpcore=ERROR")
    assert out == {
        "httpx": logging.INFO,
        "httpcore": logging.ERROR,
        "aeharness.client": logging.DEBUG,
    }


def test_case_insensitive_levels(ctx):
    """Level names are parsed case-insensitively."""
    assert parse_log_level(ctx, None, ("httpx=info",))["httpx"] == logging.INFO


@pytest.mark.parametrize("value", [("not-a-pair",), ("httpx=LOUD",)])
def test_invalid_items_raise(ctx, value):
    """Malformed pairs and unknown levels raise click.BadParameter."""
    with pytest.raises(click.BadParameter):
        parse_log_level(ctx, None, value)
