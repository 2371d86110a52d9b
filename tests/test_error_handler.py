"""Tests for the CLI error handler and logging helpers."""

import click
import pytest

from csindex.indexer.exceptions import PublishError
from csindex.utils.error_handler import FatalIndexError, handle_exceptions
from csindex.utils.exit_codes import ExitCodes
from csindex.utils.logging import get_console_level, set_console_level


def test_indexer_error_becomes_fatal_exit(log_messages):
    @handle_exceptions
    def command():
        raise PublishError("rename failed")

    with pytest.raises(FatalIndexError) as excinfo:
        command()

    assert excinfo.value.exit_code == ExitCodes.FATAL
    assert excinfo.value.message == "rename failed"
    assert "rename failed" in log_messages


def test_unexpected_error_keeps_type_name():
    @handle_exceptions
    def command():
        raise KeyError("boom")

    with pytest.raises(FatalIndexError) as excinfo:
        command()

    assert excinfo.value.message.startswith("KeyError")


def test_click_exceptions_pass_through():
    @handle_exceptions
    def command():
        raise click.UsageError("bad flag")

    with pytest.raises(click.UsageError):
        command()


def test_set_console_level():
    previous = get_console_level()
    try:
        set_console_level("debug")
        assert get_console_level() == "DEBUG"
    finally:
        set_console_level(previous)


def test_exit_code_descriptions():
    assert ExitCodes.get_description(ExitCodes.USAGE) == "Invalid command line usage"
    assert ExitCodes.get_description(99) == "Unknown exit code: 99"
