"""Centralized error handler for cindex commands."""

from collections.abc import Callable
from functools import wraps
from typing import Any

import click

from csindex.indexer.exceptions import IndexerError
from csindex.utils.exit_codes import ExitCodes
from csindex.utils.logging import logger


class FatalIndexError(click.ClickException):
    """Click exception carrying the fatal exit status."""

    exit_code = ExitCodes.FATAL


def handle_exceptions(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator that turns indexing failures into a logged, nonzero exit."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        """Inner wrapper that implements the try-except logic."""
        try:
            return func(*args, **kwargs)
        except (click.ClickException, click.exceptions.Exit, click.Abort):
            raise
        except IndexerError as e:
            # Expected failure modes: message is enough, traceback only at DEBUG
            logger.error("{err}", err=str(e))
            logger.opt(exception=True).debug("Command '{cmd}' failed", cmd=func.__name__)
            raise FatalIndexError(str(e)) from e
        except Exception as e:
            logger.opt(exception=True).error(
                "Command '{cmd}' failed: {err}",
                cmd=func.__name__,
                err=str(e),
            )
            raise FatalIndexError(f"{type(e).__name__}: {e}") from e

    return wrapper
