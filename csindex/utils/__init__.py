"""csindex utilities package."""

from .error_handler import FatalIndexError, handle_exceptions
from .exit_codes import ExitCodes
from .logging import logger, set_console_level

__all__ = [
    "FatalIndexError",
    "handle_exceptions",
    "ExitCodes",
    "logger",
    "set_console_level",
]
