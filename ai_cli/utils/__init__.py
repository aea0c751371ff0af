from .ansi import (
    Ansi,
    ERROR_LABEL,
    console,
    err_console,
)
from .log import init_logger, log_exception
from .spinner import Spinner

__all__ = [
    "Ansi",
    "ERROR_LABEL",
    "console",
    "err_console",
    "init_logger",
    "log_exception",
    "Spinner",
]
