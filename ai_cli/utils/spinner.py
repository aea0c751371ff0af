"""Spinner shown on stderr while a background response is processing."""
from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.status import Status

from .ansi import err_console


class Spinner:
    """Display a small spinner next to a prefix while work is done.

    A disabled spinner is a no-op, so callers can always use it as a
    context manager.
    """

    def __init__(self, prefix: str = "", console: Optional[Console] = None, enabled: bool = True):
        self._prefix = prefix
        self._console = console or err_console
        self._enabled = enabled
        self._status: Optional[Status] = None

    def start(self) -> None:
        if not self._enabled or self._status is not None:
            return
        self._status = self._console.status(self._prefix, spinner="dots")
        self._status.start()

    def stop(self) -> None:
        if self._status is None:
            return
        self._status.stop()
        self._status = None

    def __enter__(self) -> "Spinner":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
