"""Timestamped messages and simple elapsed-time reporting on standard error."""

from __future__ import annotations

import sys
import time
from typing import Optional, TextIO

__all__ = ["Timer", "log_message"]


def log_message(kind: str, text: str, stream: Optional[TextIO] = None) -> None:
    """Write "[<ctime>] <kind>: <text>" as one line to the stream (stderr by default)."""
    out = stream if stream is not None else sys.stderr
    out.write(f"[{time.ctime()}] {kind}: {text}\n")


class Timer:
    """Measures elapsed time, optionally announcing a task and its duration."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream
        self._start: Optional[float] = None
        self._message = False

    def _out(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def start(self, message: Optional[str] = None) -> None:
        """Start (or restart) measuring; if a message is given, announce it."""
        self.stop()
        self._message = bool(message)
        if self._message:
            out = self._out()
            out.write(f"{message}... ")
            out.flush()
        self._start = time.monotonic()

    def time(self) -> float:
        """Seconds elapsed since start(), or 0.0 if the timer is not running."""
        if self._start is None:
            return 0.0
        return time.monotonic() - self._start

    def stop(self) -> None:
        """Stop the timer, reporting the elapsed time if a message was announced."""
        if self._start is None:
            return
        if self._message:
            out = self._out()
            out.write(f"({self.time():.3f} s)\n")
            out.flush()
        self._start = None
        self._message = False

    def __enter__(self) -> Timer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()