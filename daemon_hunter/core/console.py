from __future__ import annotations

import sys
from typing import Callable, Optional, TextIO

CLEAR_SCREEN = "\033[H\033[2J"


class Console:
    """
    Line-oriented terminal I/O. `prompt` raises EOFError at end of input.
    """

    def __init__(self, input_func: Optional[Callable[[str], str]] = None, out: Optional[TextIO] = None):
        self._input = input_func
        self._out = out

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    def print(self, text: str = "") -> None:
        self.out.write(text + "\n")
        self.out.flush()

    def write(self, text: str) -> None:
        self.out.write(text)
        self.out.flush()

    def _read(self, text: str) -> str:
        if self._input is None:
            return input(text)
        return self._input(text)

    def prompt(self, text: str) -> str:
        if self._out is not None:
            # input() writes its prompt to the real stdout; keep redirected output complete.
            self.write(text)
            return self._read("").strip()
        return self._read(text).strip()

    def clear(self) -> None:
        isatty = getattr(self.out, "isatty", None)
        if callable(isatty) and isatty():
            self.write(CLEAR_SCREEN)
