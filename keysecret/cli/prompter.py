"""Terminal prompter used by the CLI."""

from __future__ import annotations

import getpass
import sys
from typing import TextIO


class ConsolePrompter:
    def __init__(self, stream: TextIO = sys.stdout) -> None:
        self._stream = stream

    def ask(self, text: str) -> str:
        return input(text.strip() + " ")

    def ask_hidden(self, text: str) -> str:
        return getpass.getpass(text.strip() + " ")

    def confirm(self, text: str) -> bool:
        question = text.strip() + " (y/n): "
        while True:
            raw = input(question).strip().lower()
            if raw in {"y", "yes"}:
                return True
            if raw in {"n", "no"}:
                return False
            print("Please answer with y(es) or n(o).", file=self._stream)
