"""Exception types surfaced by the analysis pipeline."""

from __future__ import annotations

from typing import Optional


class HookRegError(Exception):
    """Base class for every error raised by hookreg."""


class JsParseError(HookRegError):
    """The JavaScript parser could not produce a usable syntax tree."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.message = message
        self.line = line
        self.column = column
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"{self.message} (line {self.line}, column {self.column})"


class ParserUnavailableError(JsParseError):
    """tree-sitter or its JavaScript grammar is not installed."""


class ConfigError(HookRegError, ValueError):
    """An analysis option has an unusable value."""
