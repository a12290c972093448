# schedconsole/api/errors.py
from __future__ import annotations

from typing import Any


class ConsoleError(Exception):
    """Base for every failure an operator action can surface."""


class AuthRequired(ConsoleError):
    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class TransportError(ConsoleError):
    """The round trip did not complete, or the body was not JSON."""

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class ValidationError(ConsoleError):
    """Locally detected bad input.

    When a default was substituted for the bad value, `substituted` carries it
    so the caller can report what was actually used.
    """

    def __init__(self, field: str, raw: Any, message: str, substituted: Any = None) -> None:
        super().__init__(message)
        self.field = field
        self.raw = raw
        self.substituted = substituted
