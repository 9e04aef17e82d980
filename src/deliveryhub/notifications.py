"""Uniform user-facing notification contract."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Severity(StrEnum):
    """Notification severity."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A message surfaced to the user after an action.

    Attributes:
        title: Short heading.
        message: Human-readable detail.
        severity: How the message should be presented.
    """

    title: str
    message: str
    severity: Severity = Severity.INFO

    @classmethod
    def success(cls, message: str, title: str = "Success") -> Notification:
        return cls(title=title, message=message, severity=Severity.SUCCESS)

    @classmethod
    def warning(cls, message: str, title: str = "Warning") -> Notification:
        return cls(title=title, message=message, severity=Severity.WARNING)

    @classmethod
    def error(cls, message: str, title: str = "Error") -> Notification:
        return cls(title=title, message=message, severity=Severity.ERROR)
