"""Operator-facing warnings, routed through an injectable reporter."""

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol


class Reporter(Protocol):
    def warning(self, message: str, **context: Any) -> None:
        ...


@dataclass(frozen=True)
class Notice:
    message: str
    context: dict[str, Any] = field(default_factory=dict)


def format_notice(message: str, context: dict[str, Any]) -> str:
    """Render 'message (key=value, ...)' for log output."""
    if not context:
        return message
    details = ", ".join(f"{k}={v!r}" for k, v in context.items())
    return f"{message} ({details})"


class LoggingReporter:
    """Forwards warnings to a standard logger."""

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger("k6_comparer")

    def warning(self, message: str, **context: Any) -> None:
        self._logger.warning("%s", format_notice(message, context))


class CollectingReporter:
    """Keeps warnings in memory instead of emitting them."""

    def __init__(self):
        self.notices: list[Notice] = []

    def warning(self, message: str, **context: Any) -> None:
        self.notices.append(Notice(message=message, context=dict(context)))

    @property
    def messages(self) -> list[str]:
        return [n.message for n in self.notices]

    def clear(self):
        self.notices.clear()


_default_reporter: Reporter = LoggingReporter()


def default_reporter() -> Reporter:
    return _default_reporter
