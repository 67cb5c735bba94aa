from __future__ import annotations

import datetime
import logging
from pathlib import Path

from rich.console import Console
from rich.text import Text

LOGGER_NAME = "jdx"

_LEVEL_STYLES = {
    "DEBUG": "dim",
    "INFO": "cyan",
    "WARNING": "yellow",
    "ERROR": "bold red",
    "CRITICAL": "bold white on red",
}


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


class _JdxRichConsoleHandler(logging.Handler):
    """Render log records as a single rich line on stderr.

    Records may set ``jdx_action_color`` to colour their first word.
    """

    def __init__(self, level: int = logging.NOTSET, console: Console | None = None) -> None:
        super().__init__(level)
        self.console = console if console is not None else Console(stderr=True)

    @staticmethod
    def _format_location(record: logging.LogRecord) -> str:
        return f"[{Path(record.pathname).name}:{record.lineno}]"

    @staticmethod
    def _format_message_text(record: logging.LogRecord) -> Text:
        message = record.getMessage()
        text = Text(message)
        color = getattr(record, "jdx_action_color", None)
        if color:
            action, _, _ = message.partition(" ")
            text.stylize(color, 0, len(action))
        return text

    def emit(self, record: logging.LogRecord) -> None:
        try:
            stamp = datetime.datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
            line = Text.assemble(
                (stamp, "dim"),
                " ",
                (f"{record.levelname:<8}", _LEVEL_STYLES.get(record.levelname, "")),
                " ",
                self._format_message_text(record),
                " ",
                (self._format_location(record), "dim"),
            )
            self.console.print(line, highlight=False, soft_wrap=True)
        except Exception:
            self.handleError(record)


def configure_logging(level: int | str | None = None) -> logging.Logger:
    """Attach the rich console handler to the root logger once.

    ``level`` defaults to the configured ``log_level`` and is applied to
    the ``jdx`` logger on every call.
    """

    from ..config import get_config

    root = logging.getLogger()
    if not any(isinstance(h, _JdxRichConsoleHandler) for h in root.handlers):
        root.addHandler(_JdxRichConsoleHandler())

    logger = get_logger()
    resolved = level if level is not None else get_config().log_level
    logger.setLevel(resolved.upper() if isinstance(resolved, str) else resolved)
    return logger


__all__ = ["LOGGER_NAME", "configure_logging", "get_logger"]
