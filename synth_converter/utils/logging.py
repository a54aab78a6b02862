import logging
import os
import re
import sys
from pathlib import Path

from synth_converter.errors import ConversionError

_ANSI_ESCAPE = re.compile(r"\033\[[0-9;]*m")


def strip_ansi_codes(text: str) -> str:
    """Drop ANSI color sequences (``\\033[1;32m`` and friends) from text."""
    return _ANSI_ESCAPE.sub("", text)


def _colors_enabled(stream) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def _record_path(record: logging.LogRecord) -> str | None:
    """Record path carried by a ConversionError attached to the log record."""
    if not record.exc_info:
        return None
    error = record.exc_info[1]
    if isinstance(error, ConversionError) and error.context:
        return " > ".join(error.context)
    return None


class ColoredFormatter(logging.Formatter):
    """Console formatter: level colors plus an icon per synth_converter component."""

    RESET = "\033[0m"
    BOLD = "\033[1m"

    LEVEL_COLORS = {
        "DEBUG": "\033[2;37m",  # Dim
        "INFO": "\033[36m",  # Cyan
        "WARNING": "\033[1;33m",  # Bold Yellow
        "ERROR": "\033[1;31m",  # Bold Red
        "CRITICAL": "\033[1;37;41m",  # White on Red
    }

    # Longest prefix wins, so submodules can be themed apart from their package
    COMPONENT_THEMES = {
        "synth_converter.triples.mapper": ("🧪", "\033[1;32m"),
        "synth_converter.triples.identity": ("🔑", "\033[1;33m"),
        "synth_converter.triples.namespaces": ("🏷️ ", "\033[1;35m"),
        "synth_converter.triples.store": ("🗃️ ", "\033[1;36m"),
        "synth_converter.triples.serializer": ("📝", "\033[1;34m"),
        "synth_converter.triples": ("🔗", "\033[1;34m"),
        "synth_converter.loaders": ("📂", "\033[1;36m"),
        "synth_converter.pipeline": ("⚙️ ", "\033[1;34m"),
        "synth_converter.config": ("🛠️ ", "\033[1;90m"),
        "synth_converter.main": ("🚀", "\033[1;32m"),
        "__main__": ("🚀", "\033[1;32m"),
    }

    def __init__(self, fmt=None, datefmt=None, use_colors: bool = True):
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_colors = use_colors

    def _theme(self, logger_name: str) -> tuple[str, str]:
        matches = [name for name in self.COMPONENT_THEMES if logger_name.startswith(name)]
        if not matches:
            # rdflib, pydantic, ...
            return "•", self.BOLD
        return self.COMPONENT_THEMES[max(matches, key=len)]

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{self.RESET}" if self.use_colors else text

    def format(self, record):
        icon, component_color = self._theme(record.name)
        level_color = self.LEVEL_COLORS.get(record.levelname, self.RESET)

        component = self._paint(f"{icon} {record.name.rsplit('.', 1)[-1]:<12}", component_color)
        level = self._paint(f"{record.levelname:<8}", level_color)

        message = record.getMessage()
        if record.levelno >= logging.WARNING:
            message = self._paint(message, level_color)

        parts = [self.formatTime(record, self.datefmt), level, component, message]
        line = " | ".join(parts)

        path = _record_path(record)
        if path:
            line += "\n    at " + self._paint(path, self.BOLD)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class PlainFormatter(logging.Formatter):
    """Run-log formatter: full logger name, no colors, record path on failures."""

    def format(self, record):
        message = strip_ansi_codes(record.getMessage())
        line = f"{self.formatTime(record, self.datefmt)} | {record.levelname:<8} | {record.name} | {message}"

        path = _record_path(record)
        if path:
            line += f"\n    at {path}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# Handler writing execution.log for the current pipeline run
_file_handler: logging.FileHandler | None = None


def setup_colored_logging(level=logging.INFO, log_file: str | Path | None = None):
    """
    Configure the root logger for the CLI.

    Console output goes to stderr so that ``--stdout`` renderings stay clean.
    Colors are used only on a terminal and when ``NO_COLOR`` is unset.

    Args:
        level: Root logging level
        log_file: Also log to this file (DEBUG and up)
    """
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(ColoredFormatter(datefmt="%H:%M:%S", use_colors=_colors_enabled(sys.stderr)))

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.addHandler(console)
    root.setLevel(level)

    if log_file:
        add_file_handler(log_file)

    # rdflib logs plugin loading at INFO
    logging.getLogger("rdflib").setLevel(logging.WARNING)


def add_file_handler(log_file: str | Path, level=logging.DEBUG) -> logging.FileHandler:
    """
    Start writing the root logger to a run log, replacing any previous one.

    Args:
        log_file: Log file path; parent directories are created
        level: Minimum level written to the file

    Returns:
        The attached FileHandler
    """
    global _file_handler
    remove_file_handler()

    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(PlainFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
    logging.getLogger().addHandler(handler)
    _file_handler = handler

    logging.getLogger(__name__).info("Run log: %s", path)
    return handler


def remove_file_handler() -> None:
    """Detach and close the run log, if one is attached."""
    global _file_handler
    if _file_handler is None:
        return

    logging.getLogger().removeHandler(_file_handler)
    _file_handler.close()
    _file_handler = None


def get_file_handler() -> logging.FileHandler | None:
    return _file_handler
