"""Levelled logging to the console, a size-limited log file and listeners."""

from __future__ import annotations

import datetime
import enum
import re
import sys
import threading
from pathlib import Path
from typing import Callable, List, Optional, TextIO

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

# Formatted content is capped the way a fixed 1024-byte buffer would cap it.
_MAX_FORMATTED_CONTENT = 1023

_RESET = "\033[0m"


class LogLevel(enum.IntEnum):
    """Severity of a log record, ordered from least to most severe."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    FATAL = 4


_COLOURS = {
    LogLevel.DEBUG: "\033[37m",
    LogLevel.INFO: "\033[32m",
    LogLevel.WARNING: "\033[33m",
    LogLevel.ERROR: "\033[31m",
    LogLevel.FATAL: "\033[35m",
}

Listener = Callable[[LogLevel, str], None]


def _current_time() -> str:
    now = datetime.datetime.now()
    return now.strftime("%Y-%m-%d %H:%M:%S") + f".{now.microsecond // 1000:03d}"


class Logger:
    """Thread-safe logger writing to the console, a rotating file and listeners."""

    _instance: Optional["Logger"] = None
    _instance_lock = threading.Lock()

    def __init__(self) -> None:
        self._level = LogLevel.INFO
        self._console = True
        self._log_file = ""
        self._max_file_size = DEFAULT_MAX_FILE_SIZE
        self._stream: Optional[TextIO] = None
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []

    @classmethod
    def instance(cls) -> "Logger":
        """Return the process-wide logger."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @property
    def level(self) -> LogLevel:
        return self._level

    @property
    def log_file(self) -> str:
        return self._log_file

    def init(
        self,
        level: LogLevel = LogLevel.INFO,
        log_to_console: bool = True,
        log_file: str = "",
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    ) -> None:
        """Configure level, console output and, if given, the log file."""
        with self._lock:
            self._level = LogLevel(level)
            self._console = log_to_console
            if log_file:
                self.set_file_output(log_file, max_file_size)

    def set_level(self, level: LogLevel) -> None:
        with self._lock:
            self._level = LogLevel(level)

    def set_console_output(self, enable: bool) -> None:
        with self._lock:
            self._console = enable

    def set_file_output(self, log_file, max_file_size: int = DEFAULT_MAX_FILE_SIZE) -> None:
        """Direct records to ``log_file``; an empty path turns file output off.

        Raises OSError when the directory cannot be created or the file opened.
        """
        with self._lock:
            self._close_stream()
            self._log_file = str(log_file) if log_file else ""
            self._max_file_size = max_file_size
            if not self._log_file:
                return
            try:
                Path(self._log_file).parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                print(f"Create log directory failed: {exc}", file=sys.stderr)
                raise
            try:
                self._stream = open(self._log_file, "a", encoding="utf-8")
            except OSError:
                self._log_file = ""
                raise

    def add_listener(self, listener: Listener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def clear_listeners(self) -> None:
        with self._lock:
            self._listeners.clear()

    def log(self, level: LogLevel, message: str, *args) -> None:
        """Record ``message % args`` at ``level``."""
        self._log(LogLevel(level), message, args, 2)

    def _log(self, level: LogLevel, message: str, args: tuple, depth: int) -> None:
        if level < self._level:
            return
        content = (message % args)[:_MAX_FORMATTED_CONTENT] if args else message
        frame = sys._getframe(depth)
        text = self._format(
            level, frame.f_code.co_filename, frame.f_lineno, frame.f_code.co_name, content
        )
        with self._lock:
            if self._console:
                print(f"{_COLOURS[level]}{text}{_RESET}", flush=True)
            if self._log_file:
                self._write_to_file(text)
            for listener in self._listeners:
                listener(level, text)

    @staticmethod
    def _format(level: LogLevel, path: str, line: int, func: str, content: str) -> str:
        filename = re.split(r"[/\\]", path)[-1]
        return f"[{_current_time()}] [{level.name}] [{filename}:{line}:{func}] {content}"

    def _close_stream(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None

    def _write_to_file(self, text: str) -> None:
        if self._stream is None:
            try:
                self.set_file_output(self._log_file, self._max_file_size)
            except OSError:
                return
        if self._stream.tell() > self._max_file_size:
            self._close_stream()
            backup = self._log_file + "." + _current_time().replace(":", "-")
            try:
                Path(self._log_file).replace(backup)
            except OSError as exc:
                print(f"Rename log file failed: {exc}", file=sys.stderr)
            try:
                self._stream = open(self._log_file, "w", encoding="utf-8")
            except OSError:
                self._log_file = ""
                return
        self._stream.write(text + "\n")
        self._stream.flush()


def debug(message: str, *args) -> None:
    Logger.instance()._log(LogLevel.DEBUG, message, args, 2)


def info(message: str, *args) -> None:
    Logger.instance()._log(LogLevel.INFO, message, args, 2)


def warning(message: str, *args) -> None:
    Logger.instance()._log(LogLevel.WARNING, message, args, 2)


def error(message: str, *args) -> None:
    Logger.instance()._log(LogLevel.ERROR, message, args, 2)


def fatal(message: str, *args) -> None:
    Logger.instance()._log(LogLevel.FATAL, message, args, 2)