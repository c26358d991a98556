"""Key/value settings stored as ``key = value`` lines in a text file."""

from __future__ import annotations

import atexit
import math
import re
import threading
from typing import Dict, Optional

_INT_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:inf(?:inity)?|nan|(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?))",
    re.IGNORECASE,
)
_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1

_TRUE_WORDS = frozenset({"true", "yes", "1", "on"})
_FALSE_WORDS = frozenset({"false", "no", "0", "off"})


class ConfigManager:
    """Thread-safe store of string settings loaded from and saved to a file."""

    _instance: Optional["ConfigManager"] = None
    _instance_lock = threading.Lock()

    def __init__(self) -> None:
        self._config_file = ""
        self._values: Dict[str, str] = {}
        self._lock = threading.Lock()

    @classmethod
    def instance(cls) -> "ConfigManager":
        """Return the process-wide manager; it saves itself at exit."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
                atexit.register(cls._instance._save_on_exit)
            return cls._instance

    def _save_on_exit(self) -> None:
        if self._config_file:
            try:
                self.save()
            except OSError:
                pass

    @property
    def config_file(self) -> str:
        return self._config_file

    def load(self, config_file) -> None:
        """Replace all settings with those read from ``config_file``.

        Raises OSError when the file cannot be read; the settings are
        cleared either way.
        """
        with self._lock:
            self._config_file = str(config_file)
            self._values.clear()
            with open(self._config_file, encoding="utf-8") as handle:
                for raw in handle:
                    line = raw.rstrip("\n")
                    if not line or line.startswith("#"):
                        continue
                    key, sep, value = line.partition("=")
                    if sep:
                        self._values[key.strip(" \t")] = value.strip(" \t")

    def save(self, config_file=None) -> None:
        """Write settings sorted by key to ``config_file`` or the loaded file."""
        with self._lock:
            path = str(config_file) if config_file else self._config_file
            if not path:
                raise ValueError("no configuration file to save to")
            with open(path, "w", encoding="utf-8") as handle:
                for key in sorted(self._values):
                    handle.write(f"{key} = {self._values[key]}\n")

    def get_string(self, key: str, default: str = "") -> str:
        with self._lock:
            return self._values.get(key, default)

    def get_int(self, key: str, default: int = 0) -> int:
        """Leading integer of the value, or ``default`` if absent or invalid."""
        value = self.get_string(key)
        match = _INT_PREFIX.match(value) if value else None
        if match is None:
            return default
        number = int(match.group(1))
        if not _INT_MIN <= number <= _INT_MAX:
            return default
        return number

    def get_float(self, key: str, default: float = 0.0) -> float:
        """Leading number of the value, or ``default`` if absent or invalid."""
        value = self.get_string(key)
        match = _FLOAT_PREFIX.match(value) if value else None
        if match is None:
            return default
        text = match.group(1)
        number = float(text)
        if math.isinf(number) and "inf" not in text.lower():
            return default
        return number

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get_string(key).lower()
        if value in _TRUE_WORDS:
            return True
        if value in _FALSE_WORDS:
            return False
        return default

    def set(self, key: str, value) -> None:
        """Store a string, integer, float or boolean setting."""
        if isinstance(value, bool):
            text = "true" if value else "false"
        elif isinstance(value, int):
            text = str(value)
        elif isinstance(value, float):
            text = f"{value:f}"
        elif isinstance(value, str):
            text = value
        else:
            raise TypeError(f"unsupported setting type: {type(value).__name__}")
        with self._lock:
            self._values[key] = text

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._values

    def remove(self, key: str) -> bool:
        """Delete ``key``; return whether it was present."""
        with self._lock:
            return self._values.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._values.clear()