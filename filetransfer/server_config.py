"""Server settings with defaults, a ``key = value`` file format and command-line options."""

from __future__ import annotations

import datetime
import os
import re
import sys
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from . import logger as log

_INT_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")
_INT32_MIN, _INT32_MAX = -(2**31), 2**31 - 1
_SIZE_MAX = 2**64 - 1

_USAGE = """\
Usage: {prog} [options]
Options:
  -h, --help                 Show this help message
  -c, --config <file>        Load configuration from file
  -a, --address <address>    Set listen address
  -p, --port <port>          Set listen port
  -s, --storage <path>       Set storage path
  -l, --log-level <level>    Set log level (0-4)
  -f, --log-file <file>      Set log file
  -t, --threads <count>      Set thread pool size
  --enable-encryption        Enable encryption
  --disable-encryption       Disable encryption
  --enable-version-control   Enable version control
  --disable-version-control  Disable version control
  --enable-tcp-optimization  Enable TCP optimization
  --disable-tcp-optimization Disable TCP optimization
  --enable-zero-copy         Enable zero-copy transfer
  --disable-zero-copy        Disable zero-copy transfer
"""


class ConfigError(ValueError):
    """A configuration file or option could not be read or holds a bad value."""


def _leading_int(name: str, text: str) -> int:
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ConfigError(f"invalid number for {name}: {text!r}")
    return int(match.group(1))


def _to_int(name: str, text: str) -> int:
    value = _leading_int(name, text)
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ConfigError(f"number out of range for {name}: {text!r}")
    return value


def _to_port(name: str, text: str) -> int:
    return _to_int(name, text) & 0xFFFF


def _to_size(name: str, text: str) -> int:
    value = _leading_int(name, text)
    if not 0 <= value <= _SIZE_MAX:
        raise ConfigError(f"number out of range for {name}: {text!r}")
    return value


def _to_bool(name: str, text: str) -> bool:
    return text in ("true", "1")


def _to_seconds(name: str, text: str) -> datetime.timedelta:
    return datetime.timedelta(seconds=_to_int(name, text))


# A converter of None means the text is stored as it stands.
Converter = Optional[Callable[[str, str], object]]


def _convert(convert: Converter, name: str, text: str) -> object:
    return text if convert is None else convert(name, text)


# Configuration-file key -> (attribute, converter).
_FILE_KEYS: Dict[str, Tuple[str, Converter]] = {
    "listen_address": ("listen_address", None),
    "listen_port": ("listen_port", _to_port),
    "storage_path": ("storage_path", None),
    "log_level": ("log_level", _to_int),
    "log_file": ("log_file", None),
    "max_connections": ("max_connections", _to_size),
    "thread_pool_size": ("thread_pool_size", _to_size),
    "session_timeout": ("session_timeout", _to_seconds),
    "enable_encryption": ("encryption_enabled", _to_bool),
    "tls_cert_file": ("tls_cert_file", None),
    "tls_key_file": ("tls_key_file", None),
    "users_file": ("users_file", None),
    "enable_version_control": ("version_control_enabled", _to_bool),
    "max_versions_per_file": ("max_versions_per_file", _to_size),
    "enable_tcp_optimization": ("tcp_optimization_enabled", _to_bool),
    "tcp_send_buffer_size": ("tcp_send_buffer_size", _to_int),
    "tcp_recv_buffer_size": ("tcp_recv_buffer_size", _to_int),
    "enable_tcp_nodelay": ("tcp_nodelay_enabled", _to_bool),
    "enable_zero_copy": ("zero_copy_enabled", _to_bool),
    "zero_copy_threshold": ("zero_copy_threshold", _to_size),
}

# Command-line options taking a value -> (attribute, converter, missing-value message).
_VALUE_OPTIONS: Dict[str, Tuple[str, Converter, str]] = {}
for _names, _entry in (
    (("--address", "-a"), ("listen_address", None, "Missing listen address")),
    (("--port", "-p"), ("listen_port", _to_port, "Missing listen port")),
    (("--storage", "-s"), ("storage_path", None, "Missing storage path")),
    (("--log-level", "-l"), ("log_level", _to_int, "Missing log level")),
    (("--log-file", "-f"), ("log_file", None, "Missing log file")),
    (("--threads", "-t"), ("thread_pool_size", _to_size, "Missing thread count")),
):
    for _name in _names:
        _VALUE_OPTIONS[_name] = _entry

# Command-line switches -> (attribute, value).
_FLAG_OPTIONS: Dict[str, Tuple[str, bool]] = {
    "--enable-encryption": ("encryption_enabled", True),
    "--disable-encryption": ("encryption_enabled", False),
    "--enable-version-control": ("version_control_enabled", True),
    "--disable-version-control": ("version_control_enabled", False),
    "--enable-tcp-optimization": ("tcp_optimization_enabled", True),
    "--disable-tcp-optimization": ("tcp_optimization_enabled", False),
    "--enable-zero-copy": ("zero_copy_enabled", True),
    "--disable-zero-copy": ("zero_copy_enabled", False),
}


class ServerConfig:
    """All settings of the file-transfer server."""

    _instance: Optional["ServerConfig"] = None
    _instance_lock = threading.Lock()

    def __init__(self) -> None:
        self.reset()

    @classmethod
    def instance(cls) -> "ServerConfig":
        """Return the process-wide configuration."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    def reset(self) -> None:
        """Restore every setting to its default."""
        self.listen_address = "0.0.0.0"
        self.listen_port = 8080
        self.storage_path = "./storage"
        self.log_level = 2
        self.log_file = "./logs/server.log"
        self.max_connections = 1000
        self.thread_pool_size = os.cpu_count() or 0
        self.session_timeout = datetime.timedelta(seconds=1800)

        self.encryption_enabled = False
        self.tls_cert_file = "./certs/server.crt"
        self.tls_key_file = "./certs/server.key"
        self.users_file = "./config/users.json"

        self.version_control_enabled = True
        self.max_versions_per_file = 5

        self.tcp_optimization_enabled = True
        self.tcp_send_buffer_size = 1024 * 1024
        self.tcp_recv_buffer_size = 1024 * 1024
        self.tcp_nodelay_enabled = True

        self.zero_copy_enabled = True
        self.zero_copy_threshold = 64 * 1024

    def load_from_file(self, config_file) -> None:
        """Apply ``key = value`` settings from ``config_file``.

        Raises ConfigError when the file is missing or unreadable, or a value
        is not a valid number. Unknown keys are logged and skipped.
        """
        path = Path(config_file)
        if not path.exists():
            log.error("Configuration file not found: %s", str(config_file))
            raise ConfigError(f"configuration file not found: {config_file}")
        try:
            with open(path, encoding="utf-8") as handle:
                lines: List[str] = handle.read().split("\n")
        except OSError as exc:
            log.error("Failed to open configuration file: %s", str(config_file))
            raise ConfigError(f"failed to open configuration file: {config_file}") from exc

        for line in lines:
            if not line or line.startswith("#"):
                continue
            key, sep, value = line.partition("=")
            if not sep:
                continue
            key = key.strip(" \t")
            value = value.strip(" \t")
            entry = _FILE_KEYS.get(key)
            if entry is None:
                log.warning("Unknown configuration key: %s", key)
                continue
            attribute, convert = entry
            setattr(self, attribute, _convert(convert, key, value))

        log.info("Configuration loaded from file: %s", str(config_file))
        log.info("%s", self._summary())

    def load_from_args(self, argv: Optional[Sequence[str]] = None) -> bool:
        """Apply command-line options (without the program name).

        Returns False when help was requested and printed, True otherwise.
        Raises ConfigError on an unknown option or a missing or bad value.
        A ``--config`` option loads that file and ends option processing.
        """
        args = list(sys.argv[1:] if argv is None else argv)
        position = 0
        while position < len(args):
            arg = args[position]
            if arg in ("--help", "-h"):
                prog = Path(sys.argv[0]).name if sys.argv and sys.argv[0] else "server"
                print(_USAGE.format(prog=prog))
                return False
            if arg in ("--config", "-c"):
                if position + 1 >= len(args):
                    raise ConfigError("Missing configuration file path")
                self.load_from_file(args[position + 1])
                return True
            if arg in _VALUE_OPTIONS:
                attribute, convert, missing = _VALUE_OPTIONS[arg]
                if position + 1 >= len(args):
                    raise ConfigError(missing)
                position += 1
                setattr(self, attribute, _convert(convert, arg, args[position]))
            elif arg in _FLAG_OPTIONS:
                attribute, flag = _FLAG_OPTIONS[arg]
                setattr(self, attribute, flag)
            else:
                raise ConfigError(f"Unknown option: {arg}")
            position += 1

        log.info("Configuration loaded from command line")
        log.info("%s", self._summary())
        return True

    def _summary(self) -> str:
        tcp = "enabled" if self.tcp_optimization_enabled else "disabled"
        zero_copy = "enabled" if self.zero_copy_enabled else "disabled"
        return f"TCP optimization: {tcp}, Zero-copy: {zero_copy}"