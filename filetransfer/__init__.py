"""Logging, thread pool, configuration and encryption helpers for a file transfer server."""

__version__ = "1.0.0"

__all__ = ["config_manager", "encryption", "logger", "server_config", "thread_pool"]