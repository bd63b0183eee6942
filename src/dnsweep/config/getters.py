"""Configuration getter functions."""

import logging
import os
from typing import Any

from .env_loader import load_global_config

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 10
DEFAULT_NAMESERVER = "8.8.8.8:53"
DEFAULT_RESOLVE_TIMEOUT = 1.0
DEFAULT_PROBE_TIMEOUT = 1.0

ENV_KEYS = (
    "DNSWEEP_CONCURRENCY",
    "DNSWEEP_NAMESERVER",
    "DNSWEEP_RESOLVE_TIMEOUT",
    "DNSWEEP_PROBE_TIMEOUT",
    "DNSWEEP_DEADLINE",
    "DNSWEEP_VERBOSE",
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def get_config(key: str, default: Any = None) -> Any:
    """
    Get configuration value with priority:
    1. Environment variable
    2. Global config file
    3. Default value
    """
    env_value = os.environ.get(key)
    if env_value:
        return env_value

    global_config = load_global_config()
    value = global_config.get(key)
    if value is not None and value != "":
        return value

    return default


def _get_number(key: str, cast: type, default: Any) -> Any:
    value = get_config(key)
    if value is None:
        return default
    try:
        return cast(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid %s value %r", key, value)
        return default


def get_concurrency() -> int:
    """Worker pool size (default: 10)."""
    return _get_number("DNSWEEP_CONCURRENCY", int, DEFAULT_CONCURRENCY)


def get_resolve_timeout() -> float:
    """Per-resolution timeout in seconds (default: 1.0)."""
    return _get_number("DNSWEEP_RESOLVE_TIMEOUT", float, DEFAULT_RESOLVE_TIMEOUT)


def get_probe_timeout() -> float:
    """Per-probe timeout in seconds (default: 1.0)."""
    return _get_number("DNSWEEP_PROBE_TIMEOUT", float, DEFAULT_PROBE_TIMEOUT)


def get_deadline() -> float | None:
    """Overall run deadline in seconds, or None when unset."""
    return _get_number("DNSWEEP_DEADLINE", float, None)


def get_nameserver() -> str | None:
    """DNS server as ``ip[:port]``; None means the system resolver configuration."""
    value = str(get_config("DNSWEEP_NAMESERVER", DEFAULT_NAMESERVER)).strip()
    if value.lower() == "system":
        return None
    return value


def is_verbose() -> bool:
    """Check DNSWEEP_VERBOSE."""
    return str(get_config("DNSWEEP_VERBOSE", "")).strip().lower() in _TRUE_VALUES
