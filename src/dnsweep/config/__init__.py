"""
Configuration management for dnsweep.

Supports multiple configuration sources in order of priority:
1. Command-line options (handled by the CLI)
2. Environment variables
3. Global config file (~/.dnsweep/config.yml)
4. Default values (lowest priority)
"""

from .env_loader import create_global_config, get_global_config_path, load_global_config
from .getters import (
    DEFAULT_CONCURRENCY,
    DEFAULT_NAMESERVER,
    DEFAULT_PROBE_TIMEOUT,
    DEFAULT_RESOLVE_TIMEOUT,
    ENV_KEYS,
    get_concurrency,
    get_config,
    get_deadline,
    get_nameserver,
    get_probe_timeout,
    get_resolve_timeout,
    is_verbose,
)

__all__ = [
    # env_loader
    "create_global_config",
    "get_global_config_path",
    "load_global_config",
    # getters
    "DEFAULT_CONCURRENCY",
    "DEFAULT_NAMESERVER",
    "DEFAULT_PROBE_TIMEOUT",
    "DEFAULT_RESOLVE_TIMEOUT",
    "ENV_KEYS",
    "get_concurrency",
    "get_config",
    "get_deadline",
    "get_nameserver",
    "get_probe_timeout",
    "get_resolve_timeout",
    "is_verbose",
]
