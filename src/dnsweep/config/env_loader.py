"""Global configuration file loading."""

from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR_NAME = ".dnsweep"
CONFIG_FILE_NAME = "config.yml"


def get_global_config_path() -> Path:
    """Return the path of ~/.dnsweep/config.yml."""
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def load_global_config() -> dict[str, Any]:
    """Load global configuration from ~/.dnsweep/config.yml."""
    config_path = get_global_config_path()
    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        return data if isinstance(data, dict) else {}
    return {}


def create_global_config() -> Path:
    """Write a commented template config file if none exists; return its path."""
    config_path = get_global_config_path()
    if config_path.exists():
        return config_path

    config_path.parent.mkdir(parents=True, exist_ok=True)
    template = """# dnsweep global configuration
# Environment variables of the same name take precedence over these values.

# Worker pool size shared by DNS lookups and port probes.
DNSWEEP_CONCURRENCY: 10

# DNS server as ip[:port], or "system" to use the host resolver settings.
DNSWEEP_NAMESERVER: "8.8.8.8:53"

# Timeouts in seconds.
DNSWEEP_RESOLVE_TIMEOUT: 1.0
DNSWEEP_PROBE_TIMEOUT: 1.0

# Overall run deadline in seconds (leave empty for none).
# DNSWEEP_DEADLINE: 300

DNSWEEP_VERBOSE: false
"""
    config_path.write_text(template)
    return config_path
