"""Target set construction: names, wordlists, nameservers and port specs."""

from __future__ import annotations

import ipaddress
import logging
import re
from collections.abc import Iterable
from pathlib import Path

from .errors import ConfigError

logger = logging.getLogger(__name__)

_LABEL = re.compile(r"^(?!-)[a-z0-9_-]{1,63}(?<!-)$")
MAX_NAME_LENGTH = 253
DEFAULT_DNS_PORT = 53


def _check_name(name: str) -> str | None:
    """Return a reason the name is invalid, or None."""
    if not name:
        return "empty name"
    if len(name) > MAX_NAME_LENGTH:
        return f"name longer than {MAX_NAME_LENGTH} characters"
    for label in name.split("."):
        if not _LABEL.match(label):
            return f"invalid label {label!r}"
    return None


def normalize_domain(value: str) -> str:
    """Lowercase and validate the root domain, dropping a trailing dot."""
    name = (value or "").strip().lower().rstrip(".")
    if not name:
        raise ConfigError("Empty target")
    reason = _check_name(name)
    if reason:
        raise ConfigError(f"Invalid target {value!r}: {reason}")
    return name


def build_targets(
    root: str, labels: Iterable[str], rejected: list[str] | None = None
) -> list[str]:
    """Return the names to resolve: the root first, then ``label.root`` in wordlist order.

    Labels are lowercased and stripped; duplicates keep their first position.
    Entries that would not form a valid DNS name are skipped with a warning and,
    when *rejected* is given, appended to it.
    """
    root = normalize_domain(root)
    names = [root]
    seen = {root}

    for raw in labels:
        label = raw.strip().lower().strip(".")
        if not label:
            continue
        name = f"{label}.{root}"
        reason = _check_name(name)
        if reason:
            logger.warning("Skipping subdomain %r: %s", raw, reason)
            if rejected is not None:
                rejected.append(raw)
            continue
        if name in seen:
            continue
        seen.add(name)
        names.append(name)

    return names


def load_wordlist(path: Path) -> list[str]:
    """Read subdomain labels, one per line; blank lines and ``#`` comments are skipped."""
    labels: list[str] = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            labels.append(line)
    return labels


def parse_ports(spec: str) -> list[int]:
    """
    Parses a port specification string into a sorted list of unique ports.
    Supports:
    - Single ports: "80"
    - Ranges: "1-1024"
    - Comma-separated: "22,80,443"
    - Mixed: "1-1024,8080,9000-9005"
    """
    spec = (spec or "").strip()
    if not spec:
        raise ConfigError("Empty port spec")

    ports: set[int] = set()
    for part in spec.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            if "-" in part:
                start_s, end_s = part.split("-", 1)
                start = int(start_s)
                end = int(end_s)
            else:
                start = end = int(part)
        except ValueError:
            raise ConfigError(f"Invalid port spec: {part!r}") from None
        if start < 1 or end > 65535 or start > end:
            raise ConfigError(f"Invalid port range: {part}")
        ports.update(range(start, end + 1))

    if not ports:
        raise ConfigError(f"No ports in spec: {spec!r}")
    return sorted(ports)


def parse_nameserver(value: str) -> tuple[str, int]:
    """Split ``ip``, ``ip:port`` or ``[ipv6]:port`` into a (host, port) pair."""
    text = (value or "").strip()
    host, port_s = text, ""
    if text.startswith("["):
        host, sep, rest = text[1:].partition("]")
        if not sep:
            raise ConfigError(f"Invalid nameserver: {value!r}")
        port_s = rest.removeprefix(":")
    elif text.count(":") == 1:
        host, port_s = text.split(":", 1)

    try:
        ipaddress.ip_address(host)
    except ValueError:
        raise ConfigError(f"Nameserver must be an IP address: {value!r}") from None

    if not port_s:
        return host, DEFAULT_DNS_PORT
    try:
        port = int(port_s)
    except ValueError:
        raise ConfigError(f"Invalid nameserver port: {value!r}") from None
    if port < 1 or port > 65535:
        raise ConfigError(f"Invalid nameserver port: {value!r}")
    return host, port
