"""Exception types raised by the scan engine."""


class DnsweepError(Exception):
    """Base class for dnsweep errors."""


class ConfigError(DnsweepError, ValueError):
    """Invalid run input detected before any task is scheduled."""


class ProbeError(DnsweepError):
    """Local infrastructure failure while probing (e.g. socket exhaustion)."""
