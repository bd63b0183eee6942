"""DNS resolution with failure classification."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

import dns.asyncresolver
import dns.exception
import dns.name
import dns.resolver

from .models import ResolveOutcome, ResolveStatus, RunConfig

logger = logging.getLogger(__name__)

# A transient failure is retried once before the name is given up on.
MAX_ATTEMPTS = 2

_INVALID_NAME_ERRORS = (dns.exception.SyntaxError, dns.name.NameTooLong)


class DNSResolver:
    """Resolve names to addresses through dnspython's async resolver."""

    def __init__(
        self,
        nameserver: tuple[str, int] | None = None,
        record_types: Sequence[str] = ("A",),
    ):
        self.nameserver = nameserver
        if nameserver is None:
            self._resolver = dns.asyncresolver.Resolver()
        else:
            host, port = nameserver
            self._resolver = dns.asyncresolver.Resolver(configure=False)
            # The port must be set first; nameservers pick it up on assignment.
            self._resolver.port = port
            self._resolver.nameservers = [host]
        self.record_types = tuple(record_types)

    @classmethod
    def from_config(cls, config: RunConfig) -> DNSResolver:
        return cls(nameserver=config.nameserver_address, record_types=config.record_types)

    async def resolve(self, name: str, timeout: float) -> ResolveOutcome:
        """Resolve *name*, never raising for DNS-level failures.

        NXDOMAIN maps to ``NOT_FOUND``; no answer within *timeout* maps to
        ``TIMEOUT``; any other resolver or socket error is retried once with
        the same timeout and then reported as ``TRANSIENT_ERROR``.
        """
        attempts = 0
        while True:
            attempts += 1
            try:
                addresses = await asyncio.wait_for(self._query(name, timeout), timeout=timeout)
            except dns.resolver.NXDOMAIN:
                logger.debug("%s does not exist", name)
                return ResolveOutcome(name, ResolveStatus.NOT_FOUND, attempts=attempts)
            except _INVALID_NAME_ERRORS as exc:
                logger.debug("%s is not a valid DNS name: %s", name, exc)
                return ResolveOutcome(
                    name, ResolveStatus.NOT_FOUND, error=str(exc), attempts=attempts
                )
            except (TimeoutError, dns.exception.Timeout):
                logger.info("Resolution of %s timed out after %.2fs", name, timeout)
                return ResolveOutcome(
                    name,
                    ResolveStatus.TIMEOUT,
                    error=f"no answer within {timeout}s",
                    attempts=attempts,
                )
            except (dns.exception.DNSException, OSError) as exc:
                error = str(exc) or type(exc).__name__
                if attempts < MAX_ATTEMPTS:
                    logger.debug("Retrying %s after error: %s", name, error)
                    continue
                logger.info("Resolution of %s failed: %s", name, error)
                return ResolveOutcome(
                    name, ResolveStatus.TRANSIENT_ERROR, error=error, attempts=attempts
                )

            return ResolveOutcome(
                name, ResolveStatus.RESOLVED, addresses=tuple(addresses), attempts=attempts
            )

    async def _query(self, name: str, timeout: float) -> list[str]:
        """Query every configured record type; addresses are unique, in discovery order."""
        found: dict[str, None] = {}
        for rdtype in self.record_types:
            try:
                answer = await self._resolver.resolve(
                    name, rdtype, lifetime=timeout, search=False
                )
            except dns.resolver.NoAnswer:
                continue
            for rdata in answer:
                found.setdefault(rdata.address, None)
        return list(found)
