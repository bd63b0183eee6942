"""TCP connect probing."""

from __future__ import annotations

import asyncio
import errno
import logging

from .errors import ProbeError
from .models import ProbeOutcome

logger = logging.getLogger(__name__)

# Local resource exhaustion, not an answer from the remote host.
_EXHAUSTION_ERRNOS = frozenset(
    {errno.EMFILE, errno.ENFILE, errno.ENOBUFS, errno.ENOMEM, errno.EADDRNOTAVAIL}
)


class TCPProber:
    """Classify a single TCP port by attempting a full connect.

    Each probe is independent. Repeating a probe may give a different outcome:
    rate limiting, packet loss or a service restarting all change what the
    remote side answers, so results are point-in-time observations.
    """

    async def probe(self, address: str, port: int, timeout: float) -> ProbeOutcome:
        """Return ``OPEN``, ``CLOSED`` (refused) or ``FILTERED`` (no answer in time).

        Raises :class:`ProbeError` when the local host cannot attempt the
        connection at all, such as when it runs out of file descriptors.
        """
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(address, port), timeout=timeout
            )
        except TimeoutError:
            return ProbeOutcome.FILTERED
        except ConnectionRefusedError:
            return ProbeOutcome.CLOSED
        except OSError as exc:
            if exc.errno in _EXHAUSTION_ERRNOS:
                raise ProbeError(f"Cannot probe {address}:{port}: {exc}") from exc
            # Unreachable hosts and networks give no usable answer.
            logger.debug("Probe %s:%d failed: %s", address, port, exc)
            return ProbeOutcome.FILTERED

        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        return ProbeOutcome.OPEN
