"""Run the async scan engine from synchronous CLI code."""

import asyncio
import threading
from collections.abc import Coroutine
from typing import Any, TypeVar, cast

T = TypeVar("T")


def _run_on_runner(coro: Coroutine[Any, Any, T]) -> T:
    # asyncio.Runner turns Ctrl-C into cancellation of the scan task and
    # re-raises KeyboardInterrupt once the loop has shut down.
    with asyncio.Runner() as runner:
        return runner.run(coro)


def safe_async_run(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run an async coroutine to completion from synchronous code.

    If an event loop is already running in this thread (e.g. pytest-asyncio),
    the coroutine runs on a worker thread with its own event loop and the
    caller blocks until it finishes.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return _run_on_runner(coro)

    outcome: dict[str, Any] = {}

    def _target() -> None:
        try:
            outcome["result"] = _run_on_runner(coro)
        except BaseException as exc:
            outcome["error"] = exc

    worker = threading.Thread(target=_target, name="dnsweep-scan", daemon=True)
    worker.start()
    worker.join()

    if "error" in outcome:
        raise outcome["error"]
    return cast(T, outcome["result"])
