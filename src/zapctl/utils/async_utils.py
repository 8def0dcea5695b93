"""Async utilities for running a cancellable coroutine from synchronous code."""

import asyncio
import signal
import sys
import threading
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar, cast

T = TypeVar("T")


def _cancel_all_tasks(loop: asyncio.AbstractEventLoop) -> None:
    """Cancel all pending tasks on the event loop."""
    tasks = asyncio.all_tasks(loop)
    for task in tasks:
        task.cancel()

    if tasks:
        loop.run_until_complete(asyncio.gather(*tasks, return_exceptions=True))


def _run_in_fresh_loop(main: Callable[[asyncio.Event], Coroutine[Any, Any, T]]) -> T:
    """Run ``main(cancel_event)`` in a new loop; SIGINT/SIGTERM set the event."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    cancel_event = asyncio.Event()

    installed: list[int] = []
    # Signal handlers only work on Unix main thread.
    if sys.platform != "win32" and threading.current_thread() is threading.main_thread():
        for signum in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(signum, cancel_event.set)
            installed.append(signum)

    try:
        return loop.run_until_complete(main(cancel_event))
    finally:
        try:
            for signum in installed:
                loop.remove_signal_handler(signum)
            _cancel_all_tasks(loop)
            loop.run_until_complete(loop.shutdown_asyncgens())
            loop.run_until_complete(loop.shutdown_default_executor())
        finally:
            asyncio.set_event_loop(None)
            loop.close()


def run_cancellable(main: Callable[[asyncio.Event], Coroutine[Any, Any, T]]) -> T:
    """
    Run ``main`` with a cancel event wired to process signals.

    If an event loop is already running in this thread (e.g. pytest-asyncio),
    the coroutine is executed in a separate thread with its own event loop.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return _run_in_fresh_loop(main)

    result: T | None = None
    error: BaseException | None = None

    def _runner() -> None:
        nonlocal result, error
        try:
            result = _run_in_fresh_loop(main)
        except BaseException as exc:
            error = exc

    thread = threading.Thread(target=_runner, daemon=True)
    thread.start()
    thread.join()

    if error is not None:
        raise error

    return cast(T, result)


async def cancel_on(event: asyncio.Event, awaitable: Coroutine[Any, Any, T]) -> T:
    """Await ``awaitable``, cancelling it if ``event`` is set first.

    Raises ``asyncio.CancelledError`` when the event wins.
    """
    work = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(event.wait())
    try:
        await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (work, waiter):
            if not task.done():
                task.cancel()
        await asyncio.gather(work, waiter, return_exceptions=True)
    if work.cancelled():
        raise asyncio.CancelledError()
    return work.result()
