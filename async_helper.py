"""
Runs async database work from the synchronous pygame loop.
A single event loop lives in a daemon thread; callers block on the result.
"""
from __future__ import annotations
import asyncio
import threading
from typing import Any, Coroutine

DEFAULT_TIMEOUT = 10.0

_async_loop: asyncio.AbstractEventLoop | None = None
_async_thread: threading.Thread | None = None


def start_async_loop() -> asyncio.AbstractEventLoop:
    """Start the dedicated event loop thread (idempotent)."""
    global _async_loop, _async_thread
    if _async_loop is not None:
        return _async_loop

    ready = threading.Event()
    loop = asyncio.new_event_loop()

    def run_loop():
        asyncio.set_event_loop(loop)
        loop.call_soon(ready.set)
        loop.run_forever()

    _async_thread = threading.Thread(target=run_loop, name="arcade-db", daemon=True)
    _async_thread.start()
    ready.wait()
    _async_loop = loop
    return loop


def run_async(coro: Coroutine, timeout: float = DEFAULT_TIMEOUT) -> Any:
    """Run a coroutine on the background loop and wait for its result."""
    loop = start_async_loop()
    future = asyncio.run_coroutine_threadsafe(coro, loop)
    return future.result(timeout=timeout)


def stop_async_loop() -> None:
    global _async_loop, _async_thread
    if _async_loop is None:
        return
    _async_loop.call_soon_threadsafe(_async_loop.stop)
    if _async_thread is not None:
        _async_thread.join(timeout=1.0)
    _async_loop = None
    _async_thread = None
