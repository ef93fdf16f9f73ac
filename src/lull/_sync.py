"""Background event loop used when wrappers are called from synchronous code.

A wrapper's state machine must only ever run on one thread. When a wrapper
is first used outside a running event loop, its scheduler binds to the shared
loop thread below, and every call is marshalled onto that thread.
"""

import asyncio
import threading
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any


def call_in_loop(loop: asyncio.AbstractEventLoop, func: Callable[[], Any]) -> Any:
    """Run *func* on *loop*'s thread and block the calling thread for its result.

    Exceptions raised by *func* are re-raised in the calling thread.
    """
    future: Future[Any] = Future()

    def runner() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(func())
        except BaseException as exc:
            future.set_exception(exc)

    loop.call_soon_threadsafe(runner)
    return future.result()


class _EventLoopThread:
    """Manages a background event loop for sync-to-async bridging."""

    __slots__ = ("_loop", "_started", "_thread")

    def __init__(self) -> None:
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._started = threading.Event()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        """The background loop, starting the thread if needed."""
        self.start()
        assert self._loop is not None
        return self._loop

    def start(self) -> None:
        """Start the background event loop thread (idempotent).

        Returns once the loop is running.
        """
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="lull-loop", daemon=True)
        self._thread.start()
        self._started.wait()

    def _run(self) -> None:
        loop = self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        loop.call_soon(self._started.set)
        try:
            loop.run_forever()
        finally:
            loop.close()

    def in_loop_thread(self) -> bool:
        return self._thread is not None and threading.current_thread() is self._thread

    def call(self, func: Callable[[], Any]) -> Any:
        """Run *func* on the loop thread and block for its result.

        Calls made from the loop thread itself run inline.
        """
        if self.in_loop_thread():
            return func()
        return call_in_loop(self.loop, func)

    def shutdown(self) -> None:
        """Stop and close the background event loop and join the thread."""
        if self._loop is not None and not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._loop.stop)
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None
            self._loop = None
            self._started.clear()


# Module-level shared event loop thread for sync callers
_shared_loop = _EventLoopThread()


def get_shared_loop() -> _EventLoopThread:
    """Return the shared background event loop thread, starting it if needed."""
    _shared_loop.start()
    return _shared_loop
