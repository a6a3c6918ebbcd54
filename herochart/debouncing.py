"""Queued debouncing for bursts of widget relayout events."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Optional, Tuple

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


@dataclass
class _QueuedCall:
    args: Tuple[Any, ...]
    kwargs: dict[str, Any]


class QueuedDebouncer:
    """Queue callback invocations and execute them at a fixed cadence.

    Runs on the active asyncio loop when there is one (Jupyter kernels). Without
    a running loop it falls back to a daemon ``threading.Timer``, or, with
    ``thread_fallback=False``, runs the call inline on the caller's
    thread so the callback never leaves it.

    Parameters
    ----------
    callback:
        Callable to execute from queued events.
    execute_every_ms:
        Execution cadence in milliseconds.
    drop_overflow:
        If ``True``, each tick keeps only the last queued event before executing.
    thread_fallback:
        If ``False``, never start a timer thread; calls made without a running
        loop execute immediately.
    """

    def __init__(
        self,
        callback: Callable[..., Any],
        *,
        execute_every_ms: int,
        drop_overflow: bool = True,
        thread_fallback: bool = True,
    ) -> None:
        if execute_every_ms <= 0:
            raise ValueError("execute_every_ms must be > 0")
        self._callback = callback
        self._execute_every_s = execute_every_ms / 1000.0
        self._drop_overflow = bool(drop_overflow)
        self._thread_fallback = bool(thread_fallback)

        self._queue: Deque[_QueuedCall] = deque()
        self._lock = threading.Lock()
        self._timer: Optional[Any] = None

    @property
    def pending(self) -> int:
        """Return the number of queued calls."""
        with self._lock:
            return len(self._queue)

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            self._queue.append(_QueuedCall(args=args, kwargs=dict(kwargs)))
            if self._timer is not None:
                return
            if self._thread_fallback or _running_loop() is not None:
                self._schedule_next_locked()
                return
        self.flush()

    def flush(self) -> None:
        """Run every queued call now, honoring ``drop_overflow``."""
        while True:
            with self._lock:
                self._cancel_timer_locked()
                call = self._pop_locked()
            if call is None:
                return
            self._run(call)

    def cancel(self) -> None:
        """Drop queued calls and stop the pending timer."""
        with self._lock:
            self._queue.clear()
            self._cancel_timer_locked()

    def _schedule_next_locked(self) -> None:
        delay_s = self._execute_every_s
        loop = _running_loop()
        if loop is None:
            timer = threading.Timer(delay_s, self._on_tick)
            timer.daemon = True
            self._timer = timer
            timer.start()
            return

        self._timer = loop.call_later(delay_s, self._on_tick)

    def _cancel_timer_locked(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None and hasattr(timer, "cancel"):
            timer.cancel()

    def _pop_locked(self) -> Optional[_QueuedCall]:
        if not self._queue:
            return None
        if self._drop_overflow and len(self._queue) > 1:
            last = self._queue[-1]
            self._queue.clear()
            self._queue.append(last)
        return self._queue.popleft()

    def _on_tick(self) -> None:
        with self._lock:
            self._timer = None
            call = self._pop_locked()
            if call is None:
                return
            if self._queue:
                self._schedule_next_locked()
        self._run(call)

    def _run(self, call: _QueuedCall) -> None:
        try:
            self._callback(*call.args, **call.kwargs)
        except Exception:
            logger.exception("QueuedDebouncer callback failed")


__all__ = ["QueuedDebouncer"]
