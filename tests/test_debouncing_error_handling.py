from __future__ import annotations

import importlib
import logging
from unittest.mock import patch

import pytest

from herochart.debouncing import QueuedDebouncer


class _FakeThreadTimer:
    created: list["_FakeThreadTimer"] = []

    def __init__(self, delay: float, callback):
        self.delay = delay
        self.callback = callback
        self.daemon = False
        self.started = False
        self.cancelled = False
        _FakeThreadTimer.created.append(self)

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True


class _FakeLoopHandle:
    def __init__(self, callback):
        self._callback = callback

    def fire(self) -> None:
        self._callback()


class _FakeAsyncLoop:
    def __init__(self) -> None:
        self.handles: list[_FakeLoopHandle] = []

    def call_later(self, _delay: float, callback):
        handle = _FakeLoopHandle(callback)
        self.handles.append(handle)
        return handle


def test_debouncer_logs_and_keeps_processing_after_callback_error_threading(caplog) -> None:
    state = {"n": 0}

    def _callback(_payload):
        state["n"] += 1
        if state["n"] == 1:
            raise RuntimeError("boom")

    _FakeThreadTimer.created.clear()

    with patch("herochart.debouncing.threading.Timer", _FakeThreadTimer):
        debouncer = QueuedDebouncer(_callback, execute_every_ms=1, drop_overflow=False)
        with caplog.at_level(logging.ERROR, logger="herochart.debouncing"):
            debouncer("first")
            debouncer("second")
            assert len(_FakeThreadTimer.created) == 1
            assert _FakeThreadTimer.created[0].daemon is True

            _FakeThreadTimer.created[0].callback()
            assert len(_FakeThreadTimer.created) == 2
            _FakeThreadTimer.created[1].callback()

    assert state["n"] == 2
    assert "QueuedDebouncer callback failed" in caplog.text


def test_debouncer_logs_and_keeps_processing_after_callback_error_asyncio(caplog) -> None:
    state = {"n": 0}

    def _callback(_payload):
        state["n"] += 1
        if state["n"] == 1:
            raise RuntimeError("boom")

    fake_loop = _FakeAsyncLoop()

    with patch("herochart.debouncing.asyncio.get_running_loop", return_value=fake_loop):
        debouncer = QueuedDebouncer(_callback, execute_every_ms=1, drop_overflow=False)
        with caplog.at_level(logging.ERROR, logger="herochart.debouncing"):
            debouncer("first")
            debouncer("second")
            assert len(fake_loop.handles) == 1

            fake_loop.handles[0].fire()
            assert len(fake_loop.handles) == 2
            fake_loop.handles[1].fire()

    assert state["n"] == 2
    assert "QueuedDebouncer callback failed" in caplog.text


def test_drop_overflow_keeps_only_latest_event() -> None:
    seen: list[str] = []
    _FakeThreadTimer.created.clear()

    with patch("herochart.debouncing.threading.Timer", _FakeThreadTimer):
        debouncer = QueuedDebouncer(seen.append, execute_every_ms=250)
        debouncer("a")
        debouncer("b")
        debouncer("c")
        assert debouncer.pending == 3
        _FakeThreadTimer.created[0].callback()

    assert seen == ["c"]
    assert debouncer.pending == 0
    assert len(_FakeThreadTimer.created) == 1


def test_flush_and_cancel() -> None:
    seen: list[str] = []
    _FakeThreadTimer.created.clear()

    with patch("herochart.debouncing.threading.Timer", _FakeThreadTimer):
        debouncer = QueuedDebouncer(seen.append, execute_every_ms=250, drop_overflow=False)
        debouncer("a")
        debouncer("b")
        debouncer.flush()
        assert seen == ["a", "b"]
        assert _FakeThreadTimer.created[0].cancelled is True

        debouncer("c")
        debouncer.cancel()
        assert debouncer.pending == 0
        assert _FakeThreadTimer.created[-1].cancelled is True
        debouncer.flush()

    assert seen == ["a", "b"]


def test_without_thread_fallback_calls_run_inline_or_on_the_loop() -> None:
    seen: list[str] = []
    _FakeThreadTimer.created.clear()

    with patch("herochart.debouncing.threading.Timer", _FakeThreadTimer):
        debouncer = QueuedDebouncer(seen.append, execute_every_ms=250, thread_fallback=False)
        debouncer("a")
        assert seen == ["a"]
        assert debouncer.pending == 0
        assert _FakeThreadTimer.created == []

        fake_loop = _FakeAsyncLoop()
        with patch("herochart.debouncing.asyncio.get_running_loop", return_value=fake_loop):
            debouncer("b")
            assert seen == ["a"]
            fake_loop.handles[0].fire()
        assert seen == ["a", "b"]
        assert _FakeThreadTimer.created == []


def test_cadence_must_be_positive() -> None:
    with pytest.raises(ValueError, match="execute_every_ms"):
        QueuedDebouncer(print, execute_every_ms=0)


@pytest.mark.parametrize("module_name", ["herochart.debouncing", "herochart.market_data"])
def test_module_logger_installs_one_null_handler_across_reloads(module_name: str) -> None:
    module = importlib.import_module(module_name)
    importlib.reload(module)
    importlib.reload(module)
    handlers = [h for h in module.logger.handlers if isinstance(h, logging.NullHandler)]
    assert len(handlers) == 1
