"""Tests for the reader/writer lock."""

from __future__ import annotations

import threading
import time

import pytest

from anirecog.shared.utils import ReadWriteLock

WAIT = 0.05
TIMEOUT = 5.0


def _start(target) -> threading.Thread:
    thread = threading.Thread(target=target, daemon=True)
    thread.start()
    return thread


class TestReadWriteLock:
    def test_readers_share_the_lock(self):
        lock = ReadWriteLock()
        entered = threading.Event()

        def reader() -> None:
            with lock.read_locked():
                entered.set()

        with lock.read_locked():
            thread = _start(reader)
            assert entered.wait(TIMEOUT)
        thread.join(TIMEOUT)

    def test_writer_waits_for_readers(self):
        lock = ReadWriteLock()
        written = threading.Event()

        def writer() -> None:
            with lock.write_locked():
                written.set()

        with lock.read_locked():
            thread = _start(writer)
            assert not written.wait(WAIT)

        assert written.wait(TIMEOUT)
        thread.join(TIMEOUT)

    def test_readers_wait_for_writer(self):
        lock = ReadWriteLock()
        read = threading.Event()

        def reader() -> None:
            with lock.read_locked():
                read.set()

        with lock.write_locked():
            thread = _start(reader)
            assert not read.wait(WAIT)

        assert read.wait(TIMEOUT)
        thread.join(TIMEOUT)

    def test_waiting_writer_blocks_new_readers(self):
        lock = ReadWriteLock()
        order: list[str] = []
        writer_waiting = threading.Event()

        def writer() -> None:
            writer_waiting.set()
            with lock.write_locked():
                order.append("writer")

        def reader() -> None:
            with lock.read_locked():
                order.append("reader")

        lock.acquire_read()
        writer_thread = _start(writer)
        assert writer_waiting.wait(TIMEOUT)
        deadline = time.monotonic() + TIMEOUT
        while lock._writers_waiting == 0 and time.monotonic() < deadline:
            time.sleep(0.001)
        reader_thread = _start(reader)
        reader_thread.join(WAIT)
        lock.release_read()

        writer_thread.join(TIMEOUT)
        reader_thread.join(TIMEOUT)
        assert order == ["writer", "reader"]

    def test_lock_released_on_exception(self):
        lock = ReadWriteLock()

        with pytest.raises(RuntimeError), lock.write_locked():
            raise RuntimeError("boom")

        acquired = threading.Event()
        thread = _start(lambda: (lock.acquire_write(), acquired.set(), lock.release_write()))
        assert acquired.wait(TIMEOUT)
        thread.join(TIMEOUT)
