"""Tests for the carousel autoplay timer."""

import threading
import time

import pytest
from storefront_client.autoplay import AutoplayScheduler
from storefront_client.selection import SelectionEngine


class TickRecorder:
    def __init__(self):
        self.ticks = []
        self.event = threading.Event()

    def __call__(self, still_due):
        self.ticks.append(still_due)
        self.event.set()


@pytest.fixture()
def recorder():
    return TickRecorder()


def test_interval_must_be_positive(recorder):
    with pytest.raises(ValueError):
        AutoplayScheduler(recorder, interval=0)


def test_ticks_repeat_until_stopped(recorder):
    scheduler = AutoplayScheduler(recorder, interval=0.02)
    scheduler.start()
    try:
        deadline = time.monotonic() + 2
        while len(recorder.ticks) < 3 and time.monotonic() < deadline:
            time.sleep(0.01)
        assert len(recorder.ticks) >= 3
    finally:
        scheduler.stop()

    assert not scheduler.running
    count = len(recorder.ticks)
    time.sleep(0.1)
    assert len(recorder.ticks) == count


def test_restart_postpones_next_tick(recorder):
    scheduler = AutoplayScheduler(recorder, interval=0.5)
    scheduler.start()
    try:
        for _ in range(6):
            time.sleep(0.05)
            scheduler.restart()
        assert recorder.ticks == []
        assert recorder.event.wait(2)
    finally:
        scheduler.stop()


def test_start_twice_keeps_single_timer(recorder):
    scheduler = AutoplayScheduler(recorder, interval=0.1)
    scheduler.start()
    first_thread = scheduler._thread
    scheduler.start()
    try:
        assert scheduler._thread is first_thread
    finally:
        scheduler.stop()
    assert not first_thread.is_alive()


def test_restart_supersedes_pending_tick(recorder):
    scheduler = AutoplayScheduler(recorder, interval=0.02)
    scheduler.start()
    try:
        assert recorder.event.wait(2)
        still_due = recorder.ticks[0]
        scheduler.restart()
        assert still_due() is False
    finally:
        scheduler.stop()


def test_restart_when_stopped_is_noop(recorder):
    scheduler = AutoplayScheduler(recorder, interval=0.02)
    scheduler.restart()
    time.sleep(0.05)
    assert not scheduler.running
    assert recorder.ticks == []


def test_failing_tick_keeps_timer_alive():
    calls = []

    def flaky(still_due):
        calls.append(True)
        if len(calls) == 1:
            raise RuntimeError("boom")

    scheduler = AutoplayScheduler(flaky, interval=0.02)
    scheduler.start()
    try:
        deadline = time.monotonic() + 2
        while len(calls) < 2 and time.monotonic() < deadline:
            time.sleep(0.01)
        assert len(calls) >= 2
    finally:
        scheduler.stop()


def test_autoplay_drives_display_but_not_order(products):
    engine = SelectionEngine()
    engine.load_catalog(products)
    engine.choose_product(2)
    scheduler = AutoplayScheduler(engine.autoplay_tick, interval=0.02)
    engine.on_user_action = scheduler.restart
    scheduler.start()
    try:
        deadline = time.monotonic() + 2
        while engine.state.display_index == 1 and time.monotonic() < deadline:
            time.sleep(0.01)
    finally:
        scheduler.stop()

    assert engine.state.display_index != 1
    assert engine.state.order_product_id == 2
