from __future__ import annotations

import asyncio

from searchlib.debounce import Debouncer


def test_effect_fires_after_quiet_period(scheduler):
    fired = []
    debouncer = Debouncer(scheduler)
    debouncer.schedule(lambda: fired.append("a"), 20)

    scheduler.advance(0.010)
    assert fired == []
    assert debouncer.pending

    scheduler.advance(0.015)
    assert fired == ["a"]
    assert not debouncer.pending


def test_superseded_effects_never_fire(scheduler):
    fired = []
    debouncer = Debouncer(scheduler)
    debouncer.schedule(lambda: fired.append("a"), 20)
    scheduler.advance(0.010)
    debouncer.schedule(lambda: fired.append("ab"), 20)
    scheduler.advance(0.015)
    assert fired == []

    scheduler.advance(0.010)
    assert fired == ["ab"]
    assert scheduler.pending == 0


def test_zero_delay_is_deferred(scheduler):
    fired = []
    debouncer = Debouncer(scheduler)
    debouncer.schedule(lambda: fired.append(1), 0)
    assert fired == []

    scheduler.advance(0)
    assert fired == [1]


def test_cancel(scheduler):
    fired = []
    debouncer = Debouncer(scheduler)
    assert debouncer.cancel() is False

    debouncer.schedule(lambda: fired.append(1), 5)
    assert debouncer.cancel() is True
    scheduler.advance(1)
    assert fired == []


def test_negative_delay_treated_as_zero(scheduler):
    fired = []
    debouncer = Debouncer(scheduler)
    debouncer.schedule(lambda: fired.append(1), -50)
    scheduler.advance(0)
    assert fired == [1]


def test_handle_ignoring_cancel_does_not_run_superseded_effect(scheduler):
    class StubbornHandle:
        def cancel(self):
            pass

    class StubbornScheduler:
        def __init__(self):
            self.callbacks = []

        def call_later(self, delay, callback):
            self.callbacks.append(callback)
            return StubbornHandle()

    stubborn = StubbornScheduler()
    fired = []
    debouncer = Debouncer(stubborn)
    debouncer.schedule(lambda: fired.append("old"), 10)
    debouncer.schedule(lambda: fired.append("new"), 10)
    for callback in stubborn.callbacks:
        callback()
    assert fired == ["new"]


def test_event_loop_scheduler():
    fired = []

    async def main():
        debouncer = Debouncer()
        debouncer.schedule(lambda: fired.append("first"), 0)
        debouncer.schedule(lambda: fired.append("second"), 0)
        assert fired == []
        await asyncio.sleep(0.01)

    asyncio.run(main())
    assert fired == ["second"]
