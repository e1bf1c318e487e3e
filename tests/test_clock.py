import pytest
from clock import ManualClock, PygameClock


def test_manual_clock_fires_each_due_occurrence():
    clock = ManualClock()
    fired = []
    clock.schedule_repeating(16, lambda: fired.append(clock.now()))
    clock.advance(1000)
    assert len(fired) == 62
    assert fired[0] == 16
    assert fired[-1] == 992
    assert clock.now() == 1000


def test_manual_clock_interleaves_timers_in_time_order():
    clock = ManualClock()
    order = []
    clock.schedule_repeating(300, lambda: order.append("slow"))
    clock.schedule_repeating(200, lambda: order.append("fast"))
    clock.advance(600)
    assert order == ["fast", "slow", "fast", "slow", "fast"]


def test_cancel_is_idempotent_and_stops_firing():
    clock = ManualClock()
    fired = []
    handle = clock.schedule_repeating(10, lambda: fired.append(1))
    clock.advance(30)
    handle.cancel()
    handle.cancel()
    clock.advance(100)
    assert len(fired) == 3
    assert clock.active_timers == []


def test_callback_can_cancel_another_timer():
    clock = ManualClock()
    fired = []
    other = clock.schedule_repeating(50, lambda: fired.append("other"))
    clock.schedule_repeating(50, other.cancel)
    clock.advance(200)
    assert fired == ["other"]


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        ManualClock().schedule_repeating(0, lambda: None)


def test_pygame_clock_fires_once_per_pump_without_catch_up():
    ticks = [0]
    clock = PygameClock(get_ticks=lambda: ticks[0])
    fired = []
    clock.schedule_repeating(16, lambda: fired.append(ticks[0]))

    ticks[0] = 10
    assert clock.pump() == 0
    ticks[0] = 16
    assert clock.pump() == 1

    # a long stall only fires once, then the schedule restarts from now
    ticks[0] = 500
    assert clock.pump() == 1
    ticks[0] = 510
    assert clock.pump() == 0
    ticks[0] = 516
    assert clock.pump() == 1
    assert fired == [16, 500, 516]
