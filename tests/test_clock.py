"""Unit tests for clock.py."""

import pytest

from cycletimer.clock import IDLE, Countdown, CountdownClock, countdown, format_remaining


@pytest.fixture
def clock(store, scheduler):
    with CountdownClock(store, schedule=scheduler) as clock:
        yield clock


class TestFormatting:
    """Test zero-padded display values."""

    def test_padding(self):
        """Single digits are padded to two characters."""
        current = format_remaining(5)
        assert current.minutes == "00"
        assert current.seconds == "05"
        assert current.display == "00:05"

    def test_minutes_and_seconds_split(self):
        """Remaining seconds split into minutes and seconds."""
        assert format_remaining(25 * 60).display == "25:00"
        assert format_remaining(61).display == "01:01"
        assert format_remaining(3599).display == "59:59"

    def test_negative_clamped(self):
        """Overshoot never shows negative time."""
        assert format_remaining(-3).display == "00:00"

    def test_title_only_when_active(self):
        """Title mirrors the countdown while active and is empty when idle."""
        assert format_remaining(90).title == "01:30"
        assert IDLE.title is None

    def test_idle_display(self, store):
        """No active cycle shows 00:00."""
        current = countdown(store)
        assert current == Countdown(minutes="00", seconds="00", is_active=False)


class TestActivation:
    """Test acquiring and releasing the tick."""

    def test_idle_holds_no_tick(self, clock, scheduler):
        """No ticking without an active cycle."""
        assert not clock.is_ticking
        assert scheduler.handles == []

    def test_create_starts_ticking(self, clock, store, scheduler):
        """A new active cycle acquires one one-second tick."""
        cycle_id = store.create_cycle("Task", 1)

        assert clock.is_ticking
        assert clock.observed_id == cycle_id
        assert len(scheduler.pending) == 1
        assert scheduler.pending[0].interval == 1.0

    def test_interrupt_stops_ticking(self, clock, store, scheduler):
        """Interrupting releases the tick immediately."""
        store.create_cycle("Task", 1)
        store.interrupt_active()

        assert not clock.is_ticking
        assert scheduler.pending == []
        assert clock.observed_id is None

    def test_new_cycle_replaces_tick(self, clock, store, scheduler):
        """Switching cycles never leaves two ticks pending."""
        store.create_cycle("First", 5)
        store.create_cycle("Second", 5)

        assert len(scheduler.handles) == 2
        assert scheduler.handles[0].stopped
        assert len(scheduler.pending) == 1

    def test_clock_picks_up_existing_active_cycle(self, store, scheduler):
        """A clock created after a cycle started begins ticking at once."""
        store.create_cycle("Task", 5)

        clock = CountdownClock(store, schedule=scheduler)

        assert clock.is_ticking
        clock.close()

    def test_close_releases_and_unsubscribes(self, store, scheduler):
        """Closing the clock stops the tick and ignores later cycles."""
        clock = CountdownClock(store, schedule=scheduler)
        store.create_cycle("Task", 5)

        clock.close()
        store.create_cycle("Other", 5)

        assert scheduler.pending == []
        assert not clock.is_ticking


class TestTick:
    """Test elapsed-time derivation."""

    def test_elapsed_derived_from_wall_clock(self, clock, store, now):
        """Elapsed comes from now - started_at, not a tick count."""
        store.create_cycle("Task", 25)

        now.at(10)
        clock.tick()
        assert store.seconds_passed == 10

        # Missed ticks (backgrounded) are caught up in one go.
        now.at(125)
        current = clock.tick()
        assert store.seconds_passed == 125
        assert current.display == "22:55"

    def test_partial_seconds_truncate(self, clock, store, now):
        """Elapsed counts whole seconds only."""
        store.create_cycle("Task", 1)
        now.at(1.9)

        assert clock.tick().display == "00:59"

    def test_elapsed_never_decreases(self, clock, store, now):
        """Setting the wall clock back does not add time."""
        store.create_cycle("Task", 5)
        now.at(30)
        clock.tick()

        now.at(20)
        clock.tick()

        assert store.seconds_passed == 30

    def test_one_second_before_end(self, clock, store, now):
        """At T0+59s a one-minute cycle is still active with 00:01 left."""
        cycle_id = store.create_cycle("Task", 1)
        now.at(59)

        current = clock.tick()

        assert current.display == "00:01"
        assert current.is_active
        assert store.active_id == cycle_id
        assert store.get(cycle_id).finished_at is None

    def test_completion_exact(self, clock, store, now, scheduler):
        """At T0+60s a one-minute cycle finishes and shows 00:00."""
        cycle_id = store.create_cycle("Task", 1)
        now.at(60)

        current = clock.tick()

        cycle = store.get(cycle_id)
        assert cycle.finished_at == now()
        assert cycle.interrupted_at is None
        assert current.display == "00:00"
        assert not current.is_active
        assert not clock.is_ticking
        assert scheduler.pending == []

    def test_overshoot_pinned_to_total(self, clock, store, now):
        """Late completion still records exactly the full duration."""
        store.create_cycle("Task", 1)
        seen = []
        store.subscribe(lambda: seen.append(store.seconds_passed))
        now.at(75)

        clock.tick()

        assert seen == [60]

    def test_tick_after_interrupt_is_noop(self, clock, store, now, scheduler):
        """A stale tick after interruption never finishes the cycle."""
        cycle_id = store.create_cycle("Task", 1)
        stale = scheduler.handles[0].callback
        now.at(59)
        store.interrupt_active()
        now.at(60)

        current = stale()

        cycle = store.get(cycle_id)
        assert cycle.interrupted_at is not None
        assert cycle.finished_at is None
        assert current == IDLE
        assert scheduler.pending == []

    def test_tick_when_idle(self, clock):
        """Ticking with no active cycle reports idle."""
        assert clock.tick() == IDLE

    def test_on_tick_callback(self, store, scheduler, now):
        """on_tick receives the recomputed countdown."""
        received = []
        clock = CountdownClock(store, schedule=scheduler, on_tick=received.append)
        store.create_cycle("Task", 2)
        now.at(30)

        clock.tick()
        now.at(120)
        clock.tick()
        clock.close()

        assert [c.display for c in received] == ["01:30", "00:00"]
        assert received[-1].is_active is False

    def test_full_run_with_scheduler_callbacks(self, clock, store, now, scheduler):
        """Driving the scheduled callback each second runs the cycle to the end."""
        cycle_id = store.create_cycle("Task", 1)
        handle = scheduler.pending[0]

        displays = []
        for second in range(1, 61):
            now.at(second)
            displays.append(handle.callback().display)

        assert displays[0] == "00:59"
        assert displays[-2] == "00:01"
        assert displays[-1] == "00:00"
        assert store.get(cycle_id).finished_at is not None
        assert handle.stopped
