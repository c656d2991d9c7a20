"""Countdown derived from the active cycle's start time."""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from .log import get_logger
from .store import CycleStore

logger = get_logger(__name__)

TICK_INTERVAL = 1.0


class TickHandle(Protocol):
    """A scheduled repeating tick that can be cancelled."""

    def stop(self) -> None: ...


Schedule = Callable[[float, Callable[[], None]], TickHandle]


@dataclass(frozen=True)
class Countdown:
    """Remaining time of the active cycle, ready for display."""

    minutes: str
    seconds: str
    is_active: bool

    @property
    def display(self) -> str:
        return f"{self.minutes}:{self.seconds}"

    @property
    def title(self) -> Optional[str]:
        """Window title while a cycle runs, ``None`` when idle."""
        return self.display if self.is_active else None


IDLE = Countdown(minutes="00", seconds="00", is_active=False)


def format_remaining(remaining_seconds: int) -> Countdown:
    """Split remaining seconds into zero-padded minutes and seconds."""
    remaining = max(0, remaining_seconds)
    minutes, seconds = divmod(remaining, 60)
    return Countdown(minutes=f"{minutes:02d}", seconds=f"{seconds:02d}", is_active=True)


def countdown(store: CycleStore) -> Countdown:
    """Derive the display values from the store's current state."""
    cycle = store.active_cycle
    if cycle is None:
        return IDLE
    return format_remaining(cycle.total_seconds - store.seconds_passed)


class CountdownClock:
    """Ticks while a cycle is active and finishes it when time is up.

    Elapsed time is re-derived from the cycle's start on every tick, so
    late or skipped ticks correct themselves. Exactly one tick handle is
    held while a cycle is active and none while idle.
    """

    def __init__(
        self,
        store: CycleStore,
        schedule: Schedule,
        interval: float = TICK_INTERVAL,
        on_tick: Optional[Callable[[Countdown], None]] = None,
    ):
        """Initialize the clock and start observing the store.

        Args:
            store: Store holding the active cycle.
            schedule: ``schedule(interval, callback)`` starts a repeating
                tick and returns a handle with ``stop()``.
            interval: Seconds between ticks.
            on_tick: Called with the fresh countdown after every tick.
        """
        self.store = store
        self.schedule = schedule
        self.interval = interval
        self.on_tick = on_tick
        self._handle: Optional[TickHandle] = None
        self._observed_id: Optional[str] = None
        self._closed = False
        self._unsubscribe = store.subscribe(self.sync)
        self.sync()

    @property
    def is_ticking(self) -> bool:
        """Whether a tick handle is currently held."""
        return self._handle is not None

    @property
    def observed_id(self) -> Optional[str]:
        return self._observed_id

    def sync(self) -> None:
        """Follow the store's active cycle, restarting the tick on change."""
        if self._closed:
            return
        active_id = self.store.active_id
        if active_id == self._observed_id:
            return
        self._release()
        self._observed_id = active_id
        if active_id is not None:
            self._handle = self.schedule(self.interval, self.tick)
            logger.debug("clock_started", cycle_id=active_id)

    def tick(self) -> Countdown:
        """Re-derive elapsed time and finish the cycle when it runs out."""
        cycle = self.store.active_cycle
        if cycle is None or cycle.id != self._observed_id:
            # Stale tick: the cycle it belonged to is no longer active.
            self.sync()
            return countdown(self.store)

        elapsed = int((self.store.now() - cycle.started_at).total_seconds())
        # Never count backwards if the wall clock is set back.
        elapsed = max(elapsed, self.store.seconds_passed)
        total = cycle.total_seconds
        if elapsed >= total:
            self.store.set_seconds_passed(total)
            self.store.mark_active_finished()
            self._release()
        else:
            self.store.set_seconds_passed(elapsed)

        current = countdown(self.store)
        if self.on_tick is not None:
            self.on_tick(current)
        return current

    def close(self) -> None:
        """Stop ticking and stop observing the store."""
        self._release()
        self._observed_id = None
        self._closed = True
        self._unsubscribe()

    def _release(self) -> None:
        if self._handle is None:
            return
        self._handle.stop()
        self._handle = None
        logger.debug("clock_stopped", cycle_id=self._observed_id)

    def __enter__(self) -> "CountdownClock":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
