"""Cycle history and the active-cycle pointer."""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Callable, Dict, List, Optional, Tuple

from .errors import ValidationError
from .forms import validate_new_cycle
from .log import get_logger

logger = get_logger(__name__)

Listener = Callable[[], None]
Now = Callable[[], datetime]


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class CycleStatus(Enum):
    """Lifecycle status of a cycle."""
    ACTIVE = auto()
    FINISHED = auto()
    INTERRUPTED = auto()


@dataclass(frozen=True)
class Cycle:
    """One planned focus session.

    A cycle is terminal once ``interrupted_at`` or ``finished_at`` is set;
    the two are never both set.
    """

    id: str
    task: str
    minutes_amount: int
    started_at: datetime
    interrupted_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def total_seconds(self) -> int:
        return self.minutes_amount * 60

    @property
    def is_terminal(self) -> bool:
        return self.interrupted_at is not None or self.finished_at is not None

    @property
    def status(self) -> CycleStatus:
        if self.finished_at is not None:
            return CycleStatus.FINISHED
        if self.interrupted_at is not None:
            return CycleStatus.INTERRUPTED
        return CycleStatus.ACTIVE


class CycleStore:
    """Append-only cycle history with at most one active cycle.

    Listeners registered with :meth:`subscribe` run after every mutation so
    derived state can be recomputed explicitly.
    """

    def __init__(self, now: Optional[Now] = None):
        """Initialize the store.

        Args:
            now: Wall-clock source, defaults to :func:`utc_now`.
        """
        self._now = now or utc_now
        self._cycles: List[Cycle] = []
        self._index: Dict[str, int] = {}
        self._active_id: Optional[str] = None
        self._seconds_passed = 0
        self._listeners: List[Listener] = []

    @property
    def history(self) -> Tuple[Cycle, ...]:
        """All cycles in insertion order."""
        return tuple(self._cycles)

    @property
    def active_id(self) -> Optional[str]:
        return self._active_id

    @property
    def active_cycle(self) -> Optional[Cycle]:
        """The cycle currently counting down, if any."""
        if self._active_id is None:
            return None
        return self._cycles[self._index[self._active_id]]

    @property
    def seconds_passed(self) -> int:
        """Elapsed seconds of the active cycle, as last derived by the clock."""
        return self._seconds_passed

    def now(self) -> datetime:
        return self._now()

    def get(self, cycle_id: str) -> Optional[Cycle]:
        position = self._index.get(cycle_id)
        return None if position is None else self._cycles[position]

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Run ``listener`` after every mutation.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def create_cycle(self, task: str, minutes_amount: int) -> str:
        """Start a new cycle and make it active.

        A cycle that is still active is interrupted first, at the same
        instant the new one starts.

        Raises:
            ValidationError: If the task is empty or the minutes fall
                outside 1..60. The store is left untouched.
        """
        try:
            form = validate_new_cycle({"task": task, "minutes_amount": minutes_amount}, strict=True)
        except ValidationError as exc:
            logger.info("cycle_rejected", errors=exc.errors)
            raise

        now = self._now()
        if self._active_id is not None:
            self._close_active(interrupted_at=now)

        cycle = Cycle(
            id=uuid.uuid4().hex,
            task=form.task,
            minutes_amount=form.minutes_amount,
            started_at=now,
        )
        self._index[cycle.id] = len(self._cycles)
        self._cycles.append(cycle)
        self._active_id = cycle.id
        self._seconds_passed = 0
        logger.info("cycle_created", cycle_id=cycle.id, task=cycle.task, minutes=cycle.minutes_amount)
        self._notify()
        return cycle.id

    def interrupt_active(self) -> None:
        """Stop the active cycle early. No-op when nothing is active."""
        if self._active_id is None:
            return
        self._close_active(interrupted_at=self._now())
        self._notify()

    def mark_active_finished(self) -> None:
        """Mark the active cycle as completed. No-op when nothing is active.

        The guard makes a late tick racing an interruption harmless.
        """
        if self._active_id is None:
            return
        self._close_active(finished_at=self._now())
        self._notify()

    def set_seconds_passed(self, seconds: int) -> None:
        """Record the elapsed seconds derived for the active cycle."""
        if self._active_id is None:
            return
        self._seconds_passed = max(0, seconds)

    def _close_active(
        self,
        interrupted_at: Optional[datetime] = None,
        finished_at: Optional[datetime] = None,
    ) -> None:
        position = self._index[self._active_id]
        cycle = replace(self._cycles[position], interrupted_at=interrupted_at, finished_at=finished_at)
        self._cycles[position] = cycle
        self._active_id = None
        if finished_at is not None:
            logger.info("cycle_finished", cycle_id=cycle.id, task=cycle.task)
        else:
            logger.info("cycle_interrupted", cycle_id=cycle.id, task=cycle.task)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
