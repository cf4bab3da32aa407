"""Process execution engine.

A process is a generator function ``process(sim, event)``. The engine drives it
with ``send`` until it yields a wait request. Store requests are handed to the
store, which either resolves them on the spot (the process keeps running in the
same turn) or parks the task in one of its queues. A parked task is resumed only
by a matching store operation, never by the clock. Timeouts park the task behind
a wake-up event that the scheduler dispatches like any other.
"""

import inspect
from collections import deque
from enum import Enum
from typing import Any, Optional, Tuple

from .event import Event, EventState
from ..utils.logger import setup_logger


class TaskState(Enum):
    """Where a task currently is in its resumption cycle."""
    RUNNING = "running"
    WAITING_ON_STORE = "waiting_on_store"
    WAITING_ON_TIMEOUT = "waiting_on_timeout"
    COMPLETED = "completed"


class WaitRequest:
    """Base class for the objects a process yields to the engine."""


class StoreGet(WaitRequest):
    """Request the oldest available item of a store."""

    def __init__(self, store):
        self.store = store

    def __repr__(self) -> str:
        return f"StoreGet(store={self.store.id})"


class StorePut(WaitRequest):
    """Deposit an item into a store."""

    def __init__(self, store, item: Any, blocking: bool = False):
        self.store = store
        self.item = item
        self.blocking = blocking

    def __repr__(self) -> str:
        return f"StorePut(store={self.store.id}, item={self.item!r}, blocking={self.blocking})"


class Timeout(WaitRequest):
    """Suspend the process for a stretch of virtual time."""

    def __init__(self, delay: float):
        if delay < 0:
            raise ValueError("Timeout delay cannot be negative")
        self.delay = delay

    def __repr__(self) -> str:
        return f"Timeout(delay={self.delay})"


class Task:
    """Drives the process attached to one event.

    The task owns the process generator once the event has been dispatched.
    Stores only keep a reference to it while it waits in one of their queues.
    """

    def __init__(self, sim, event: Event):
        """Initialize task.

        Args:
            sim: Simulation the event was dispatched by
            event: Event whose process this task runs
        """
        self.sim = sim
        self.event = event
        self.state = TaskState.RUNNING
        self.logger = setup_logger(self.__class__.__name__)
        self._coroutine = None
        self._handoff: Optional[Tuple["Task", Any]] = None

    def start(self) -> None:
        """Call the event's process and run it up to its first suspension."""
        process = self.event.process
        if process is None:
            self._complete(None)
            return

        outcome = process(self.sim, self.event)
        if not inspect.isgenerator(outcome):
            # Plain callables finish within the dispatch turn
            self._complete(outcome)
            return

        self._coroutine = outcome
        self.resume()

    def resume(self, value: Any = None) -> None:
        """Continue the process until it parks or returns.

        Tasks woken by a store match run before the task that woke them
        continues. They are kept on a local stack rather than resumed
        recursively, so arbitrarily long chains of handoffs run in constant
        Python stack depth.

        Args:
            value: Value handed back to the process at its suspension point
        """
        ready = deque([(self, value)])
        while ready:
            task, value = ready.pop()
            task._step(value, ready)

    def hand_off(self, task: "Task", value: Any = None) -> None:
        """Let a parked task run before this one continues.

        Called by a store when an operation of this task matches a request
        that ``task`` left behind.
        """
        self._handoff = (task, value)

    def _step(self, value: Any, ready: deque) -> None:
        """Advance the process until it parks, returns, or wakes another task."""
        self.state = TaskState.RUNNING
        while True:
            try:
                request = self._coroutine.send(value)
            except StopIteration as stop:
                self._complete(stop.value)
                return

            resolved, value = self._handle_yield(request)
            if self._handoff is not None:
                woken, self._handoff = self._handoff, None
                if resolved:
                    ready.append((self, value))
                # Popped first: the woken task runs before this one continues
                ready.append(woken)
                return
            if not resolved:
                return

    def _handle_yield(self, request: Any) -> Tuple[bool, Any]:
        """Interpret a wait request yielded by the process.

        Returns:
            Tuple of (resolved now, value to send back to the process)
        """
        if isinstance(request, StoreGet):
            resolved, item = request.store.request_get(self)
            if not resolved:
                self.state = TaskState.WAITING_ON_STORE
                self.logger.debug(
                    f"[{self.sim.current_time}] Event {self.event.id} waiting on "
                    f"store {request.store.id} (get)"
                )
            return resolved, item

        elif isinstance(request, StorePut):
            resolved = request.store.request_put(self, request.item, request.blocking)
            if not resolved:
                self.state = TaskState.WAITING_ON_STORE
                self.logger.debug(
                    f"[{self.sim.current_time}] Event {self.event.id} waiting on "
                    f"store {request.store.id} (blocking put)"
                )
            return resolved, None

        elif isinstance(request, Timeout):
            wake_up = self.sim.create_event(self.sim.current_time + request.delay)
            wake_up.resumes = self
            self.sim.schedule(wake_up)
            self.state = TaskState.WAITING_ON_TIMEOUT
            return False, None

        raise TypeError(
            f"Unknown wait request {request!r} yielded by event {self.event.id}"
        )

    def _complete(self, result: Any) -> None:
        self.state = TaskState.COMPLETED
        self.event.status = EventState.COMPLETED
        self.event.finished_at = self.sim.current_time
        if isinstance(result, tuple) and len(result) == 2 \
                and result[0] is self.sim and result[1] is self.event:
            # ``return (yield from get(...))`` hands back the context, not a payload
            result = None
        if result is not None:
            self.event.item = result
        self.logger.debug(f"[{self.sim.current_time}] Event {self.event.id} completed")


def handle_event(sim, event: Event) -> Event:
    """Run the process of a dispatched event up to its next suspension point.

    Args:
        sim: Simulation whose clock is already at ``event.scheduled_at``
        event: Dispatched event (status Pending)

    Returns:
        The same event, completed or still pending
    """
    if event.resumes is not None:
        # Wake-up event of a process suspended in timeout()
        event.status = EventState.COMPLETED
        event.finished_at = sim.current_time
        event.resumes.resume()
        return event

    event.task = Task(sim, event)
    event.task.start()
    return event


def timeout(sim, event: Event, delay: float):
    """Suspend the calling process for ``delay`` units of virtual time.

    Use from a process as ``sim, event = yield from timeout(sim, event, 5)``.
    """
    yield Timeout(delay)
    return sim, event
