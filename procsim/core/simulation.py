"""Simulation container and scheduler."""

import itertools
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from .event import Event, EventState
from .event_queue import EventQueue
from .exceptions import CausalityViolation
from .process import handle_event
from ..utils.logger import setup_logger


@dataclass
class RunStats:
    """Statistics about a simulation run.

    Attributes:
        duration: Wall-clock seconds the run took
    """
    duration: float


class Simulation:
    """Owns the virtual clock and the queue of admitted events.

    The scheduler repeatedly dispatches the earliest due event to the execution
    engine. Events due at the same time run in the order they were admitted.
    Processes may admit new events while they run.
    """

    def __init__(self, start_time: float = 0.0):
        """Initialize simulation.

        Args:
            start_time: Initial value of the virtual clock
        """
        if start_time < 0:
            raise ValueError("Simulation start time cannot be negative")

        self.logger = setup_logger(self.__class__.__name__)
        self.current_time = start_time
        self.events: List[Event] = []
        self.event_queue = EventQueue()
        self._ids = itertools.count(1)

    def create_event(
        self,
        scheduled_at: float,
        process: Optional[Callable] = None,
        item: Any = None,
    ) -> Event:
        """Build a new event in the Fired state. The queue is not touched."""
        return Event(
            id=next(self._ids),
            scheduled_at=scheduled_at,
            fired_at=self.current_time,
            status=EventState.FIRED,
            item=item,
            process=process,
        )

    def schedule(self, event: Event) -> "Simulation":
        """Admit an event into the queue.

        Args:
            event: Event in the Fired state

        Returns:
            This simulation

        Raises:
            CausalityViolation: If the event is due before the current time
            ValueError: If the event was already admitted
        """
        if event.scheduled_at < self.current_time:
            raise CausalityViolation(event, self.current_time)
        if event.status != EventState.FIRED:
            raise ValueError(
                f"Event {event.id} was already admitted (status: {event.status.value})"
            )

        event.status = EventState.SCHEDULED
        self.events.append(event)
        self.event_queue.push(event)
        return self

    def run(self, until: Optional[float] = None) -> RunStats:
        """Dispatch events until the queue is exhausted.

        Args:
            until: If given, events due after this time stay in the queue

        Returns:
            Run statistics
        """
        start_time = time.perf_counter()
        self.logger.info(f"Starting simulation at t={self.current_time}")

        dispatched = 0
        while not self.event_queue.is_empty():
            if until is not None and self.event_queue.peek().scheduled_at > until:
                self.logger.info(f"Reached time horizon {until}")
                break

            event = self.event_queue.pop()
            self.current_time = event.scheduled_at
            event.status = EventState.PENDING
            self.logger.debug(f"[{self.current_time}] Dispatching event {event.id}")

            handle_event(self, event)
            dispatched += 1

        elapsed_time = time.perf_counter() - start_time
        self.logger.info(
            f"Simulation ended at t={self.current_time} after {dispatched} events "
            f"({elapsed_time:.4f}s)"
        )
        return RunStats(duration=elapsed_time)

    def parked_events(self) -> List[Event]:
        """Return dispatched events whose process is still waiting."""
        return [event for event in self.events if event.is_parked()]

    def __repr__(self) -> str:
        return (
            f"Simulation(current_time={self.current_time}, events={len(self.events)}, "
            f"queued={len(self.event_queue)})"
        )


def initialize_simulation(config: Optional[Dict] = None) -> Simulation:
    """Create a simulation with the clock at ``simulation.start_time`` (default 0)."""
    sim_config = (config or {}).get('simulation') or {}
    return Simulation(start_time=sim_config.get('start_time', 0.0))


def create_event(
    sim: Simulation,
    scheduled_at: float,
    process: Optional[Callable] = None,
    item: Any = None,
) -> Event:
    """Create an event due at ``scheduled_at`` running ``process``."""
    return sim.create_event(scheduled_at, process, item)


def schedule_event(sim: Simulation, event: Event) -> Simulation:
    """Admit ``event`` into ``sim``; raises CausalityViolation if it is in the past."""
    return sim.schedule(event)


def run_simulation(
    sim: Simulation, until: Optional[float] = None
) -> Tuple[Simulation, RunStats]:
    """Run ``sim`` to exhaustion (or to ``until``) and return it with run statistics."""
    stats = sim.run(until=until)
    return sim, stats
