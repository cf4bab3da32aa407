"""Events and their lifecycle states."""

from dataclasses import InitVar, dataclass
from enum import Enum
from typing import Any, Callable, Optional

from dataclasses_json import dataclass_json


class EventState(Enum):
    """Lifecycle states of an event.

    Events move strictly forward: Fired -> Scheduled -> Pending -> Completed.
    A process that is still parked when the run ends keeps the Pending state.
    """
    FIRED = "Fired"
    SCHEDULED = "Scheduled"
    PENDING = "Pending"
    COMPLETED = "Completed"
    TERMINATED = "Terminated"


@dataclass_json
@dataclass(eq=False)
class Event:
    """A schedulable unit of work: a record plus an attached process.

    Attributes:
        id: Identifier, unique within the owning simulation
        scheduled_at: Due time; the clock jumps here when the event is dispatched
        fired_at: Simulation time at which the event was created
        status: Current lifecycle state
        finished_at: Simulation time at which the process returned
        item: Payload carried by the event; set from the process result
        process: Generator function ``process(sim, event)`` driven by the engine
    """
    id: int
    scheduled_at: float
    fired_at: float = 0.0
    status: EventState = EventState.FIRED
    finished_at: Optional[float] = None
    item: Any = None
    process: InitVar[Optional[Callable]] = None

    def __post_init__(self, process):
        """Attach the process and the engine handles.

        Due times are checked on admission, not here: scheduling an event
        earlier than the clock raises CausalityViolation.
        """
        # Kept off the dataclass fields so they are never serialised
        self.process = process
        self.task = None
        self.resumes = None

    def is_done(self) -> bool:
        """Check if the attached process has returned."""
        return self.status == EventState.COMPLETED

    def is_parked(self) -> bool:
        """Check if the event was dispatched and its process is still waiting."""
        return self.status == EventState.PENDING and self.task is not None
