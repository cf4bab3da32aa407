"""Core simulation components."""

from .event import Event, EventState
from .event_queue import EventQueue
from .exceptions import CausalityViolation
from .process import Task, TaskState, handle_event, timeout
from .simulation import (
    RunStats,
    Simulation,
    create_event,
    initialize_simulation,
    run_simulation,
    schedule_event,
)

__all__ = [
    "Event",
    "EventState",
    "EventQueue",
    "CausalityViolation",
    "Task",
    "TaskState",
    "handle_event",
    "timeout",
    "RunStats",
    "Simulation",
    "create_event",
    "initialize_simulation",
    "run_simulation",
    "schedule_event",
]
