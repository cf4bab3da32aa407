"""procsim: coroutine-based discrete-event simulation kernel."""

from .core.simulation import (
    RunStats,
    Simulation,
    create_event,
    initialize_simulation,
    run_simulation,
    schedule_event,
)
from .core.event import Event, EventState
from .core.exceptions import CausalityViolation
from .core.process import handle_event, timeout
from .resources.store import Store, create_store, get, put
from .utils.logger import setup_logger

__version__ = "0.1.0"
__all__ = [
    "Simulation",
    "RunStats",
    "Event",
    "EventState",
    "CausalityViolation",
    "initialize_simulation",
    "create_event",
    "schedule_event",
    "run_simulation",
    "handle_event",
    "timeout",
    "Store",
    "create_store",
    "get",
    "put",
    "setup_logger",
]
