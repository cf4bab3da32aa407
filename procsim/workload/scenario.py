"""Producer/consumer scenario built from a configuration dictionary."""

import json
from typing import Any, Dict, List

import numpy as np

from ..core.event import Event
from ..core.simulation import (
    create_event,
    initialize_simulation,
    run_simulation,
    schedule_event,
)
from ..resources.store import create_store, get, put
from ..utils.logger import setup_logger
from .arrival_process import ArrivalProcess


class Scenario:
    """A set of producers and consumers sharing one store.

    Each producer deposits one item; each consumer takes one. Arrival times for
    both roles come from the ``workload`` section of the configuration.
    """

    def __init__(self, config: Dict):
        """Initialize scenario.

        Args:
            config: Configuration dictionary
        """
        self.config = config
        self.logger = setup_logger(self.__class__.__name__)

        sim_config = config.get('simulation') or {}
        scenario_config = config.get('scenario') or {}
        store_config = config.get('store') or {}

        self.until = sim_config.get('until')
        self.rng = np.random.default_rng(sim_config.get('random_seed', 42))

        self.item = scenario_config.get('item', 'item')
        self.blocking = bool(scenario_config.get('blocking', False))

        self.sim = initialize_simulation(config)
        self.store = create_store(store_config.get('initial_items'), store_config.get('id'))

        self.producers: List[Event] = []
        self.consumers: List[Event] = []
        self._built = False

    def _arrivals(self, role: str) -> List[float]:
        role_config = (self.config.get('workload') or {}).get(role) or {}
        arrival_process = ArrivalProcess(
            role_config.get('type', 'poisson'),
            rate=role_config.get('rate', 1.0),
            times=role_config.get('times'),
            rng=self.rng,
        )
        start_time = role_config.get('start_time', self.sim.current_time)
        return arrival_process.generate_arrivals(start_time, role_config.get('count', 0))

    def _producer(self, sim, event):
        self.logger.debug(f"[{sim.current_time}] Producer {event.id} puts {event.item!r}")
        sim, event = yield from put(sim, event, self.store, event.item, blocking=self.blocking)
        self.logger.debug(f"[{sim.current_time}] Producer {event.id} done")

    def _consumer(self, sim, event):
        self.logger.debug(f"[{sim.current_time}] Consumer {event.id} trying to get")
        sim, event = yield from get(sim, event, self.store)
        self.logger.debug(f"[{sim.current_time}] Consumer {event.id} got {event.item!r}")
        return event.item

    def build(self) -> None:
        """Create and admit all producer and consumer events."""
        if self._built:
            return

        for index, arrival_time in enumerate(self._arrivals('producers'), start=1):
            event = create_event(self.sim, arrival_time, self._producer, f"{self.item}-{index}")
            schedule_event(self.sim, event)
            self.producers.append(event)

        for arrival_time in self._arrivals('consumers'):
            event = create_event(self.sim, arrival_time, self._consumer)
            schedule_event(self.sim, event)
            self.consumers.append(event)

        self._built = True
        self.logger.info(
            f"Scenario built: {len(self.producers)} producers, "
            f"{len(self.consumers)} consumers (blocking={self.blocking})"
        )

    def run(self) -> Dict[str, Any]:
        """Run the scenario.

        Returns:
            Dictionary describing the final simulation state
        """
        self.build()
        sim, stats = run_simulation(self.sim, until=self.until)

        return {
            'final_time': float(sim.current_time),
            'duration': stats.duration,
            'total_events': len(sim.events),
            'completed_events': sum(1 for event in sim.events if event.is_done()),
            'parked_events': len(sim.parked_events()),
            'put_requests': len(self.store.put_requests),
            'get_requests': len(self.store.get_requests),
            'events': [json.loads(event.to_json()) for event in sim.events],
        }
