"""Arrival time generation for producer/consumer scenarios."""

import numpy as np
from typing import List, Optional, Sequence

from ..utils.logger import setup_logger

ARRIVAL_TYPES = ("poisson", "uniform", "constant", "explicit")


class ArrivalProcess:
    """Models when processes of one role arrive.

    Supports:
    - Poisson (exponential inter-arrival times)
    - Uniform (evenly spaced)
    - Constant (everyone arrives at the start time)
    - Explicit (a given list of times)
    """

    def __init__(
        self,
        process_type: str = 'poisson',
        rate: float = 1.0,
        times: Optional[Sequence[float]] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """Initialize arrival process.

        Args:
            process_type: Type of arrival process
            rate: Arrivals per unit of virtual time
            times: Arrival times for the explicit process
            rng: Random generator; a fresh unseeded one is used if omitted
        """
        if process_type not in ARRIVAL_TYPES:
            raise ValueError(f"Unknown arrival process: {process_type}")
        if process_type in ('poisson', 'uniform') and rate <= 0:
            raise ValueError("Arrival rate must be positive")
        if process_type == 'explicit' and times is None:
            raise ValueError("Explicit arrival process requires 'times'")

        self.process_type = process_type
        self.rate = rate
        self.times = list(times) if times is not None else None
        self.rng = rng if rng is not None else np.random.default_rng()
        self.logger = setup_logger(self.__class__.__name__)

    def generate_arrivals(self, start_time: float, count: int) -> List[float]:
        """Generate arrival times.

        Args:
            start_time: Earliest arrival time
            count: Number of arrivals (ignored by the explicit process)

        Returns:
            Non-decreasing list of arrival times
        """
        if count < 0:
            raise ValueError("Arrival count cannot be negative")

        if self.process_type == 'poisson':
            gaps = self.rng.exponential(1.0 / self.rate, size=count)
            arrivals = start_time + np.cumsum(gaps)
        elif self.process_type == 'uniform':
            arrivals = start_time + np.arange(count) / self.rate
        elif self.process_type == 'constant':
            arrivals = np.full(count, start_time, dtype=float)
        else:
            arrivals = np.sort(np.asarray(self.times, dtype=float))

        # Plain floats keep events serialisable
        result = [float(t) for t in arrivals]
        self.logger.debug(f"Generated {len(result)} {self.process_type} arrivals")
        return result
